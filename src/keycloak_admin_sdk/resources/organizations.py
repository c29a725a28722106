"""Organization endpoints: ``/admin/realms/{realm}/organizations``.

Member invitations use form-encoded bodies; adding a member sends the bare
user id as the request body.
"""

from __future__ import annotations

from ..core.interpreter import Expect
from ..models import HttpMethod, JsonBody, RawBody
from .base import PageOptions, Representation, ResourceApi, created_id, require


class OrganizationQuery(PageOptions):
    search: str | None = None
    q: str | None = None
    exact: bool | None = None
    brief_representation: bool | None = None


class OrganizationMembersQuery(PageOptions):
    search: str | None = None
    exact: bool | None = None
    membership_type: str | None = None


class OrganizationsApi(ResourceApi):
    """Organizations of the configured realm."""

    async def list(
        self,
        query: OrganizationQuery | None = None,
    ) -> list[Representation]:
        return await self._client.request(
            "/organizations", query=query.to_query() if query else None
        )

    async def create(self, organization: Representation) -> str:
        """Create an organization and return its id."""
        require(organization, "Organization data")
        require(organization.get("name"), "Organization name")
        result = await self._client.request(
            "/organizations", HttpMethod.POST, JsonBody(value=organization)
        )
        return created_id(result, "/organizations")

    async def get(self, organization_id: str) -> Representation:
        require(organization_id, "Organization ID")
        return await self._client.request(f"/organizations/{organization_id}")

    async def update(self, organization_id: str, organization: Representation) -> None:
        require(organization_id, "Organization ID")
        await self._client.request(
            f"/organizations/{organization_id}",
            HttpMethod.PUT,
            JsonBody(value=organization),
            expect=Expect.VOID,
        )

    async def delete(self, organization_id: str) -> None:
        require(organization_id, "Organization ID")
        await self._client.request(
            f"/organizations/{organization_id}", HttpMethod.DELETE, expect=Expect.VOID
        )

    async def members(
        self,
        organization_id: str,
        query: OrganizationMembersQuery | None = None,
    ) -> list[Representation]:
        require(organization_id, "Organization ID")
        return await self._client.request(
            f"/organizations/{organization_id}/members",
            query=query.to_query() if query else None,
        )

    async def members_count(self, organization_id: str) -> int:
        require(organization_id, "Organization ID")
        result = await self._client.request(
            f"/organizations/{organization_id}/members/count"
        )
        return int(result)

    async def add_member(self, organization_id: str, user_id: str) -> None:
        require(organization_id, "Organization ID")
        require(user_id, "User ID")
        await self._client.request(
            f"/organizations/{organization_id}/members",
            HttpMethod.POST,
            RawBody(content=user_id),
            expect=Expect.VOID,
        )

    async def remove_member(self, organization_id: str, user_id: str) -> None:
        require(organization_id, "Organization ID")
        require(user_id, "User ID")
        await self._client.request(
            f"/organizations/{organization_id}/members/{user_id}",
            HttpMethod.DELETE,
            expect=Expect.VOID,
        )

    async def invite_existing_user(self, organization_id: str, user_id: str) -> None:
        require(organization_id, "Organization ID")
        require(user_id, "User ID")
        await self._client.request(
            f"/organizations/{organization_id}/members/invite-existing-user",
            HttpMethod.POST,
            RawBody.form({"id": user_id}),
            expect=Expect.VOID,
        )

    async def invite_user(
        self,
        organization_id: str,
        email: str,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> None:
        """Send an invitation (or registration) link to ``email``."""
        require(organization_id, "Organization ID")
        require(email, "Email")
        await self._client.request(
            f"/organizations/{organization_id}/members/invite-user",
            HttpMethod.POST,
            RawBody.form(
                {"email": email, "firstName": first_name, "lastName": last_name}
            ),
            expect=Expect.VOID,
        )
