"""User management endpoints: ``/admin/realms/{realm}/users``."""

from __future__ import annotations

from ..core.interpreter import Expect
from ..models import HttpMethod, JsonBody
from .base import PageOptions, Representation, ResourceApi, created_id, require


class UserQuery(PageOptions):
    """Options for searching users."""

    search: str | None = None
    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    enabled: bool | None = None
    email_verified: bool | None = None
    exact: bool | None = None
    brief_representation: bool | None = None
    idp_alias: str | None = None
    q: str | None = None


class UserGroupsQuery(PageOptions):
    search: str | None = None
    brief_representation: bool | None = None


class UsersApi(ResourceApi):
    """Users of the configured realm."""

    async def list(self, query: UserQuery | None = None) -> list[Representation]:
        return await self._client.request(
            "/users", query=query.to_query() if query else None
        )

    async def count(self, query: UserQuery | None = None) -> int:
        result = await self._client.request(
            "/users/count", query=query.to_query() if query else None
        )
        return int(result)

    async def create(self, user: Representation) -> str:
        """Create a user and return its id."""
        require(user, "User data")
        result = await self._client.request(
            "/users", HttpMethod.POST, JsonBody(value=user)
        )
        return created_id(result, "/users")

    async def get(
        self,
        user_id: str,
        *,
        user_profile_metadata: bool | None = None,
    ) -> Representation:
        require(user_id, "User ID")
        return await self._client.request(
            f"/users/{user_id}",
            query={"userProfileMetadata": user_profile_metadata},
        )

    async def update(self, user_id: str, user: Representation) -> None:
        require(user_id, "User ID")
        await self._client.request(
            f"/users/{user_id}",
            HttpMethod.PUT,
            JsonBody(value=user),
            expect=Expect.VOID,
        )

    async def delete(self, user_id: str) -> None:
        require(user_id, "User ID")
        await self._client.request(
            f"/users/{user_id}", HttpMethod.DELETE, expect=Expect.VOID
        )

    async def groups(
        self,
        user_id: str,
        query: UserGroupsQuery | None = None,
    ) -> list[Representation]:
        require(user_id, "User ID")
        return await self._client.request(
            f"/users/{user_id}/groups",
            query=query.to_query() if query else None,
        )

    async def join_group(self, user_id: str, group_id: str) -> None:
        require(user_id, "User ID")
        require(group_id, "Group ID")
        await self._client.request(
            f"/users/{user_id}/groups/{group_id}", HttpMethod.PUT, expect=Expect.VOID
        )

    async def leave_group(self, user_id: str, group_id: str) -> None:
        require(user_id, "User ID")
        require(group_id, "Group ID")
        await self._client.request(
            f"/users/{user_id}/groups/{group_id}",
            HttpMethod.DELETE,
            expect=Expect.VOID,
        )

    async def reset_password(
        self,
        user_id: str,
        password: str,
        *,
        temporary: bool = False,
    ) -> None:
        """Set a new password credential for the user."""
        require(user_id, "User ID")
        require(password, "Password")
        await self._client.request(
            f"/users/{user_id}/reset-password",
            HttpMethod.PUT,
            JsonBody(value={"type": "password", "value": password, "temporary": temporary}),
            expect=Expect.VOID,
        )
