"""Group management endpoints: ``/admin/realms/{realm}/groups``."""

from __future__ import annotations

from ..core.interpreter import Expect
from ..models import HttpMethod, JsonBody
from .base import PageOptions, Representation, ResourceApi, created_id, require


class GroupQuery(PageOptions):
    """Options for listing groups."""

    search: str | None = None
    q: str | None = None
    exact: bool | None = None
    brief_representation: bool | None = None
    populate_hierarchy: bool | None = None
    sub_groups_count: bool | None = None


class GroupMembersQuery(PageOptions):
    brief_representation: bool | None = None


class GroupsApi(ResourceApi):
    """Groups of the configured realm."""

    async def list(self, query: GroupQuery | None = None) -> list[Representation]:
        return await self._client.request(
            "/groups", query=query.to_query() if query else None
        )

    async def count(self, *, search: str | None = None, top: bool | None = None) -> int:
        """Number of groups, optionally filtered by name or top-level only."""
        result = await self._client.request(
            "/groups/count", query={"search": search, "top": top}
        )
        return int(result["count"])

    async def create(self, group: Representation) -> str:
        """Create a top-level group and return its id."""
        require(group, "Group data")
        result = await self._client.request(
            "/groups", HttpMethod.POST, JsonBody(value=group)
        )
        return created_id(result, "/groups")

    async def get(self, group_id: str) -> Representation:
        require(group_id, "Group ID")
        return await self._client.request(f"/groups/{group_id}")

    async def update(self, group_id: str, group: Representation) -> None:
        require(group_id, "Group ID")
        await self._client.request(
            f"/groups/{group_id}",
            HttpMethod.PUT,
            JsonBody(value=group),
            expect=Expect.VOID,
        )

    async def delete(self, group_id: str) -> None:
        require(group_id, "Group ID")
        await self._client.request(
            f"/groups/{group_id}", HttpMethod.DELETE, expect=Expect.VOID
        )

    async def children(
        self,
        group_id: str,
        query: GroupQuery | None = None,
    ) -> list[Representation]:
        require(group_id, "Group ID")
        return await self._client.request(
            f"/groups/{group_id}/children",
            query=query.to_query() if query else None,
        )

    async def create_child(self, group_id: str, child: Representation) -> str:
        """Create (or move) a subgroup under ``group_id`` and return its id."""
        require(group_id, "Group ID")
        result = await self._client.request(
            f"/groups/{group_id}/children", HttpMethod.POST, JsonBody(value=child)
        )
        # Moving an existing group answers 204 with no Location.
        if result is None:
            return child.get("id", "")
        return created_id(result, f"/groups/{group_id}/children")

    async def members(
        self,
        group_id: str,
        query: GroupMembersQuery | None = None,
    ) -> list[Representation]:
        require(group_id, "Group ID")
        return await self._client.request(
            f"/groups/{group_id}/members",
            query=query.to_query() if query else None,
        )
