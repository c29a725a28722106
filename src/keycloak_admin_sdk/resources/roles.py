"""Realm role endpoints: ``/admin/realms/{realm}/roles``."""

from __future__ import annotations

from urllib.parse import quote

from ..core.interpreter import Expect
from ..models import HttpMethod, JsonBody
from .base import PageOptions, Representation, ResourceApi, require


class RoleQuery(PageOptions):
    search: str | None = None
    brief_representation: bool | None = None


def _role_path(role_name: str) -> str:
    # Role names may contain spaces and slashes.
    return f"/roles/{quote(role_name, safe='')}"


class RolesApi(ResourceApi):
    """Realm-level roles, addressed by name."""

    async def list(self, query: RoleQuery | None = None) -> list[Representation]:
        return await self._client.request(
            "/roles", query=query.to_query() if query else None
        )

    async def create(self, role: Representation) -> None:
        """Create a realm role.

        Keycloak answers with a Location ending in the role name, so the
        name itself is the identifier and nothing is returned.
        """
        require(role, "Role data")
        require(role.get("name"), "Role name")
        await self._client.request(
            "/roles", HttpMethod.POST, JsonBody(value=role), expect=Expect.VOID
        )

    async def get(self, role_name: str) -> Representation:
        require(role_name, "Role name")
        return await self._client.request(_role_path(role_name))

    async def update(self, role_name: str, role: Representation) -> None:
        require(role_name, "Role name")
        await self._client.request(
            _role_path(role_name), HttpMethod.PUT, JsonBody(value=role), expect=Expect.VOID
        )

    async def delete(self, role_name: str) -> None:
        require(role_name, "Role name")
        await self._client.request(
            _role_path(role_name), HttpMethod.DELETE, expect=Expect.VOID
        )
