"""Role mappings of users and groups.

``client.role_mappings.for_user(user_id)`` and ``for_group(group_id)``
return an API bound to ``/users/{id}/role-mappings`` or
``/groups/{id}/role-mappings``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.interpreter import Expect
from ..models import HttpMethod, JsonBody
from .base import Representation, ResourceApi, require

if TYPE_CHECKING:
    from ..client import AsyncKeycloakAdminClient


def _brief(brief_representation: bool) -> dict[str, bool] | None:
    # Keycloak defaults to brief representations.
    return None if brief_representation else {"briefRepresentation": False}


class RoleMappingsApi(ResourceApi):
    """Realm and client role mappings of one user or group."""

    def __init__(self, client: AsyncKeycloakAdminClient, owner_path: str) -> None:
        super().__init__(client)
        self._base = f"{owner_path}/role-mappings"

    async def all(self) -> Representation:
        return await self._client.request(self._base)

    # Realm roles

    async def realm(self) -> list[Representation]:
        return await self._client.request(f"{self._base}/realm")

    async def add_realm(self, roles: list[Representation]) -> None:
        await self._change(f"{self._base}/realm", HttpMethod.POST, roles)

    async def remove_realm(self, roles: list[Representation]) -> None:
        await self._change(f"{self._base}/realm", HttpMethod.DELETE, roles)

    async def available_realm(self) -> list[Representation]:
        return await self._client.request(f"{self._base}/realm/available")

    async def effective_realm(self, brief_representation: bool = True) -> list[Representation]:
        return await self._client.request(
            f"{self._base}/realm/composite", query=_brief(brief_representation)
        )

    # Client roles

    async def client(self, client_id: str) -> list[Representation]:
        return await self._client.request(self._client_path(client_id))

    async def add_client(self, client_id: str, roles: list[Representation]) -> None:
        await self._change(self._client_path(client_id), HttpMethod.POST, roles)

    async def remove_client(self, client_id: str, roles: list[Representation]) -> None:
        await self._change(self._client_path(client_id), HttpMethod.DELETE, roles)

    async def available_client(self, client_id: str) -> list[Representation]:
        return await self._client.request(f"{self._client_path(client_id)}/available")

    async def effective_client(
        self, client_id: str, brief_representation: bool = True
    ) -> list[Representation]:
        return await self._client.request(
            f"{self._client_path(client_id)}/composite",
            query=_brief(brief_representation),
        )

    def _client_path(self, client_id: str) -> str:
        require(client_id, "Client ID")
        return f"{self._base}/clients/{client_id}"

    async def _change(
        self, path: str, method: HttpMethod, roles: list[Representation]
    ) -> None:
        require(roles, "Roles")
        await self._client.request(path, method, JsonBody(value=roles), expect=Expect.VOID)


class RoleMappingsFactory(ResourceApi):
    """Builds role mapping APIs for users and groups."""

    def for_user(self, user_id: str) -> RoleMappingsApi:
        require(user_id, "User ID")
        return RoleMappingsApi(self._client, f"/users/{user_id}")

    def for_group(self, group_id: str) -> RoleMappingsApi:
        require(group_id, "Group ID")
        return RoleMappingsApi(self._client, f"/groups/{group_id}")
