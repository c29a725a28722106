"""Client endpoints: ``/admin/realms/{realm}/clients``."""

from __future__ import annotations

from urllib.parse import quote

from ..core.interpreter import Expect
from ..models import HttpMethod, JsonBody
from .base import PageOptions, Representation, ResourceApi, created_id, require


class ClientQuery(PageOptions):
    client_id: str | None = None
    search: bool | None = None
    viewable_only: bool | None = None


class ClientsApi(ResourceApi):
    """OIDC/SAML clients, addressed by their internal id (not ``clientId``)."""

    async def list(self, query: ClientQuery | None = None) -> list[Representation]:
        return await self._client.request(
            "/clients", query=query.to_query() if query else None
        )

    async def create(self, client: Representation) -> str:
        """Create a client and return its internal id."""
        require(client, "Client data")
        require(client.get("clientId"), "Client ID")
        result = await self._client.request(
            "/clients", HttpMethod.POST, JsonBody(value=client)
        )
        return created_id(result, "/clients")

    async def get(self, client_id: str) -> Representation:
        require(client_id, "Client ID")
        return await self._client.request(f"/clients/{client_id}")

    async def update(self, client_id: str, client: Representation) -> None:
        require(client_id, "Client ID")
        await self._client.request(
            f"/clients/{client_id}",
            HttpMethod.PUT,
            JsonBody(value=client),
            expect=Expect.VOID,
        )

    async def delete(self, client_id: str) -> None:
        require(client_id, "Client ID")
        await self._client.request(
            f"/clients/{client_id}", HttpMethod.DELETE, expect=Expect.VOID
        )

    # Credentials

    async def get_secret(self, client_id: str) -> Representation:
        require(client_id, "Client ID")
        return await self._client.request(f"/clients/{client_id}/client-secret")

    async def regenerate_secret(self, client_id: str) -> Representation:
        require(client_id, "Client ID")
        return await self._client.request(
            f"/clients/{client_id}/client-secret", HttpMethod.POST
        )

    # Client scopes

    async def default_client_scopes(self, client_id: str) -> list[Representation]:
        require(client_id, "Client ID")
        return await self._client.request(f"/clients/{client_id}/default-client-scopes")

    async def add_default_client_scope(self, client_id: str, scope_id: str) -> None:
        await self._set_scope(client_id, "default", scope_id, HttpMethod.PUT)

    async def remove_default_client_scope(self, client_id: str, scope_id: str) -> None:
        await self._set_scope(client_id, "default", scope_id, HttpMethod.DELETE)

    async def optional_client_scopes(self, client_id: str) -> list[Representation]:
        require(client_id, "Client ID")
        return await self._client.request(f"/clients/{client_id}/optional-client-scopes")

    async def add_optional_client_scope(self, client_id: str, scope_id: str) -> None:
        await self._set_scope(client_id, "optional", scope_id, HttpMethod.PUT)

    async def remove_optional_client_scope(self, client_id: str, scope_id: str) -> None:
        await self._set_scope(client_id, "optional", scope_id, HttpMethod.DELETE)

    async def _set_scope(
        self, client_id: str, kind: str, scope_id: str, method: HttpMethod
    ) -> None:
        require(client_id, "Client ID")
        require(scope_id, "Client scope ID")
        await self._client.request(
            f"/clients/{client_id}/{kind}-client-scopes/{scope_id}",
            method,
            expect=Expect.VOID,
        )

    async def user_sessions(
        self, client_id: str, page: PageOptions | None = None
    ) -> list[Representation]:
        require(client_id, "Client ID")
        return await self._client.request(
            f"/clients/{client_id}/user-sessions",
            query=page.to_query() if page else None,
        )

    # Client roles

    async def list_roles(self, client_id: str) -> list[Representation]:
        require(client_id, "Client ID")
        return await self._client.request(f"/clients/{client_id}/roles")

    async def get_role(self, client_id: str, role_name: str) -> Representation:
        return await self._client.request(self._role_path(client_id, role_name))

    async def create_role(self, client_id: str, role: Representation) -> str:
        """Create a client role and return its id.

        The Location of a created role ends in its name, so the role is
        read back to learn the id.
        """
        require(client_id, "Client ID")
        require(role, "Role data")
        require(role.get("name"), "Role name")
        await self._client.request(
            f"/clients/{client_id}/roles",
            HttpMethod.POST,
            JsonBody(value=role),
            expect=Expect.VOID,
        )
        created = await self.get_role(client_id, role["name"])
        return created_id(created, f"/clients/{client_id}/roles")

    async def update_role(
        self, client_id: str, role_name: str, role: Representation
    ) -> None:
        await self._client.request(
            self._role_path(client_id, role_name),
            HttpMethod.PUT,
            JsonBody(value=role),
            expect=Expect.VOID,
        )

    async def delete_role(self, client_id: str, role_name: str) -> None:
        await self._client.request(
            self._role_path(client_id, role_name), HttpMethod.DELETE, expect=Expect.VOID
        )

    @staticmethod
    def _role_path(client_id: str, role_name: str) -> str:
        require(client_id, "Client ID")
        require(role_name, "Role name")
        return f"/clients/{client_id}/roles/{quote(role_name, safe='')}"
