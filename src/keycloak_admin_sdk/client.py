"""Async Keycloak Admin API client.

Wires the credential store, token acquirer, dispatcher and resource APIs
for one realm. Each instance owns its own session state.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self

from .core.credential_store import CredentialStore
from .core.dispatcher import CONFIGURED_REALM, RequestDispatcher
from .core.interpreter import Expect, ResponseInterpreter
from .core.token_acquirer import TokenAcquirer
from .http import create_async_http_client
from .models import HttpMethod, RequestDescriptor
from .resources import (
    ClientsApi,
    GroupsApi,
    IdentityProvidersApi,
    OrganizationsApi,
    RealmsApi,
    RoleMappingsFactory,
    RolesApi,
    UsersApi,
)
from .telemetry import configure_telemetry, get_logger

if TYPE_CHECKING:
    import httpx

    from .config import KeycloakConfig
    from .models import JsonBody, RawBody, TokenData


class AsyncKeycloakAdminClient:
    """Asynchronous client for the Keycloak Admin REST API.

    Usage:
        async with AsyncKeycloakAdminClient(config) as kc:
            group_id = await kc.groups.create({"name": "eng-42"})
            group = await kc.groups.get(group_id)
    """

    def __init__(
        self,
        config: KeycloakConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize async client.

        Args:
            config: SDK configuration.
            http_client: Optional pre-built HTTP client; it is not closed by
                :meth:`close`.
        """
        self.config = config
        configure_telemetry(config.telemetry)
        self._owns_http = http_client is None
        self._http = http_client or create_async_http_client(config)
        self._acquirer = TokenAcquirer(config, self._http)
        self._store = CredentialStore(self._acquirer)
        self._dispatcher = RequestDispatcher(
            config, self._http, self._store, ResponseInterpreter()
        )
        self._logger = get_logger(config)

        self.groups = GroupsApi(self)
        self.users = UsersApi(self)
        self.roles = RolesApi(self)
        self.organizations = OrganizationsApi(self)
        self.realms = RealmsApi(self)
        self.clients = ClientsApi(self)
        self.identity_providers = IdentityProvidersApi(self)
        self.role_mappings = RoleMappingsFactory(self)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    @property
    def credentials(self) -> CredentialStore:
        return self._store

    async def login(self) -> TokenData:
        """Authenticate now instead of on the first request."""
        session = await self._store.login()
        self._logger.info("Authenticated")
        return session

    async def get_valid_token(self) -> str:
        return await self._store.get_valid_token()

    async def request(
        self,
        path: str,
        method: HttpMethod | str = HttpMethod.GET,
        body: JsonBody | RawBody | None = None,
        query: Mapping[str, Any] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        expect: Expect = Expect.JSON,
    ) -> Any:
        """Call an endpoint of the configured realm.

        Args:
            path: Realm-relative path, e.g. ``/groups``.
            method: HTTP verb.
            body: JSON or raw payload.
            query: Query options; ``None`` values are omitted.
            headers: Header overrides.
            expect: ``Expect.VOID`` to discard the response body.

        Returns:
            Decoded JSON, text, the id of a created resource, or ``None``.
        """
        descriptor = RequestDescriptor.build(path, method, body, query, headers)
        return await self._dispatcher.dispatch(
            descriptor, realm=CONFIGURED_REALM, expect=expect
        )

    async def request_for_realm(
        self,
        realm: str,
        path: str,
        method: HttpMethod | str = HttpMethod.GET,
        body: JsonBody | RawBody | None = None,
        query: Mapping[str, Any] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        expect: Expect = Expect.JSON,
    ) -> Any:
        """Call an endpoint of another realm with the same credentials."""
        if not realm:
            msg = "realm is required"
            raise ValueError(msg)
        descriptor = RequestDescriptor.build(path, method, body, query, headers)
        return await self._dispatcher.dispatch(descriptor, realm=realm, expect=expect)

    async def request_without_realm(
        self,
        path: str,
        method: HttpMethod | str = HttpMethod.GET,
        body: JsonBody | RawBody | None = None,
        query: Mapping[str, Any] | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        expect: Expect = Expect.JSON,
    ) -> Any:
        """Call a global endpoint under ``/admin/realms`` (e.g. realm listing)."""
        descriptor = RequestDescriptor.build(path, method, body, query, headers)
        return await self._dispatcher.dispatch(descriptor, realm=None, expect=expect)
