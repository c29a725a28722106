"""End-to-end tests for AsyncKeycloakAdminClient against the fake server."""

import asyncio
from collections.abc import Callable

import httpx
import pytest

from keycloak_admin_sdk import (
    AsyncKeycloakAdminClient,
    ConflictError,
    Expect,
    HttpMethod,
    JsonBody,
    KeycloakConfig,
    NotFoundError,
)

from ..conftest import ADMIN_PREFIX, FakeKeycloak

ClientFactory = Callable[[KeycloakConfig], AsyncKeycloakAdminClient]


class TestLifecycle:
    """Tests for client construction and cleanup."""

    @pytest.mark.asyncio
    async def test_owned_http_client_is_closed(self, password_config: KeycloakConfig) -> None:
        async with AsyncKeycloakAdminClient(password_config) as kc:
            http = kc._http

        assert http.is_closed

    @pytest.mark.asyncio
    async def test_injected_http_client_is_left_open(
        self, fake: FakeKeycloak, password_config: KeycloakConfig
    ) -> None:
        async with httpx.AsyncClient(transport=fake.transport) as http:
            async with AsyncKeycloakAdminClient(password_config, http_client=http):
                pass

            assert not http.is_closed

    @pytest.mark.asyncio
    async def test_login_and_token(
        self, fake: FakeKeycloak, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        session = await admin_client.login()

        assert session.access_token == "token-1"
        assert await admin_client.get_valid_token() == "token-1"
        assert admin_client.credentials.session == session
        assert len(fake.token_requests) == 1

    @pytest.mark.asyncio
    async def test_instances_do_not_share_sessions(
        self,
        fake: FakeKeycloak,
        make_client: ClientFactory,
        password_config: KeycloakConfig,
    ) -> None:
        first = make_client(password_config)
        second = make_client(password_config)

        assert await first.get_valid_token() != await second.get_valid_token()
        assert len(fake.token_requests) == 2


class TestGroupsRoundTrip:
    """Create, read, update and delete through the client."""

    @pytest.mark.asyncio
    async def test_create_then_get(
        self, fake: FakeKeycloak, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        group_id = await admin_client.groups.create({"name": "eng-42"})

        group = await admin_client.groups.get(group_id)

        assert group["name"] == "eng-42"
        assert group["id"] == group_id
        assert len(fake.token_requests) == 1

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(
        self, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        await admin_client.groups.create({"name": "eng"})

        with pytest.raises(ConflictError) as exc_info:
            await admin_client.groups.create({"name": "eng"})

        assert exc_info.value.status_code == 409
        assert "already exists" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_update_and_delete(
        self, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        group_id = await admin_client.groups.create({"name": "ops"})

        await admin_client.groups.update(group_id, {"attributes": {"team": ["sre"]}})
        assert (await admin_client.groups.get(group_id))["attributes"] == {"team": ["sre"]}

        await admin_client.groups.delete(group_id)
        with pytest.raises(NotFoundError):
            await admin_client.groups.get(group_id)

    @pytest.mark.asyncio
    async def test_list(self, admin_client: AsyncKeycloakAdminClient) -> None:
        await admin_client.groups.create({"name": "a"})
        await admin_client.groups.create({"name": "b"})

        groups = await admin_client.groups.list()

        assert sorted(g["name"] for g in groups) == ["a", "b"]


class TestConcurrency:
    """Tests for concurrent calls sharing one session."""

    @pytest.mark.asyncio
    async def test_concurrent_requests_acquire_once(
        self, fake: FakeKeycloak, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        fake.token_delay = 0.05

        results = await asyncio.gather(
            *(admin_client.request("/groups") for _ in range(5))
        )

        assert results == [[]] * 5
        assert len(fake.token_requests) == 1

    @pytest.mark.asyncio
    async def test_concurrent_401s_refresh_once(
        self, fake: FakeKeycloak, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        await admin_client.login()
        fake.revoke_all()
        fake.token_delay = 0.05

        results = await asyncio.gather(
            *(admin_client.request("/groups") for _ in range(5))
        )

        assert results == [[]] * 5
        assert fake.grant_types() == ["password", "refresh_token"]


class TestRawRequests:
    """Tests for the generic request entry points."""

    @pytest.mark.asyncio
    async def test_request_for_other_realm(
        self, fake: FakeKeycloak, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        fake.enqueue(
            "GET", "/admin/realms/other/users", httpx.Response(200, json=[{"id": "u"}])
        )

        users = await admin_client.request_for_realm("other", "/users")

        assert users == [{"id": "u"}]
        assert fake.api_requests[0].headers["Authorization"] == "Bearer token-1"

    @pytest.mark.asyncio
    async def test_request_for_realm_requires_realm(
        self, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        with pytest.raises(ValueError, match="realm"):
            await admin_client.request_for_realm("", "/users")

    @pytest.mark.asyncio
    async def test_request_without_realm(
        self, fake: FakeKeycloak, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        fake.enqueue("GET", "/admin/realms", httpx.Response(200, json=[]))

        assert await admin_client.request_without_realm("", query={"briefRepresentation": True}) == []
        assert fake.api_requests[0].url.params["briefRepresentation"] == "true"

    @pytest.mark.asyncio
    async def test_request_with_headers_and_void(
        self, fake: FakeKeycloak, admin_client: AsyncKeycloakAdminClient
    ) -> None:
        fake.enqueue(
            "PUT", f"{ADMIN_PREFIX}/users/u-1", httpx.Response(200, json={"ignored": 1})
        )

        result = await admin_client.request(
            "/users/u-1",
            HttpMethod.PUT,
            JsonBody(value={"enabled": False}),
            headers={"X-Trace": "t-1"},
            expect=Expect.VOID,
        )

        assert result is None
        assert fake.api_requests[0].headers["X-Trace"] == "t-1"
