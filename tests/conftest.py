"""
Shared test fixtures for Keycloak Admin SDK tests.

Provides configuration fixtures and an in-memory Keycloak served through
``httpx.MockTransport``.
"""

from __future__ import annotations

import asyncio
import itertools
import json
import uuid
from collections import defaultdict, deque
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from keycloak_admin_sdk.client import AsyncKeycloakAdminClient
from keycloak_admin_sdk.config import KeycloakConfig
from keycloak_admin_sdk.http import create_async_http_client

BASE_URL = "https://kc.example.com"
REALM = "test-realm"
TOKEN_PATH = f"/realms/{REALM}/protocol/openid-connect/token"
ADMIN_PREFIX = f"/admin/realms/{REALM}"


class FakeKeycloak:
    """Minimal Keycloak: a token endpoint plus an in-memory groups API.

    Scripted responses queued with :meth:`enqueue` take precedence over the
    built-in routes, one per matching request.
    """

    def __init__(self, *, token_lifetime: int = 300, token_delay: float = 0.0) -> None:
        self.token_lifetime = token_lifetime
        self.token_delay = token_delay
        self.issue_refresh_tokens = True
        self.reject_refresh_tokens = False
        self.token_requests: list[dict[str, str]] = []
        self.api_requests: list[httpx.Request] = []
        self.valid_tokens: set[str] = set()
        self.groups: dict[str, dict[str, Any]] = {}
        self.token_failure: httpx.Response | None = None
        self._scripted: dict[tuple[str, str], deque[httpx.Response]] = defaultdict(deque)
        self._counter = itertools.count(1)
        self.transport = httpx.MockTransport(self.handle)

    # -- scripting -----------------------------------------------------------

    def enqueue(self, method: str, path: str, *responses: httpx.Response) -> None:
        self._scripted[(method.upper(), path)].extend(responses)

    def revoke_all(self) -> None:
        self.valid_tokens.clear()

    def grant_types(self) -> list[str]:
        return [r["grant_type"] for r in self.token_requests]

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.api_requests if r.url.path == path]

    # -- transport -----------------------------------------------------------

    async def handle(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/protocol/openid-connect/token"):
            return await self._token(request)

        self.api_requests.append(request)
        scripted = self._scripted.get((request.method, request.url.path))
        if scripted:
            return scripted.popleft()

        auth = request.headers.get("Authorization", "")
        if auth.removeprefix("Bearer ") not in self.valid_tokens:
            return httpx.Response(401, json={"error": "HTTP 401 Unauthorized"})
        return self._route(request)

    async def _token(self, request: httpx.Request) -> httpx.Response:
        form = dict(httpx.QueryParams(request.content.decode()))
        self.token_requests.append(form)
        if self.token_delay:
            await asyncio.sleep(self.token_delay)
        if self.token_failure is not None:
            failure = self.token_failure
            return httpx.Response(
                failure.status_code, content=failure.content, headers=failure.headers
            )
        if form.get("grant_type") == "refresh_token" and self.reject_refresh_tokens:
            return httpx.Response(
                400,
                json={"error": "invalid_grant", "error_description": "Invalid refresh token"},
            )

        token = f"token-{next(self._counter)}"
        self.valid_tokens.add(token)
        body: dict[str, Any] = {
            "access_token": token,
            "token_type": "Bearer",
            "expires_in": self.token_lifetime,
        }
        if self.issue_refresh_tokens and form.get("grant_type") != "client_credentials":
            body["refresh_token"] = f"refresh-{token}"
            body["refresh_expires_in"] = self.token_lifetime * 6
        return httpx.Response(200, json=body)

    def _route(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix(ADMIN_PREFIX)
        if path == "/groups" and request.method == "POST":
            group = json.loads(request.content)
            if any(g["name"] == group["name"] for g in self.groups.values()):
                return httpx.Response(
                    409, json={"errorMessage": f"Top level group named '{group['name']}' already exists."}
                )
            group_id = str(uuid.uuid4())
            self.groups[group_id] = {"id": group_id, "path": f"/{group['name']}", **group}
            return httpx.Response(
                201, headers={"Location": f"{BASE_URL}{ADMIN_PREFIX}/groups/{group_id}"}
            )
        if path == "/groups" and request.method == "GET":
            return httpx.Response(200, json=list(self.groups.values()))
        if path.startswith("/groups/"):
            group_id = path.removeprefix("/groups/")
            group = self.groups.get(group_id)
            if group is None:
                return httpx.Response(404, json={"error": "Could not find group by id"})
            if request.method == "GET":
                return httpx.Response(200, json=group)
            if request.method == "PUT":
                group.update(json.loads(request.content))
                return httpx.Response(204)
            if request.method == "DELETE":
                del self.groups[group_id]
                return httpx.Response(204)
        return httpx.Response(404, json={"error": "RESTEASY003210: Could not find resource"})


def make_config(auth: dict[str, Any], **overrides: Any) -> KeycloakConfig:
    return KeycloakConfig(base_url=BASE_URL, realm=REALM, auth=auth, **overrides)


@pytest.fixture
def fake() -> FakeKeycloak:
    """Provide a fresh in-memory Keycloak."""
    return FakeKeycloak()


@pytest.fixture
def password_config() -> KeycloakConfig:
    """Provide a password-grant configuration."""
    return make_config(
        {"method": "password", "username": "admin", "password": "admin-secret"}
    )


@pytest.fixture
def client_config() -> KeycloakConfig:
    """Provide a client-credentials configuration."""
    return make_config(
        {"method": "client", "client_id": "automation", "client_secret": "s3cr3t"}
    )


@pytest.fixture
def bearer_config() -> KeycloakConfig:
    """Provide a bearer-token configuration."""
    return make_config({"method": "bearer", "token": "static-token"})


@pytest_asyncio.fixture
async def make_client(
    fake: FakeKeycloak,
) -> AsyncIterator[Callable[[KeycloakConfig], AsyncKeycloakAdminClient]]:
    """Factory building clients wired to the fake server."""
    opened: list[httpx.AsyncClient] = []

    def factory(config: KeycloakConfig) -> AsyncKeycloakAdminClient:
        http = create_async_http_client(config, transport=fake.transport)
        opened.append(http)
        return AsyncKeycloakAdminClient(config, http_client=http)

    yield factory

    for http in opened:
        await http.aclose()


@pytest.fixture
def admin_client(
    make_client: Callable[[KeycloakConfig], AsyncKeycloakAdminClient],
    password_config: KeycloakConfig,
) -> AsyncKeycloakAdminClient:
    """Provide a password-mode client wired to the fake server."""
    return make_client(password_config)


@pytest.fixture
def sample_token_response() -> dict[str, Any]:
    """Provide a sample Keycloak token response."""
    return {
        "access_token": "eyJhbGciOiJSUzI1NiIsInR5cCI6IkpXVCJ9.test",
        "token_type": "Bearer",
        "expires_in": 300,
        "refresh_token": "refresh_token_value",
        "refresh_expires_in": 1800,
        "not-before-policy": 0,
        "scope": "profile email",
    }
