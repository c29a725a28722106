"""Request dispatcher shared by every resource API.

Resolves realm-scoped URLs, attaches the bearer token, serializes the body,
and runs each call through an explicit lifecycle that allows exactly one
refresh-and-retry after a 401.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import httpx

from ..errors import AuthenticationError, ErrorCode, KeycloakAdminError
from ..models import JSON_CONTENT_TYPE, JsonBody
from ..telemetry import get_logger, trace_operation
from .errors import ErrorFactory
from .interpreter import Expect, ResponseInterpreter

if TYPE_CHECKING:
    from ..config import KeycloakConfig
    from ..models import RequestDescriptor
    from .credential_store import CredentialStore

# Sentinel for "use the configured realm"
CONFIGURED_REALM: Any = object()


class CallState(StrEnum):
    """Lifecycle states of one logical call."""

    PENDING = "pending"
    DISPATCHED = "dispatched"
    RETRYING_AUTH = "retrying_auth"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_TRANSITIONS: dict[CallState, frozenset[CallState]] = {
    CallState.PENDING: frozenset({CallState.DISPATCHED, CallState.FAILED}),
    CallState.DISPATCHED: frozenset(
        {CallState.SUCCEEDED, CallState.RETRYING_AUTH, CallState.FAILED}
    ),
    CallState.RETRYING_AUTH: frozenset({CallState.DISPATCHED, CallState.FAILED}),
    CallState.SUCCEEDED: frozenset(),
    CallState.FAILED: frozenset(),
}


class IllegalTransitionError(RuntimeError):
    """A call lifecycle was driven through a forbidden transition."""


class CallLifecycle:
    """State machine for one call: RETRYING_AUTH may be entered once."""

    def __init__(self) -> None:
        self.state = CallState.PENDING
        self.history: list[CallState] = [CallState.PENDING]

    @property
    def retried(self) -> bool:
        return CallState.RETRYING_AUTH in self.history

    @property
    def can_retry_auth(self) -> bool:
        return self.state is CallState.DISPATCHED and not self.retried

    @property
    def attempts(self) -> int:
        return self.history.count(CallState.DISPATCHED)

    def advance(self, state: CallState) -> None:
        if state not in _TRANSITIONS[self.state]:
            msg = f"Illegal call transition {self.state} -> {state}"
            raise IllegalTransitionError(msg)
        if state is CallState.RETRYING_AUTH and self.retried:
            msg = "Authentication retry already performed for this call"
            raise IllegalTransitionError(msg)
        self.state = state
        self.history.append(state)


class RequestDispatcher:
    """Issues authenticated admin API calls."""

    def __init__(
        self,
        config: KeycloakConfig,
        http: httpx.AsyncClient,
        store: CredentialStore,
        interpreter: ResponseInterpreter | None = None,
    ) -> None:
        """Initialize request dispatcher.

        Args:
            config: SDK configuration.
            http: Shared async HTTP client.
            store: Credential store of the owning client.
            interpreter: Response interpreter.
        """
        self.config = config
        self._http = http
        self._store = store
        self._interpreter = interpreter or ResponseInterpreter()
        self._logger = get_logger(config)

    def build_url(self, path: str, realm: str | None = CONFIGURED_REALM) -> str:
        """Join admin prefix, realm and resource path.

        ``realm=None`` addresses realm-less endpoints under ``/admin/realms``.
        """
        if realm is CONFIGURED_REALM:
            realm = self.config.realm
        base = f"{self.config.admin_url}/realms"
        if realm is not None:
            base = f"{base}/{realm}"
        return f"{base}{path}"

    def build_headers(self, descriptor: RequestDescriptor, token: str) -> httpx.Headers:
        """Default headers with per-call overrides applied case-insensitively."""
        headers = httpx.Headers({
            "Authorization": f"Bearer {token}",
            "Content-Type": (
                descriptor.body.content_type if descriptor.body else JSON_CONTENT_TYPE
            ),
        })
        for name, value in descriptor.headers.items():
            headers[name] = value
        return headers

    @staticmethod
    def serialize_body(descriptor: RequestDescriptor) -> str | bytes | None:
        body = descriptor.body
        if body is None:
            return None
        if isinstance(body, JsonBody):
            return json.dumps(body.value)
        return body.content

    async def dispatch(
        self,
        descriptor: RequestDescriptor,
        *,
        realm: str | None = CONFIGURED_REALM,
        expect: Expect = Expect.JSON,
    ) -> Any:
        """Run one call to completion.

        Args:
            descriptor: The call to make.
            realm: Target realm; defaults to the configured one, ``None``
                for realm-less endpoints.
            expect: Declared return shape.

        Returns:
            Decoded body, text, created resource id, or ``None``.

        Raises:
            AuthenticationError: On credential failure or a 401 after the
                single retry.
            RequestError: On other non-2xx responses.
            CreationError: On 201 without a usable Location header.
            NetworkError: On transport failure.
        """
        url = self.build_url(descriptor.path, realm)
        content = self.serialize_body(descriptor)
        correlation_id = ErrorFactory.generate_correlation_id()
        call = CallLifecycle()

        with trace_operation(
            "keycloak.request",
            attributes={
                "http.method": descriptor.method.value,
                "url.path": descriptor.path,
                "keycloak.realm": (
                    self.config.realm if realm is CONFIGURED_REALM else realm
                ),
                "keycloak.correlation_id": correlation_id,
            },
        ) as span:
            while True:
                try:
                    token = await self._store.get_valid_token()
                except AuthenticationError as e:
                    call.advance(CallState.FAILED)
                    if e.correlation_id is None:
                        e.correlation_id = correlation_id
                    raise

                call.advance(CallState.DISPATCHED)
                response = await self._send(
                    descriptor, url, token, content, correlation_id, call
                )

                if response.status_code == 401:
                    if call.can_retry_auth and self._store.can_refresh:
                        call.advance(CallState.RETRYING_AUTH)
                        self._logger.info(
                            "Access token rejected, refreshing",
                            path=descriptor.path,
                            correlation_id=correlation_id,
                        )
                        self._store.invalidate(token)
                        continue
                    call.advance(CallState.FAILED)
                    raise self._unauthorized(response, descriptor, correlation_id, call)

                try:
                    result = self._interpreter.interpret(
                        response,
                        descriptor,
                        expect=expect,
                        correlation_id=correlation_id,
                    )
                except KeycloakAdminError:
                    call.advance(CallState.FAILED)
                    self._logger.warning(
                        "Admin API request failed",
                        method=descriptor.method.value,
                        path=descriptor.path,
                        status=response.status_code,
                        correlation_id=correlation_id,
                    )
                    raise

                call.advance(CallState.SUCCEEDED)
                span.set_attribute("http.status_code", response.status_code)
                span.set_attribute("keycloak.attempts", call.attempts)
                return result

    async def _send(
        self,
        descriptor: RequestDescriptor,
        url: str,
        token: str,
        content: str | bytes | None,
        correlation_id: str,
        call: CallLifecycle,
    ) -> httpx.Response:
        try:
            return await self._http.request(
                descriptor.method.value,
                url,
                params=descriptor.query or None,
                content=content,
                headers=self.build_headers(descriptor, token),
            )
        except httpx.HTTPError as e:
            call.advance(CallState.FAILED)
            error = ErrorFactory.from_exception(
                e, descriptor.path, correlation_id=correlation_id
            )
            self._logger.warning(
                "Admin API request could not complete",
                method=descriptor.method.value,
                path=descriptor.path,
                error=str(e),
                correlation_id=correlation_id,
            )
            raise error from e

    def _unauthorized(
        self,
        response: httpx.Response,
        descriptor: RequestDescriptor,
        correlation_id: str,
        call: CallLifecycle,
    ) -> AuthenticationError:
        error = ErrorFactory.unauthorized(
            response, descriptor.path, correlation_id=correlation_id
        )
        if call.retried:
            error.message = f"Request unauthorized after token refresh: {error.message}"
            error.code = str(ErrorCode.TOKEN_REFRESH_FAILED)
            error.args = (error.message,)
        self._logger.warning(
            "Admin API request unauthorized",
            path=descriptor.path,
            attempts=call.attempts,
            correlation_id=correlation_id,
        )
        return error
