"""Centralized error factory for the Keycloak Admin SDK.

Turns httpx responses and exceptions into the SDK error taxonomy so the
dispatcher, the interpreter and the token acquirer all normalize failures
the same way.
"""

from __future__ import annotations

import uuid
from typing import Any

import httpx

from ..errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    ErrorCode,
    ForbiddenError,
    KeycloakAdminError,
    NetworkError,
    NetworkTimeoutError,
    NotFoundError,
    RequestError,
    ServerError,
)

_STATUS_ERRORS: dict[int, type[RequestError]] = {
    400: BadRequestError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}

# Body fields Keycloak uses for error text, most specific first
_MESSAGE_FIELDS = ("errorMessage", "error_description", "error")


def _json_object(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_text(response: httpx.Response) -> str:
    body = _json_object(response)
    for field in _MESSAGE_FIELDS:
        value = body.get(field)
        if isinstance(value, str) and value:
            return value
    text = response.text.strip()
    if text:
        return text
    return response.reason_phrase or f"HTTP {response.status_code}"


class ErrorFactory:
    """Centralized error creation with consistent structure."""

    @staticmethod
    def generate_correlation_id() -> str:
        """Generate a unique correlation ID."""
        return str(uuid.uuid4())

    @staticmethod
    def from_http_response(
        response: httpx.Response,
        path: str,
        *,
        correlation_id: str | None = None,
    ) -> KeycloakAdminError:
        """Create SDK error from a non-2xx admin API response.

        Args:
            response: HTTP response object.
            path: Admin API path that was called.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            ``AuthenticationError`` for 401, otherwise a ``RequestError``
            subclass chosen by status.
        """
        status = response.status_code
        message = _error_text(response)

        if status == 401:
            return ErrorFactory.unauthorized(
                response, path, correlation_id=correlation_id
            )

        error_cls = _STATUS_ERRORS.get(status)
        if error_cls is None:
            error_cls = ServerError if status >= 500 else RequestError
        return error_cls(
            status,
            message,
            path,
            response_body=response.text,
            correlation_id=correlation_id,
        )

    @staticmethod
    def unauthorized(
        response: httpx.Response,
        path: str,
        *,
        correlation_id: str | None = None,
    ) -> AuthenticationError:
        """Create AuthenticationError from a 401 admin API response."""
        body = _json_object(response)
        error = body.get("error")
        description = body.get("error_description")
        return AuthenticationError(
            _error_text(response),
            ErrorCode.UNAUTHORIZED,
            status_code=response.status_code,
            path=path,
            error=error if isinstance(error, str) else None,
            error_description=description if isinstance(description, str) else None,
            correlation_id=correlation_id,
        )

    @staticmethod
    def from_token_response(
        response: httpx.Response,
        path: str | None = None,
    ) -> AuthenticationError:
        """Create AuthenticationError from a failed token endpoint response.

        Keeps the OAuth ``error`` / ``error_description`` fields so callers can
        tell invalid credentials from a disabled or unknown client.
        """
        body = _json_object(response)
        error = body.get("error")
        description = body.get("error_description")
        reason = description or error or f"Unknown error (Status: {response.status_code})"
        return AuthenticationError(
            f"Authentication failed: {reason}",
            status_code=response.status_code,
            path=path,
            error=error if isinstance(error, str) else None,
            error_description=description if isinstance(description, str) else None,
        )

    @staticmethod
    def from_exception(
        exc: Exception,
        path: str | None = None,
        *,
        correlation_id: str | None = None,
    ) -> KeycloakAdminError:
        """Create SDK error from a transport exception.

        Args:
            exc: Original exception.
            path: Admin API path being called.
            correlation_id: Optional correlation ID for tracing.

        Returns:
            Appropriate KeycloakAdminError subclass.
        """
        if isinstance(exc, KeycloakAdminError):
            if exc.correlation_id is None:
                exc.correlation_id = correlation_id
            return exc

        if isinstance(exc, httpx.TimeoutException):
            return NetworkTimeoutError(
                f"Request timed out: {exc}",
                path=path,
                correlation_id=correlation_id,
                cause=exc,
            )

        if isinstance(exc, httpx.ConnectError):
            return NetworkError(
                f"Connection failed: {exc}",
                ErrorCode.CONNECTION_ERROR,
                path=path,
                correlation_id=correlation_id,
                cause=exc,
            )

        return NetworkError(
            f"Network error: {exc}",
            path=path,
            correlation_id=correlation_id,
            cause=exc,
        )
