"""Error classes for the Keycloak Admin SDK.

Every failed call surfaces as one :class:`KeycloakAdminError` subclass
carrying an error code, the HTTP status when one exists, and the admin
API path that failed.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the Keycloak Admin SDK."""

    # Authentication errors (1xxx)
    AUTHENTICATION_FAILED = "AUTH_1001"
    TOKEN_REFRESH_FAILED = "AUTH_1002"
    UNAUTHORIZED = "AUTH_1003"
    AUTH_ENDPOINT_UNREACHABLE = "AUTH_1004"
    INVALID_TOKEN_RESPONSE = "AUTH_1005"

    # Request errors (2xxx)
    REQUEST_FAILED = "REQ_2000"
    BAD_REQUEST = "REQ_2001"
    FORBIDDEN = "REQ_2003"
    NOT_FOUND = "REQ_2004"
    CONFLICT = "REQ_2009"
    INVALID_RESPONSE = "REQ_2100"

    # Creation errors (3xxx)
    MISSING_LOCATION = "CRT_3001"
    MALFORMED_LOCATION = "CRT_3002"

    # Network errors (4xxx)
    NETWORK_ERROR = "NET_4001"
    TIMEOUT_ERROR = "NET_4002"
    CONNECTION_ERROR = "NET_4003"

    # Server errors (5xxx)
    SERVER_ERROR = "SRV_5001"

    # Configuration errors (6xxx)
    INVALID_CONFIG = "CFG_6001"


class KeycloakAdminError(Exception):
    """Base error for the Keycloak Admin SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        path: str | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = str(code)
        self.status_code = status_code
        self.path = path
        self.correlation_id = correlation_id
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "path": self.path,
            "correlation_id": self.correlation_id,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code={self.code!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class AuthenticationError(KeycloakAdminError):
    """Credential acquisition, refresh, or request authentication failed.

    ``error`` and ``error_description`` hold the OAuth error fields from the
    token endpoint when it supplied them, so callers can tell a rejected
    password (``invalid_grant``) apart from a disabled client.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        code: ErrorCode | str = ErrorCode.AUTHENTICATION_FAILED,
        *,
        status_code: int | None = None,
        path: str | None = None,
        error: str | None = None,
        error_description: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if error:
            details["error"] = error
        if error_description:
            details["error_description"] = error_description
        super().__init__(
            message,
            code,
            status_code=status_code,
            path=path,
            correlation_id=correlation_id,
            details=details,
        )
        self.error = error
        self.error_description = error_description


class CreationError(KeycloakAdminError):
    """A 201 Created response did not carry a usable Location header."""

    def __init__(
        self,
        message: str = "Created resource response has no Location header",
        code: ErrorCode | str = ErrorCode.MISSING_LOCATION,
        *,
        path: str | None = None,
        location: str | None = None,
        correlation_id: str | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            status_code=201,
            path=path,
            correlation_id=correlation_id,
            details={"location": location} if location is not None else None,
        )
        self.location = location


class RequestError(KeycloakAdminError):
    """Non-2xx response from the admin API."""

    default_code: ErrorCode = ErrorCode.REQUEST_FAILED

    def __init__(
        self,
        status_code: int,
        message: str,
        path: str | None = None,
        *,
        response_body: str | None = None,
        code: ErrorCode | str | None = None,
        correlation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            code or self.default_code,
            status_code=status_code,
            path=path,
            correlation_id=correlation_id,
            details=details,
        )
        self.response_body = response_body

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.path}: {self.message}"


class BadRequestError(RequestError):
    """400: the payload or parameters failed server-side validation."""

    default_code = ErrorCode.BAD_REQUEST


class ForbiddenError(RequestError):
    """403: the authenticated principal lacks the required admin role."""

    default_code = ErrorCode.FORBIDDEN


class NotFoundError(RequestError):
    """404: the realm or resource does not exist."""

    default_code = ErrorCode.NOT_FOUND


class ConflictError(RequestError):
    """409: a resource with the same unique attribute already exists."""

    default_code = ErrorCode.CONFLICT


class ServerError(RequestError):
    """5xx: server-side fault."""

    default_code = ErrorCode.SERVER_ERROR


class ResponseDecodeError(RequestError):
    """2xx response whose JSON body could not be decoded."""

    default_code = ErrorCode.INVALID_RESPONSE


class NetworkError(KeycloakAdminError):
    """The HTTP exchange itself could not complete."""

    def __init__(
        self,
        message: str = "Network request failed",
        code: ErrorCode | str = ErrorCode.NETWORK_ERROR,
        *,
        path: str | None = None,
        correlation_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            path=path,
            correlation_id=correlation_id,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class NetworkTimeoutError(NetworkError):
    """Transport-level timeout."""

    def __init__(
        self,
        message: str = "Request timed out",
        *,
        path: str | None = None,
        correlation_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TIMEOUT_ERROR,
            path=path,
            correlation_id=correlation_id,
            cause=cause,
        )


class InvalidConfigError(KeycloakAdminError):
    """Invalid SDK configuration."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )
        self.field = field
