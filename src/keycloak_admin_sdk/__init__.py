"""Keycloak Admin SDK for Python."""

from .client import AsyncKeycloakAdminClient
from .config import (
    AuthMethod,
    BearerAuth,
    ClientCredentialsAuth,
    KeycloakConfig,
    PasswordAuth,
    TelemetryConfig,
)
from .core.interpreter import Expect
from .errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    CreationError,
    ErrorCode,
    ForbiddenError,
    InvalidConfigError,
    KeycloakAdminError,
    NetworkError,
    NetworkTimeoutError,
    NotFoundError,
    RequestError,
    ResponseDecodeError,
    ServerError,
)
from .models import HttpMethod, JsonBody, RawBody, TokenData
from .telemetry import configure_telemetry

__all__ = [
    "AsyncKeycloakAdminClient",
    "AuthMethod",
    "AuthenticationError",
    "BadRequestError",
    "BearerAuth",
    "ClientCredentialsAuth",
    "ConflictError",
    "CreationError",
    "ErrorCode",
    "Expect",
    "ForbiddenError",
    "HttpMethod",
    "InvalidConfigError",
    "JsonBody",
    "KeycloakAdminError",
    "KeycloakConfig",
    "NetworkError",
    "NetworkTimeoutError",
    "NotFoundError",
    "PasswordAuth",
    "RawBody",
    "RequestError",
    "ResponseDecodeError",
    "ServerError",
    "TelemetryConfig",
    "TokenData",
    "configure_telemetry",
]

__version__ = "0.1.0"
