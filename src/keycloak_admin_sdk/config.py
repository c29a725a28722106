"""Configuration for the Keycloak Admin SDK.

Uses Pydantic v2 frozen models: a configuration is validated once at
client construction and never mutated afterwards.
"""

from __future__ import annotations

import os
from enum import StrEnum
from typing import Annotated, Any, Literal, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
    ValidationError,
    model_validator,
)

from .errors import InvalidConfigError


class AuthMethod(StrEnum):
    """Supported authentication modes."""

    BEARER = "bearer"
    PASSWORD = "password"
    CLIENT = "client"


class BearerAuth(BaseModel):
    """Caller-managed access token; the SDK never refreshes it."""

    model_config = ConfigDict(frozen=True)

    method: Literal["bearer"] = "bearer"
    token: SecretStr


class PasswordAuth(BaseModel):
    """Resource-owner password grant."""

    model_config = ConfigDict(frozen=True)

    method: Literal["password"] = "password"
    username: str = Field(..., min_length=1)
    password: SecretStr
    client_id: str = Field(default="admin-cli", min_length=1)


class ClientCredentialsAuth(BaseModel):
    """Client-credentials grant for a service-account client."""

    model_config = ConfigDict(frozen=True)

    method: Literal["client"] = "client"
    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr


AuthConfig = Annotated[
    BearerAuth | PasswordAuth | ClientCredentialsAuth,
    Field(discriminator="method"),
]


class TelemetryConfig(BaseModel):
    """Logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    # False swaps in a no-op tracer
    enabled: bool = True
    service_name: str = Field(default="keycloak-admin-sdk", min_length=1)
    # Install the SDK's structlog pipeline (process-wide)
    configure_logging: bool = False
    log_level: str = "INFO"
    json_logs: bool = True


class KeycloakConfig(BaseModel):
    """Main configuration for the Keycloak Admin SDK."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    # Required
    base_url: HttpUrl
    realm: str = Field(..., min_length=1)
    auth: AuthConfig

    # Realm holding the token endpoint (defaults to ``realm``)
    auth_realm: str | None = None

    # HTTP settings; None waits indefinitely
    timeout: Annotated[float, Field(gt=0)] | None = None
    connect_timeout: Annotated[float, Field(gt=0)] | None = None

    # Seconds subtracted from server-reported token lifetimes
    token_expiry_buffer: Annotated[int, Field(ge=0, le=300)] = 10

    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    @model_validator(mode="after")
    def set_default_auth_realm(self) -> Self:
        """Issue tokens from the target realm unless told otherwise."""
        if self.auth_realm is None:
            # Use object.__setattr__ since model is frozen
            object.__setattr__(self, "auth_realm", self.realm)
        return self

    @property
    def base_url_str(self) -> str:
        """Get base URL as string without trailing slash."""
        return str(self.base_url).rstrip("/")

    @property
    def admin_url(self) -> str:
        """Root of the admin REST API."""
        return f"{self.base_url_str}/admin"

    @property
    def token_endpoint(self) -> str:
        """OpenID Connect token endpoint of ``auth_realm``."""
        return (
            f"{self.base_url_str}/realms/{self.auth_realm}"
            "/protocol/openid-connect/token"
        )

    @property
    def auth_method(self) -> AuthMethod:
        return AuthMethod(self.auth.method)

    def with_overrides(self, **kwargs: Any) -> Self:
        """Create new config with overridden values."""
        data = self.model_dump()
        data.update(kwargs)
        return self.__class__(**data)

    @classmethod
    def from_env(cls, prefix: str = "KEYCLOAK_") -> Self:
        """Create config from environment variables.

        ``{prefix}AUTH_METHOD`` selects the mode (``password`` by default)
        and decides which credential variables are read.
        """

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        def require(key: str) -> str:
            value = get_env(key)
            if not value:
                msg = f"{prefix}{key} environment variable is required"
                raise InvalidConfigError(msg, field=key.lower())
            return value

        base_url = require("BASE_URL")
        realm = require("REALM")

        method = get_env("AUTH_METHOD", AuthMethod.PASSWORD.value).lower()
        auth: dict[str, Any]
        if method == AuthMethod.BEARER:
            auth = {"method": "bearer", "token": require("TOKEN")}
        elif method == AuthMethod.PASSWORD:
            auth = {
                "method": "password",
                "username": require("USERNAME"),
                "password": require("PASSWORD"),
                "client_id": get_env("CLIENT_ID", "admin-cli"),
            }
        elif method == AuthMethod.CLIENT:
            auth = {
                "method": "client",
                "client_id": require("CLIENT_ID"),
                "client_secret": require("CLIENT_SECRET"),
            }
        else:
            msg = f"Unsupported authentication method: {method}"
            raise InvalidConfigError(msg, field="auth_method")

        timeout = get_env("TIMEOUT")
        log_level = get_env("LOG_LEVEL")
        telemetry = TelemetryConfig(
            configure_logging=log_level is not None,
            log_level=log_level or "INFO",
        )
        try:
            return cls(
                base_url=base_url,
                realm=realm,
                auth=auth,
                auth_realm=get_env("AUTH_REALM"),
                timeout=float(timeout) if timeout else None,
                telemetry=telemetry,
            )
        except (ValidationError, ValueError) as e:
            raise InvalidConfigError(f"Invalid configuration: {e}") from e
