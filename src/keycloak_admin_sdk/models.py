"""Pydantic models for the Keycloak Admin SDK.

Token payloads, the active session, and the per-call request descriptor.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Annotated, Any, Literal, Self
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

# Lifetime assumed when the token endpoint omits ``expires_in``
DEFAULT_TOKEN_LIFETIME = 60

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class TokenResponse(BaseModel):
    """OAuth 2.0 token endpoint response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(..., min_length=1)
    token_type: str = Field(default="Bearer")
    expires_in: Annotated[int, Field(ge=0)] | None = None
    refresh_token: str | None = None
    refresh_expires_in: Annotated[int, Field(ge=0)] | None = None
    scope: str | None = None


class TokenData(BaseModel):
    """Active session: the cached access token and its expiry.

    ``expires_at`` is ``None`` for caller-managed bearer tokens, which the
    SDK treats as never expiring.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    token_type: str = "Bearer"
    expires_at: datetime | None = None
    refresh_token: str | None = None
    refresh_expires_at: datetime | None = None
    scope: str | None = None

    @classmethod
    def from_response(
        cls,
        response: TokenResponse,
        *,
        buffer_seconds: int = 10,
    ) -> Self:
        """Create TokenData from TokenResponse with expiration calculation."""
        now = datetime.now(UTC)
        lifetime = (
            response.expires_in
            if response.expires_in is not None
            else DEFAULT_TOKEN_LIFETIME
        )
        refresh_expires_at = None
        if response.refresh_token and response.refresh_expires_in:
            refresh_expires_at = now + timedelta(
                seconds=_apply_buffer(response.refresh_expires_in, buffer_seconds)
            )
        return cls(
            access_token=response.access_token,
            token_type=response.token_type,
            expires_at=now + timedelta(seconds=_apply_buffer(lifetime, buffer_seconds)),
            refresh_token=response.refresh_token,
            refresh_expires_at=refresh_expires_at,
            scope=response.scope,
        )

    @classmethod
    def bearer(cls, token: str) -> Self:
        return cls(access_token=token)

    def is_expired(self) -> bool:
        """Check if the access token is past its (buffered) expiry."""
        if self.expires_at is None:
            return False
        return datetime.now(UTC) >= self.expires_at

    def can_refresh(self) -> bool:
        """Check if the refresh token exists and has not expired."""
        if not self.refresh_token:
            return False
        if self.refresh_expires_at is None:
            return True
        return datetime.now(UTC) < self.refresh_expires_at


def _apply_buffer(lifetime: int, buffer_seconds: int) -> int:
    # Short-lived tokens keep at least half their lifetime.
    return lifetime - min(buffer_seconds, lifetime // 2)


class HttpMethod(StrEnum):
    """HTTP verbs used by the admin API."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class JsonBody(BaseModel):
    """Request payload serialized as JSON."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["json"] = "json"
    value: Any

    @property
    def content_type(self) -> str:
        return JSON_CONTENT_TYPE


class RawBody(BaseModel):
    """Request payload sent as-is with an explicit content type."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["raw"] = "raw"
    content: str | bytes
    content_type: str = JSON_CONTENT_TYPE

    @classmethod
    def form(cls, fields: Mapping[str, Any]) -> Self:
        """URL-encode ``fields`` as a form body, skipping ``None`` values."""
        return cls(content=urlencode(encode_query(fields)), content_type=FORM_CONTENT_TYPE)


RequestBody = JsonBody | RawBody


class RequestDescriptor(BaseModel):
    """One admin API call as built by a resource module."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: HttpMethod = HttpMethod.GET
    body: JsonBody | RawBody | None = None
    query: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def build(
        cls,
        path: str,
        method: HttpMethod | str = HttpMethod.GET,
        body: JsonBody | RawBody | None = None,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Self:
        """Build a descriptor, canonicalizing the query mapping."""
        return cls(
            path=path,
            method=HttpMethod(method.upper()),
            body=body,
            query=encode_query(query or {}),
            headers=dict(headers or {}),
        )


def encode_query(params: Mapping[str, Any]) -> dict[str, str]:
    """Convert query options to a canonical key -> string mapping.

    ``None`` values are dropped and booleans are rendered the way the
    admin API expects them (``true``/``false``).
    """
    encoded: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = str(value)
    return encoded
