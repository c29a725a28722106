"""Shared plumbing for resource APIs."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..errors import CreationError
from ..models import encode_query

if TYPE_CHECKING:
    from ..client import AsyncKeycloakAdminClient

# Keycloak resource representations are passed through as plain JSON objects.
Representation = dict[str, Any]


class QueryOptions(BaseModel):
    """Base for per-endpoint query option structs.

    Field names are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_query(self) -> dict[str, str]:
        return encode_query(self.model_dump(by_alias=True, exclude_none=True))


class PageOptions(QueryOptions):
    first: int | None = None
    max: int | None = None


def require(value: Any, name: str) -> None:
    if not value:
        msg = f"{name} is required"
        raise ValueError(msg)


class ResourceApi:
    """Base class binding a resource API to its client."""

    def __init__(self, client: AsyncKeycloakAdminClient) -> None:
        self._client = client


def created_id(result: Any, path: str | None = None) -> str:
    """Identifier from a creation call: Location id or a JSON body's ``id``."""
    if isinstance(result, dict) and result.get("id"):
        return str(result["id"])
    if isinstance(result, str) and result:
        return result
    raise CreationError(
        "Create call returned no resource identifier",
        path=path,
    )
