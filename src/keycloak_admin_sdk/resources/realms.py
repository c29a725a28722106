"""Realm endpoints under ``/admin/realms``, independent of the configured realm."""

from __future__ import annotations

from ..core.interpreter import Expect
from ..models import HttpMethod, JsonBody
from .base import Representation, ResourceApi, require


class RealmsApi(ResourceApi):
    async def list(self, *, brief_representation: bool | None = None) -> list[Representation]:
        return await self._client.request_without_realm(
            "", query={"briefRepresentation": brief_representation}
        )

    async def get(self, realm: str) -> Representation:
        require(realm, "Realm name")
        return await self._client.request_without_realm(f"/{realm}")

    async def create(self, realm: Representation) -> None:
        require(realm, "Realm data")
        require(realm.get("realm"), "Realm name")
        await self._client.request_without_realm(
            "", HttpMethod.POST, JsonBody(value=realm), expect=Expect.VOID
        )

    async def update(self, realm_name: str, realm: Representation) -> None:
        require(realm_name, "Realm name")
        await self._client.request_without_realm(
            f"/{realm_name}", HttpMethod.PUT, JsonBody(value=realm), expect=Expect.VOID
        )

    async def delete(self, realm_name: str) -> None:
        require(realm_name, "Realm name")
        await self._client.request_without_realm(
            f"/{realm_name}", HttpMethod.DELETE, expect=Expect.VOID
        )
