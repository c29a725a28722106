"""Identity provider endpoints: ``/admin/realms/{realm}/identity-provider``."""

from __future__ import annotations

from ..core.interpreter import Expect
from ..models import HttpMethod, JsonBody
from .base import PageOptions, Representation, ResourceApi, created_id, require

INSTANCES = "/identity-provider/instances"


class IdentityProviderQuery(PageOptions):
    search: str | None = None
    brief_representation: bool | None = None
    realm_only: bool | None = None


class IdentityProvidersApi(ResourceApi):
    """Brokered identity providers, addressed by alias."""

    async def list(
        self, query: IdentityProviderQuery | None = None
    ) -> list[Representation]:
        return await self._client.request(
            INSTANCES, query=query.to_query() if query else None
        )

    async def create(self, provider: Representation) -> str:
        """Create an identity provider and return its alias."""
        require(provider, "Identity provider data")
        require(provider.get("alias"), "Identity provider alias")
        await self._client.request(
            INSTANCES, HttpMethod.POST, JsonBody(value=provider), expect=Expect.VOID
        )
        return provider["alias"]

    async def get(self, alias: str) -> Representation:
        require(alias, "Identity provider alias")
        return await self._client.request(f"{INSTANCES}/{alias}")

    async def update(self, alias: str, provider: Representation) -> None:
        require(alias, "Identity provider alias")
        await self._client.request(
            f"{INSTANCES}/{alias}",
            HttpMethod.PUT,
            JsonBody(value=provider),
            expect=Expect.VOID,
        )

    async def delete(self, alias: str) -> None:
        require(alias, "Identity provider alias")
        await self._client.request(
            f"{INSTANCES}/{alias}", HttpMethod.DELETE, expect=Expect.VOID
        )

    async def provider_factory(self, provider_id: str) -> Representation:
        require(provider_id, "Provider ID")
        return await self._client.request(f"/identity-provider/providers/{provider_id}")

    # Mappers

    async def list_mappers(self, alias: str) -> list[Representation]:
        require(alias, "Identity provider alias")
        return await self._client.request(f"{INSTANCES}/{alias}/mappers")

    async def mapper_types(self, alias: str) -> dict[str, Representation]:
        require(alias, "Identity provider alias")
        return await self._client.request(f"{INSTANCES}/{alias}/mapper-types")

    async def create_mapper(self, alias: str, mapper: Representation) -> str:
        """Create a mapper and return its id."""
        require(alias, "Identity provider alias")
        require(mapper, "Mapper data")
        path = f"{INSTANCES}/{alias}/mappers"
        result = await self._client.request(path, HttpMethod.POST, JsonBody(value=mapper))
        return created_id(result, path)

    async def get_mapper(self, alias: str, mapper_id: str) -> Representation:
        return await self._client.request(self._mapper_path(alias, mapper_id))

    async def update_mapper(
        self, alias: str, mapper_id: str, mapper: Representation
    ) -> None:
        await self._client.request(
            self._mapper_path(alias, mapper_id),
            HttpMethod.PUT,
            JsonBody(value=mapper),
            expect=Expect.VOID,
        )

    async def delete_mapper(self, alias: str, mapper_id: str) -> None:
        await self._client.request(
            self._mapper_path(alias, mapper_id), HttpMethod.DELETE, expect=Expect.VOID
        )

    @staticmethod
    def _mapper_path(alias: str, mapper_id: str) -> str:
        require(alias, "Identity provider alias")
        require(mapper_id, "Mapper ID")
        return f"{INSTANCES}/{alias}/mappers/{mapper_id}"
