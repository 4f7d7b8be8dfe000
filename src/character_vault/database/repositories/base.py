"""Generic repository over a single Cosmos DB container."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, cast

from azure.core import MatchConditions
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from character_vault.models.base import DocumentBase

if TYPE_CHECKING:
    from azure.cosmos.aio import DatabaseProxy

T = TypeVar("T", bound=DocumentBase)


class BaseRepository(Generic[T]):
    """CRUD helpers shared by every container repository."""

    container_name: ClassVar[str]
    model_class: type[T]

    def __init__(self, database: DatabaseProxy) -> None:
        self._container = database.get_container_client(self.container_name)

    def _to_model(self, data: dict[str, Any]) -> T:
        return self.model_class.model_validate(data)

    @staticmethod
    def _body(item: T) -> dict[str, Any]:
        # Unset optionals stay undefined so IS_DEFINED filters keep working.
        return item.model_dump(mode="json", exclude_none=True)

    async def create(self, item: T) -> T:
        await self._container.create_item(body=self._body(item))
        return item

    async def _read(self, item_id: str, partition_key: str) -> dict[str, Any] | None:
        try:
            data = cast(
                "dict[str, Any]",
                await self._container.read_item(item=item_id, partition_key=partition_key),
            )
        except CosmosResourceNotFoundError:
            return None
        if data.get("deleted_at") is not None:
            return None
        return data

    async def get(self, item_id: str, partition_key: str) -> T | None:
        """Read a document, treating soft-deleted documents as missing."""
        data = await self._read(item_id, partition_key)
        return self._to_model(data) if data is not None else None

    async def get_with_etag(
        self, item_id: str, partition_key: str
    ) -> tuple[T, str | None] | None:
        """Read a document together with its current ``_etag``."""
        data = await self._read(item_id, partition_key)
        if data is None:
            return None
        etag = data.get("_etag")
        return self._to_model(data), etag if isinstance(etag, str) else None

    async def replace(self, item: T, *, etag: str | None = None) -> T:
        """Replace a document, optionally only if it still matches ``etag``."""
        if etag is None:
            await self._container.replace_item(item=item.id, body=self._body(item))
        else:
            await self._container.replace_item(
                item=item.id,
                body=self._body(item),
                etag=etag,
                match_condition=MatchConditions.IfNotModified,
            )
        return item

    async def delete(self, item_id: str, partition_key: str) -> None:
        await self._container.delete_item(item=item_id, partition_key=partition_key)

    async def query(
        self, sql: str, parameters: list[dict[str, Any]] | None = None
    ) -> list[T]:
        return [
            self._to_model(item)
            async for item in self._container.query_items(
                query=sql, parameters=parameters or []
            )
        ]
