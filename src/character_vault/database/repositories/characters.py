"""Repository for the characters container (partitioned by /id)."""

from __future__ import annotations

from azure.cosmos.exceptions import CosmosHttpResponseError

from character_vault.database.repositories.base import BaseRepository
from character_vault.history.errors import StaleCharacterError
from character_vault.models.character import Character

_HTTP_PRECONDITION_FAILED = 412


class CharacterRepository(BaseRepository[Character]):
    container_name = "characters"
    model_class = Character

    async def get_character(self, character_id: str) -> Character | None:
        return await self.get(character_id, character_id)

    async def load_for_update(
        self, character_id: str
    ) -> tuple[Character, str | None] | None:
        return await self.get_with_etag(character_id, character_id)

    async def replace_character(
        self, character: Character, *, etag: str | None = None
    ) -> Character:
        """Overwrite the whole character document in one item write."""
        try:
            return await self.replace(character, etag=etag)
        except CosmosHttpResponseError as exc:
            if exc.status_code == _HTTP_PRECONDITION_FAILED:
                raise StaleCharacterError(character.id) from exc
            raise
