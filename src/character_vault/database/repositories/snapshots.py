"""Repository for the snapshots container (partitioned by /character_id)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from character_vault.database.repositories.base import BaseRepository
from character_vault.models.snapshot import Snapshot

if TYPE_CHECKING:
    from azure.cosmos.aio import DatabaseProxy

logger = logging.getLogger(__name__)

_DEFAULT_RETENTION = 25


class SnapshotRepository(BaseRepository[Snapshot]):
    """Snapshot persistence, including the per-character retention cap."""

    container_name = "snapshots"
    model_class = Snapshot

    def __init__(
        self, database: DatabaseProxy, *, retention_limit: int = _DEFAULT_RETENTION
    ) -> None:
        super().__init__(database)
        self._retention_limit = retention_limit

    async def list_snapshots(self, character_id: str) -> list[Snapshot]:
        """Fetch a character's snapshots, newest first."""
        return await self.query(
            "SELECT * FROM c WHERE c.character_id = @character_id"
            " AND NOT IS_DEFINED(c.deleted_at)"
            " ORDER BY c.created_at DESC",
            [{"name": "@character_id", "value": character_id}],
        )

    async def get_snapshot(self, snapshot_id: str, character_id: str) -> Snapshot | None:
        return await self.get(snapshot_id, character_id)

    async def get_latest(self, character_id: str) -> Snapshot | None:
        """Fetch the most recent snapshot for a character."""
        results = await self.query(
            "SELECT TOP 1 * FROM c WHERE c.character_id = @character_id"
            " AND NOT IS_DEFINED(c.deleted_at)"
            " ORDER BY c.created_at DESC",
            [{"name": "@character_id", "value": character_id}],
        )
        return results[0] if results else None

    async def create_snapshot(self, snapshot: Snapshot) -> Snapshot:
        await self.create(snapshot)
        await self.prune(snapshot.character_id)
        return snapshot

    async def prune(self, character_id: str) -> int:
        """Delete the oldest snapshots beyond the retention limit."""
        snapshots = await self.list_snapshots(character_id)
        stale = snapshots[self._retention_limit :]
        for snapshot in stale:
            await self.delete(snapshot.id, character_id)
        if stale:
            logger.info(
                "Pruned snapshots — character=%s removed=%d kept=%d",
                character_id,
                len(stale),
                self._retention_limit,
            )
        return len(stale)
