"""Ordered snapshot list and selection state for one review session."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from character_vault.history.errors import HistoryError, SnapshotNotFoundError

if TYPE_CHECKING:
    from character_vault.history.stores import SnapshotStore
    from character_vault.models.snapshot import Snapshot

logger = logging.getLogger(__name__)


class CatalogState(StrEnum):
    CLOSED = "closed"
    LOADING = "loading"
    READY = "ready"


class SnapshotCatalog:
    """Hold a character's snapshots newest-first and track the selected one.

    Selection never touches a snapshot or the live card; it only decides
    which diff is shown.
    """

    def __init__(self) -> None:
        self._state = CatalogState.CLOSED
        self._character_id: str | None = None
        self._snapshots: list[Snapshot] = []
        self._selected_id: str | None = None

    @property
    def state(self) -> CatalogState:
        return self._state

    @property
    def character_id(self) -> str | None:
        return self._character_id

    @property
    def snapshots(self) -> list[Snapshot]:
        return list(self._snapshots)

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def selected(self) -> Snapshot | None:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    async def open(self, store: SnapshotStore, character_id: str) -> None:
        """Load snapshots from the store and select the newest one."""
        self._state = CatalogState.LOADING
        self._character_id = character_id
        self._selected_id = None
        try:
            snapshots = await store.list_snapshots(character_id)
        except Exception:
            self.close()
            raise
        # Stable sort keeps the store's order for equal timestamps.
        self._snapshots = sorted(snapshots, key=lambda s: s.created_at, reverse=True)
        self._selected_id = self._snapshots[0].id if self._snapshots else None
        self._state = CatalogState.READY
        logger.debug(
            "Snapshot catalog ready — character=%s count=%d",
            character_id,
            len(self._snapshots),
        )

    def get(self, snapshot_id: str) -> Snapshot:
        for snapshot in self._snapshots:
            if snapshot.id == snapshot_id:
                return snapshot
        raise SnapshotNotFoundError(snapshot_id)

    def select(self, snapshot_id: str) -> Snapshot:
        if self._state != CatalogState.READY:
            raise HistoryError("Snapshot catalog is not open")
        snapshot = self.get(snapshot_id)
        self._selected_id = snapshot.id
        return snapshot

    def close(self) -> None:
        self._state = CatalogState.CLOSED
        self._character_id = None
        self._snapshots = []
        self._selected_id = None
