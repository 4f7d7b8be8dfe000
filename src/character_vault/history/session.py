"""Review sessions — explicit per-character state for snapshot review."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from character_vault.history.catalog import CatalogState, SnapshotCatalog
from character_vault.history.diff import DiffEntry, compute_diff
from character_vault.history.errors import ConcurrentRestoreError

if TYPE_CHECKING:
    from character_vault.history.stores import CharacterStore, SnapshotStore
    from character_vault.models.character import Character
    from character_vault.models.sections import Section

logger = logging.getLogger(__name__)


class RestoreStatus(StrEnum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class ReviewSession:
    """State spanning "a snapshot is selected" until restore or close.

    ``character`` is the live card as last seen by the editor and
    ``active_section`` the section currently open there; scoped restore is
    only allowed for that section.
    """

    character: Character
    active_section: Section | None = None
    catalog: SnapshotCatalog = field(default_factory=SnapshotCatalog)
    restore_status: RestoreStatus = RestoreStatus.IDLE
    last_error: str | None = None

    @property
    def character_id(self) -> str:
        return self.character.id

    @property
    def is_open(self) -> bool:
        return self.catalog.state != CatalogState.CLOSED

    @property
    def restore_in_flight(self) -> bool:
        return self.restore_status == RestoreStatus.IN_FLIGHT

    async def open(self, store: SnapshotStore) -> None:
        if self.restore_in_flight:
            raise ConcurrentRestoreError("Cannot reload history while a restore is in flight")
        self.restore_status = RestoreStatus.IDLE
        self.last_error = None
        await self.catalog.open(store, self.character.id)

    async def refresh(self, characters: CharacterStore) -> bool:
        """Reload the live card; return False if it no longer exists."""
        if self.restore_in_flight:
            return True
        character = await characters.get_character(self.character.id)
        if character is None:
            return False
        self.character = character
        return True

    def diff(self, snapshot_id: str | None = None) -> list[DiffEntry]:
        """Diff a snapshot (default: the selected one) against the live card."""
        if snapshot_id is not None:
            snapshot = self.catalog.get(snapshot_id)
        else:
            snapshot = self.catalog.selected
        if snapshot is None:
            return []
        return compute_diff(snapshot, self.character)

    def close(self) -> None:
        self.catalog.close()
        logger.debug("Review session closed — character=%s", self.character.id)


class ReviewSessionRegistry:
    """Keep at most one review session per character."""

    def __init__(self) -> None:
        self._sessions: dict[str, ReviewSession] = {}

    def start(
        self, character: Character, *, active_section: Section | None = None
    ) -> ReviewSession:
        """Create a fresh session, replacing any previous one for the character."""
        previous = self._sessions.get(character.id)
        if previous is not None and previous.restore_in_flight:
            raise ConcurrentRestoreError(
                f"A restore is in flight for character {character.id!r}"
            )
        session = ReviewSession(character=character, active_section=active_section)
        self._sessions[character.id] = session
        return session

    def get(self, character_id: str) -> ReviewSession | None:
        return self._sessions.get(character_id)

    def discard(self, character_id: str) -> None:
        session = self._sessions.pop(character_id, None)
        if session is not None:
            session.close()
