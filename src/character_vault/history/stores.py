"""Persistence interfaces consumed by snapshot review and restore."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from character_vault.models.character import Character
    from character_vault.models.snapshot import Snapshot


@runtime_checkable
class SnapshotStore(Protocol):
    """Owns snapshot rows, including their retention."""

    async def list_snapshots(self, character_id: str) -> list[Snapshot]:
        """Return every snapshot of a character, newest first."""
        ...

    async def get_snapshot(self, snapshot_id: str, character_id: str) -> Snapshot | None:
        ...

    async def get_latest(self, character_id: str) -> Snapshot | None:
        ...

    async def create_snapshot(self, snapshot: Snapshot) -> Snapshot:
        """Append a snapshot. Existing snapshots are never modified."""
        ...


@runtime_checkable
class CharacterStore(Protocol):
    """Owns the live character record."""

    async def get_character(self, character_id: str) -> Character | None:
        ...

    async def load_for_update(self, character_id: str) -> tuple[Character, str | None] | None:
        """Return the stored character and the version tag to write against."""
        ...

    async def replace_character(
        self, character: Character, *, etag: str | None = None
    ) -> Character:
        """Overwrite the stored character in a single write.

        With ``etag`` the write only succeeds if the stored document still
        carries that tag; otherwise ``StaleCharacterError`` is raised.
        """
        ...
