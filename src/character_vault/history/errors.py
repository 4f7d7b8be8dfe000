"""Errors raised by snapshot review and restore."""

from __future__ import annotations


class HistoryError(Exception):
    """Base class for snapshot history failures."""


class NormalizationError(HistoryError):
    """A stored section value does not match its section's kind."""

    def __init__(self, section: str, value: object) -> None:
        super().__init__(
            f"Cannot normalize section {section!r} value of type {type(value).__name__}"
        )
        self.section = section


class SnapshotNotFoundError(HistoryError):
    def __init__(self, snapshot_id: str) -> None:
        super().__init__(f"Snapshot {snapshot_id!r} not found")
        self.snapshot_id = snapshot_id


class RestoreNotConfirmedError(HistoryError):
    """Restore was requested without the destructive-action confirmation."""


class RestoreScopeError(HistoryError):
    """The requested restore scope is not the active, changed section."""


class ConcurrentRestoreError(HistoryError):
    """A restore is already in flight for this review session."""


class RestoreWriteError(HistoryError):
    """Persisting the restored character failed; nothing was changed."""


class StaleCharacterError(HistoryError):
    """The live character changed after it was read for an update."""

    def __init__(self, character_id: str) -> None:
        super().__init__(f"Character {character_id!r} was modified concurrently")
        self.character_id = character_id
