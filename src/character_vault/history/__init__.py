"""Snapshot history — diffing snapshots against the live card and restoring them."""

from character_vault.history.capture import (
    AutoSnapshotScheduler,
    SnapshotRecorder,
    build_payload,
    payload_hash,
)
from character_vault.history.catalog import CatalogState, SnapshotCatalog
from character_vault.history.diff import (
    DiffEntry,
    DiffPanel,
    PanelSide,
    changed_entries,
    compute_diff,
    render_panel,
)
from character_vault.history.errors import (
    ConcurrentRestoreError,
    HistoryError,
    NormalizationError,
    RestoreNotConfirmedError,
    RestoreScopeError,
    RestoreWriteError,
    SnapshotNotFoundError,
    StaleCharacterError,
)
from character_vault.history.lines import (
    DiffSegment,
    LineDiff,
    count_changed_lines,
    diff_lines,
    diff_segments,
)
from character_vault.history.normalize import normalize, normalize_section, to_section_value
from character_vault.history.restore import RestoreController, RestoreScope, Scope
from character_vault.history.session import ReviewSession, ReviewSessionRegistry, RestoreStatus
from character_vault.history.stores import CharacterStore, SnapshotStore

__all__ = [
    "AutoSnapshotScheduler",
    "CatalogState",
    "CharacterStore",
    "ConcurrentRestoreError",
    "DiffEntry",
    "DiffPanel",
    "DiffSegment",
    "HistoryError",
    "LineDiff",
    "NormalizationError",
    "PanelSide",
    "RestoreController",
    "RestoreNotConfirmedError",
    "RestoreScope",
    "RestoreScopeError",
    "RestoreStatus",
    "RestoreWriteError",
    "ReviewSession",
    "ReviewSessionRegistry",
    "Scope",
    "SnapshotCatalog",
    "SnapshotNotFoundError",
    "SnapshotRecorder",
    "SnapshotStore",
    "StaleCharacterError",
    "build_payload",
    "changed_entries",
    "compute_diff",
    "count_changed_lines",
    "diff_lines",
    "diff_segments",
    "normalize",
    "normalize_section",
    "payload_hash",
    "render_panel",
    "to_section_value",
]
