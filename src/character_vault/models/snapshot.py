"""Snapshot document model — immutable captures of a character card."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from character_vault.models.base import DocumentBase
from character_vault.models.character import CharacterData


class SnapshotSource(StrEnum):
    """Enumerate the events that capture a snapshot."""

    OPEN = "open"
    AUTO = "auto"
    MANUAL = "manual"
    ROLLBACK = "rollback"


SOURCE_LABELS: dict[SnapshotSource, str] = {
    SnapshotSource.OPEN: "Open",
    SnapshotSource.AUTO: "Auto",
    SnapshotSource.MANUAL: "Manual",
    SnapshotSource.ROLLBACK: "Rollback",
}

SOURCE_DESCRIPTIONS: dict[SnapshotSource, str] = {
    SnapshotSource.OPEN: "Baseline",
    SnapshotSource.AUTO: "Idle snapshot",
    SnapshotSource.MANUAL: "Manual snapshot",
    SnapshotSource.ROLLBACK: "After restore",
}


class SnapshotPayload(BaseModel):
    """Every section value of a character at capture time."""

    model_config = ConfigDict(frozen=True)

    name: str
    image_data: str
    data: CharacterData


class Snapshot(DocumentBase):
    """An immutable capture of a character card at a point in time."""

    model_config = ConfigDict(frozen=True)

    character_id: str
    source: SnapshotSource
    payload: SnapshotPayload
    payload_hash: str

    @property
    def source_label(self) -> str:
        return SOURCE_LABELS[self.source]

    @property
    def source_description(self) -> str:
        return SOURCE_DESCRIPTIONS[self.source]
