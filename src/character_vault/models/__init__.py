"""Data models for Cosmos DB document types and derived section values."""

from character_vault.models.character import (
    Character,
    CharacterBook,
    CharacterData,
    CharacterSpec,
    LorebookEntry,
)
from character_vault.models.sections import (
    SECTIONS,
    ImageValue,
    ListValue,
    RecordValue,
    Section,
    SectionKind,
    SectionMeta,
    SectionValue,
    TextValue,
)
from character_vault.models.snapshot import Snapshot, SnapshotPayload, SnapshotSource

__all__ = [
    "SECTIONS",
    "Character",
    "CharacterBook",
    "CharacterData",
    "CharacterSpec",
    "ImageValue",
    "ListValue",
    "LorebookEntry",
    "RecordValue",
    "Section",
    "SectionKind",
    "SectionMeta",
    "SectionValue",
    "Snapshot",
    "SnapshotPayload",
    "SnapshotSource",
    "TextValue",
]
