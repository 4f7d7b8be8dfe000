"""Shared fixtures: in-memory stores and character/snapshot builders."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from character_vault.history.capture import build_payload, payload_hash
from character_vault.history.errors import StaleCharacterError
from character_vault.models.character import (
    Character,
    CharacterBook,
    CharacterData,
    CharacterSpec,
    LorebookEntry,
)
from character_vault.models.snapshot import Snapshot, SnapshotSource

BASE_TIME = datetime(2026, 1, 1, tzinfo=UTC)


def make_character(**spec_fields: object) -> Character:
    """Build a character whose spec overrides come from keyword arguments."""
    image_data = spec_fields.pop("image_data", "data:image/png;base64,AAAA")
    book = spec_fields.pop("character_book", None)
    extensions = spec_fields.pop("extensions", {})
    spec_fields.setdefault("name", "Aldric")
    spec = CharacterSpec(**spec_fields)
    return Character(
        id="char-1",
        name=spec.name,
        image_data=image_data,
        data=CharacterData(spec=spec, character_book=book, extensions=extensions),
    )


def make_book(content: str = "The crown is cursed.") -> CharacterBook:
    return CharacterBook(
        name="Lore",
        entries=[LorebookEntry(id=1, keys=["crown"], content=content)],
    )


def make_snapshot(
    character: Character,
    *,
    source: SnapshotSource = SnapshotSource.MANUAL,
    minutes: int = 0,
    snapshot_id: str | None = None,
) -> Snapshot:
    payload = build_payload(character)
    fields: dict[str, object] = {
        "character_id": character.id,
        "source": source,
        "payload": payload,
        "payload_hash": payload_hash(payload),
        "created_at": BASE_TIME + timedelta(minutes=minutes),
    }
    if snapshot_id:
        fields["id"] = snapshot_id
    return Snapshot(**fields)


class FakeSnapshotStore:
    """In-memory SnapshotStore keeping insertion order."""

    def __init__(self, snapshots: list[Snapshot] | None = None) -> None:
        self.snapshots: list[Snapshot] = list(snapshots or [])

    async def list_snapshots(self, character_id: str) -> list[Snapshot]:
        owned = [s for s in self.snapshots if s.character_id == character_id]
        return sorted(reversed(owned), key=lambda s: s.created_at, reverse=True)

    async def get_snapshot(self, snapshot_id: str, character_id: str) -> Snapshot | None:
        for snapshot in self.snapshots:
            if snapshot.id == snapshot_id and snapshot.character_id == character_id:
                return snapshot
        return None

    async def get_latest(self, character_id: str) -> Snapshot | None:
        listed = await self.list_snapshots(character_id)
        return listed[0] if listed else None

    async def create_snapshot(self, snapshot: Snapshot) -> Snapshot:
        self.snapshots.append(snapshot)
        return snapshot


class FakeCharacterStore:
    """In-memory CharacterStore with etags that can fail or block its writes."""

    def __init__(self, character: Character) -> None:
        self.character = character
        self.etag = 1
        self.writes: list[Character] = []
        self.fail_with: Exception | None = None
        self.gate: asyncio.Event | None = None

    def save(self, character: Character) -> None:
        """Store an edit made outside the review session."""
        self.character = character
        self.etag += 1

    async def get_character(self, character_id: str) -> Character | None:
        return self.character if self.character.id == character_id else None

    async def load_for_update(
        self, character_id: str
    ) -> tuple[Character, str | None] | None:
        character = await self.get_character(character_id)
        return (character, f"etag-{self.etag}") if character else None

    async def replace_character(
        self, character: Character, *, etag: str | None = None
    ) -> Character:
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        if etag is not None and etag != f"etag-{self.etag}":
            raise StaleCharacterError(character.id)
        self.writes.append(character)
        self.save(character)
        return character


@pytest.fixture
def character() -> Character:
    return make_character(description="A tall, scarred knight who serves the crown.")


@pytest.fixture
def old_character() -> Character:
    return make_character(description="A tall knight.")
