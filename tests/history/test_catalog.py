"""Tests for SnapshotCatalog selection state and ReviewSession lifecycle."""

from unittest.mock import AsyncMock

import pytest
from conftest import FakeCharacterStore, FakeSnapshotStore, make_character, make_snapshot

from character_vault.history.catalog import CatalogState, SnapshotCatalog
from character_vault.history.errors import (
    ConcurrentRestoreError,
    HistoryError,
    SnapshotNotFoundError,
)
from character_vault.history.session import (
    RestoreStatus,
    ReviewSession,
    ReviewSessionRegistry,
)
from character_vault.models.sections import Section
from character_vault.models.snapshot import SnapshotSource


@pytest.fixture
def store() -> FakeSnapshotStore:
    base = make_character(description="v1")
    return FakeSnapshotStore(
        [
            make_snapshot(base, minutes=0, snapshot_id="s-old"),
            make_snapshot(base, minutes=10, snapshot_id="s-new"),
            make_snapshot(base, minutes=5, snapshot_id="s-mid"),
        ]
    )


class TestSnapshotCatalog:
    """Test catalog ordering, selection and state transitions."""

    async def test_open_selects_newest(self, store: FakeSnapshotStore) -> None:
        catalog = SnapshotCatalog()
        assert catalog.state == CatalogState.CLOSED

        await catalog.open(store, "char-1")

        assert catalog.state == CatalogState.READY
        assert [s.id for s in catalog.snapshots] == ["s-new", "s-mid", "s-old"]
        assert catalog.selected_id == "s-new"

    async def test_ties_keep_store_order(self) -> None:
        """Verify equal timestamps keep the store's newest-inserted-first order."""
        base = make_character()
        store = FakeSnapshotStore(
            [
                make_snapshot(base, snapshot_id="first"),
                make_snapshot(base, snapshot_id="second"),
            ]
        )
        catalog = SnapshotCatalog()

        await catalog.open(store, "char-1")

        assert [s.id for s in catalog.snapshots] == ["second", "first"]

    async def test_open_with_no_snapshots_selects_nothing(self) -> None:
        catalog = SnapshotCatalog()

        await catalog.open(FakeSnapshotStore(), "char-1")

        assert catalog.state == CatalogState.READY
        assert catalog.selected is None

    async def test_open_failure_returns_to_closed(self) -> None:
        store = AsyncMock()
        store.list_snapshots.side_effect = RuntimeError("storage offline")
        catalog = SnapshotCatalog()

        with pytest.raises(RuntimeError):
            await catalog.open(store, "char-1")

        assert catalog.state == CatalogState.CLOSED

    async def test_select_changes_only_selection(self, store: FakeSnapshotStore) -> None:
        catalog = SnapshotCatalog()
        await catalog.open(store, "char-1")
        before = [s.model_dump() for s in catalog.snapshots]

        selected = catalog.select("s-old")

        assert selected.id == "s-old"
        assert catalog.selected_id == "s-old"
        assert [s.model_dump() for s in catalog.snapshots] == before

    async def test_select_unknown_raises(self, store: FakeSnapshotStore) -> None:
        catalog = SnapshotCatalog()
        await catalog.open(store, "char-1")

        with pytest.raises(SnapshotNotFoundError):
            catalog.select("missing")
        assert catalog.selected_id == "s-new"

    def test_select_requires_open_catalog(self) -> None:
        with pytest.raises(HistoryError):
            SnapshotCatalog().select("s-new")

    async def test_close_forgets_selection(self, store: FakeSnapshotStore) -> None:
        catalog = SnapshotCatalog()
        await catalog.open(store, "char-1")
        catalog.select("s-mid")

        catalog.close()
        assert catalog.state == CatalogState.CLOSED
        assert catalog.selected_id is None

        await catalog.open(store, "char-1")
        assert catalog.selected_id == "s-new"

    async def test_snapshot_metadata(self, store: FakeSnapshotStore) -> None:
        catalog = SnapshotCatalog()
        await catalog.open(store, "char-1")

        snapshot = catalog.get("s-new")

        assert snapshot.source == SnapshotSource.MANUAL
        assert snapshot.source_label == "Manual"
        assert snapshot.source_description == "Manual snapshot"


class TestReviewSession:
    """Test per-character review sessions."""

    async def test_diff_uses_selected_snapshot(self) -> None:
        old = make_character(description="v1")
        store = FakeSnapshotStore([make_snapshot(old, snapshot_id="s-1")])
        session = ReviewSession(character=make_character(description="v2"))

        assert session.diff() == []
        await session.open(store)

        changed = [entry.section for entry in session.diff() if entry.changed]
        assert changed == [Section.DESCRIPTION]
        with pytest.raises(SnapshotNotFoundError):
            session.diff("missing")

    async def test_refresh_picks_up_saved_edits(self) -> None:
        """Verify the diff follows edits stored after the session opened."""
        old = make_character(description="v1")
        characters = FakeCharacterStore(make_character(description="v1"))
        session = ReviewSession(character=characters.character)
        await session.open(FakeSnapshotStore([make_snapshot(old, snapshot_id="s-1")]))
        assert [entry for entry in session.diff() if entry.changed] == []

        characters.save(make_character(description="v2"))

        assert await session.refresh(characters) is True
        changed = [entry.section for entry in session.diff() if entry.changed]
        assert changed == [Section.DESCRIPTION]

    async def test_refresh_reports_missing_character(self) -> None:
        characters = FakeCharacterStore(make_character().model_copy(update={"id": "other"}))
        session = ReviewSession(character=make_character())

        assert await session.refresh(characters) is False
        assert session.character.id == "char-1"

    def test_registry_keeps_sessions_independent(self) -> None:
        registry = ReviewSessionRegistry()
        first = make_character()
        second = make_character().model_copy(update={"id": "char-2"})

        a = registry.start(first, active_section=Section.NAME)
        b = registry.start(second, active_section=Section.TAGS)

        assert registry.get("char-1") is a
        assert registry.get("char-2") is b
        assert a.active_section == Section.NAME
        registry.discard("char-1")
        assert registry.get("char-1") is None
        assert registry.get("char-2") is b

    def test_registry_refuses_to_replace_in_flight_session(self) -> None:
        registry = ReviewSessionRegistry()
        session = registry.start(make_character())
        session.restore_status = RestoreStatus.IN_FLIGHT

        with pytest.raises(ConcurrentRestoreError):
            registry.start(make_character())
