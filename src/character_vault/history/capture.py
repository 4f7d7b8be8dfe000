"""Snapshot capture — manual, idle-triggered and post-restore checkpoints."""

from __future__ import annotations

import asyncio
import contextlib
import hashlib
import json
import logging
from typing import TYPE_CHECKING

from character_vault.models.snapshot import Snapshot, SnapshotPayload, SnapshotSource

if TYPE_CHECKING:
    from character_vault.history.stores import SnapshotStore
    from character_vault.models.character import Character

logger = logging.getLogger(__name__)


def build_payload(character: Character) -> SnapshotPayload:
    """Copy every section of the card by value."""
    return SnapshotPayload(
        name=character.name,
        image_data=character.image_data,
        data=character.data.model_copy(deep=True),
    )


def payload_hash(payload: SnapshotPayload) -> str:
    serialized = json.dumps(
        payload.model_dump(mode="json", exclude_none=True),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


class SnapshotRecorder:
    """Append snapshots to a store, skipping captures identical to the latest."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store

    async def capture(
        self, character: Character, source: SnapshotSource
    ) -> Snapshot | None:
        """Capture the card. Returns None when nothing changed since the latest."""
        payload = build_payload(character)
        digest = payload_hash(payload)
        latest = await self._store.get_latest(character.id)
        if latest is not None and latest.payload_hash == digest:
            logger.debug(
                "Snapshot skipped, unchanged — character=%s source=%s",
                character.id,
                source,
            )
            return None

        snapshot = Snapshot(
            character_id=character.id,
            source=source,
            payload=payload,
            payload_hash=digest,
        )
        await self._store.create_snapshot(snapshot)
        logger.info(
            "Snapshot captured — character=%s source=%s id=%s",
            character.id,
            source,
            snapshot.id,
        )
        return snapshot


class AutoSnapshotScheduler:
    """Capture an ``auto`` snapshot once edits have been idle for a while."""

    def __init__(self, recorder: SnapshotRecorder, *, idle_seconds: float) -> None:
        self._recorder = recorder
        self._idle_seconds = idle_seconds
        self._pending: Character | None = None
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> Character | None:
        return self._pending

    def schedule(self, character: Character) -> None:
        """Remember the latest edit and restart the idle timer."""
        self._pending = character
        self._cancel_timer()
        self._task = asyncio.create_task(self._capture_when_idle())

    def cancel(self) -> None:
        """Drop any pending auto capture."""
        self._pending = None
        self._cancel_timer()

    async def aclose(self) -> None:
        task = self._task
        self.cancel()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _cancel_timer(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _capture_when_idle(self) -> None:
        await asyncio.sleep(self._idle_seconds)
        character = self._pending
        self._pending = None
        self._task = None
        if character is None:
            return
        try:
            await self._recorder.capture(character, SnapshotSource.AUTO)
        except Exception:  # noqa: BLE001
            logger.warning(
                "Auto snapshot failed — character=%s", character.id, exc_info=True
            )
