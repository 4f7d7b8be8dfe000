"""Restore a whole card or a single section from a snapshot."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from character_vault.history.errors import (
    ConcurrentRestoreError,
    RestoreNotConfirmedError,
    RestoreScopeError,
    RestoreWriteError,
    StaleCharacterError,
)
from character_vault.history.session import RestoreStatus
from character_vault.models.character import Character
from character_vault.models.sections import Section
from character_vault.models.snapshot import SnapshotSource

if TYPE_CHECKING:
    from character_vault.history.capture import AutoSnapshotScheduler, SnapshotRecorder
    from character_vault.history.session import ReviewSession
    from character_vault.history.stores import CharacterStore
    from character_vault.models.snapshot import Snapshot


class RestoreScope(StrEnum):
    WHOLE = "whole"


Scope = RestoreScope | Section

logger = logging.getLogger(__name__)


def build_restored(character: Character, snapshot: Snapshot, scope: Scope) -> Character:
    """Return a new validated card with ``scope`` taken from the snapshot.

    ``id``, ``created_at`` and ``version`` always come from the live card.
    """
    document: dict[str, Any] = character.model_dump()
    payload: dict[str, Any] = snapshot.payload.model_dump()

    if scope == RestoreScope.WHOLE:
        document["name"] = payload["name"]
        document["image_data"] = payload["image_data"]
        document["data"] = payload["data"]
    elif scope == Section.IMAGE:
        document["image_data"] = payload["image_data"]
    elif scope == Section.LOREBOOK:
        document["data"]["character_book"] = payload["data"]["character_book"]
    elif scope == Section.EXTENSIONS:
        document["data"]["extensions"] = payload["data"]["extensions"]
    else:
        value = payload["data"]["spec"][scope.value]
        document["data"]["spec"][scope.value] = value
        if scope == Section.NAME:
            document["name"] = value
    document["updated_at"] = datetime.now(UTC)

    try:
        return Character.model_validate(document)
    except ValidationError as exc:
        raise RestoreWriteError(
            f"Restored character {character.id!r} failed validation"
        ) from exc


class RestoreController:
    """Apply snapshot values to the live card as one atomic write.

    Callers obtain the destructive-action confirmation first and pass it as
    ``confirmed``. At most one restore per session may be in flight.
    """

    def __init__(
        self,
        characters: CharacterStore,
        *,
        recorder: SnapshotRecorder | None = None,
        scheduler: AutoSnapshotScheduler | None = None,
    ) -> None:
        self._characters = characters
        self._recorder = recorder
        self._scheduler = scheduler

    def _check_scope(self, session: ReviewSession, snapshot: Snapshot, scope: Scope) -> None:
        if scope == RestoreScope.WHOLE:
            return
        if scope != session.active_section:
            raise RestoreScopeError(
                f"Section {scope!s} is not the section open in the editor"
            )
        changed = {entry.section for entry in session.diff(snapshot.id) if entry.changed}
        if scope not in changed:
            raise RestoreScopeError(f"Section {scope!s} is unchanged in this snapshot")

    async def restore(
        self,
        session: ReviewSession,
        snapshot_id: str,
        scope: Scope,
        *,
        confirmed: bool,
    ) -> Character:
        """Restore ``scope`` from a snapshot and close the review session.

        The live card is re-read when the restore starts and written back
        against its etag, so sections outside ``scope`` keep their newest
        stored values. Raises ``RestoreWriteError`` when the read, validation
        or the write fails, in which case the live card is untouched and the
        session stays open.
        """
        if session.restore_in_flight:
            raise ConcurrentRestoreError(
                f"A restore is already in flight for character {session.character_id!r}"
            )
        if not confirmed:
            raise RestoreNotConfirmedError("Restore requires explicit confirmation")

        snapshot = session.catalog.get(snapshot_id)
        self._check_scope(session, snapshot, scope)

        session.restore_status = RestoreStatus.IN_FLIGHT
        session.last_error = None
        try:
            loaded = await self._characters.load_for_update(session.character_id)
            if loaded is None:
                raise RestoreWriteError(f"Character {session.character_id!r} no longer exists")
            live, etag = loaded
            # Edits saved since the session opened are kept outside the scope.
            session.character = live
            restored = build_restored(live, snapshot, scope)
            if self._scheduler is not None:
                self._scheduler.cancel()
            saved = await self._characters.replace_character(restored, etag=etag)
        except RestoreWriteError as exc:
            self._fail(session, exc)
            raise
        except StaleCharacterError as exc:
            error = RestoreWriteError(
                f"Character {session.character_id!r} changed during restore; reload and retry"
            )
            self._fail(session, error)
            raise error from exc
        except Exception as exc:
            error = RestoreWriteError(
                f"Failed to write restored character {session.character_id!r}"
            )
            self._fail(session, error)
            raise error from exc

        session.character = saved
        session.restore_status = RestoreStatus.SUCCEEDED
        session.close()
        logger.info(
            "Snapshot restored — character=%s snapshot=%s scope=%s",
            saved.id,
            snapshot.id,
            scope,
        )

        if self._recorder is not None:
            try:
                await self._recorder.capture(saved, SnapshotSource.ROLLBACK)
            except Exception:  # noqa: BLE001
                logger.warning(
                    "Failed to capture rollback snapshot — character=%s",
                    saved.id,
                    exc_info=True,
                )
        return saved

    @staticmethod
    def _fail(session: ReviewSession, error: RestoreWriteError) -> None:
        session.restore_status = RestoreStatus.FAILED
        session.last_error = str(error)
        logger.warning(
            "Snapshot restore failed — character=%s: %s",
            session.character_id,
            error,
            exc_info=True,
        )
