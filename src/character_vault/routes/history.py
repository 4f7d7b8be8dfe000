"""History routes — browse snapshots, inspect diffs, restore, capture."""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Query, Request, status
from pydantic import BaseModel

from character_vault.database.repositories.characters import CharacterRepository
from character_vault.database.repositories.snapshots import SnapshotRepository
from character_vault.history import (
    AutoSnapshotScheduler,
    ConcurrentRestoreError,
    PanelSide,
    RestoreController,
    RestoreNotConfirmedError,
    RestoreScope,
    RestoreScopeError,
    RestoreWriteError,
    ReviewSession,
    Scope,
    SnapshotNotFoundError,
    SnapshotRecorder,
    changed_entries,
    render_panel,
)
from character_vault.models.sections import Section
from character_vault.models.snapshot import SnapshotSource

router = APIRouter(prefix="/characters/{character_id}/history", tags=["history"])

logger = logging.getLogger(__name__)


class OpenRequest(BaseModel):
    active_section: Section | None = None


class SelectRequest(BaseModel):
    snapshot_id: str


class ActiveSectionRequest(BaseModel):
    active_section: Section | None = None


class RestoreRequest(BaseModel):
    snapshot_id: str
    scope: RestoreScope | Section
    confirm: bool = False


def _snapshot_repo(request: Request) -> SnapshotRepository:
    settings = request.app.state.settings
    return SnapshotRepository(
        request.app.state.cosmos.database,
        retention_limit=settings.history.retention_limit,
    )


def _character_repo(request: Request) -> CharacterRepository:
    return CharacterRepository(request.app.state.cosmos.database)


def _auto_scheduler(request: Request, character_id: str) -> AutoSnapshotScheduler:
    schedulers: dict[str, AutoSnapshotScheduler] = request.app.state.auto_snapshots
    scheduler = schedulers.get(character_id)
    if scheduler is None:
        scheduler = AutoSnapshotScheduler(
            SnapshotRecorder(_snapshot_repo(request)),
            idle_seconds=request.app.state.settings.history.auto_snapshot_idle_seconds,
        )
        schedulers[character_id] = scheduler
    return scheduler


def _require_session(request: Request, character_id: str) -> ReviewSession:
    session = request.app.state.sessions.get(character_id)
    if session is None or not session.is_open:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No open history session for this character",
        )
    return session


def _session_view(session: ReviewSession) -> dict[str, Any]:
    return {
        "character_id": session.character_id,
        "state": session.catalog.state,
        "active_section": session.active_section,
        "selected_id": session.catalog.selected_id,
        "restore_status": session.restore_status,
        "last_error": session.last_error,
        "snapshots": [
            {
                "id": snapshot.id,
                "created_at": snapshot.created_at.isoformat(),
                "source": snapshot.source,
                "label": snapshot.source_label,
                "description": snapshot.source_description,
            }
            for snapshot in session.catalog.snapshots
        ],
    }


@router.post("/open")
async def open_history(
    request: Request, character_id: str, body: OpenRequest | None = None
) -> dict[str, Any]:
    """Start a review session and select the newest snapshot."""
    character = await _character_repo(request).get_character(character_id)
    if character is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found")
    try:
        session = request.app.state.sessions.start(
            character, active_section=body.active_section if body else None
        )
        await session.open(_snapshot_repo(request))
    except ConcurrentRestoreError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return _session_view(session)


@router.get("")
async def get_history(request: Request, character_id: str) -> dict[str, Any]:
    return _session_view(_require_session(request, character_id))


@router.post("/select")
async def select_snapshot(
    request: Request, character_id: str, body: SelectRequest
) -> dict[str, Any]:
    session = _require_session(request, character_id)
    try:
        session.catalog.select(body.snapshot_id)
    except SnapshotNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _session_view(session)


@router.put("/active-section")
async def set_active_section(
    request: Request, character_id: str, body: ActiveSectionRequest
) -> dict[str, Any]:
    """Record which section the editor currently has open."""
    session = _require_session(request, character_id)
    session.active_section = body.active_section
    return _session_view(session)


@router.get("/diff")
async def get_diff(
    request: Request,
    character_id: str,
    changed_only: bool = True,
    expanded: Annotated[list[Section] | None, Query()] = None,
) -> dict[str, Any]:
    """Diff the selected snapshot against the live card.

    ``expanded`` lists sections whose long content should be shown in full.
    """
    session = _require_session(request, character_id)
    if not await session.refresh(_character_repo(request)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found")
    settings = request.app.state.settings
    expanded_sections = set(expanded or [])
    entries = session.diff()
    if changed_only:
        entries = changed_entries(entries)

    rendered = []
    for entry in entries:
        item: dict[str, Any] = {
            "section": entry.section,
            "label": entry.label,
            "changed": entry.changed,
            "is_image": entry.is_image,
            "is_active": entry.section == session.active_section,
        }
        if entry.is_image:
            item["snapshot_value"] = entry.snapshot_value
            item["current_value"] = entry.current_value
        else:
            is_expanded = entry.section in expanded_sections
            item["panels"] = [
                render_panel(
                    entry, side, expanded=is_expanded, config=settings.history
                ).model_dump(mode="json")
                for side in (PanelSide.SNAPSHOT, PanelSide.CURRENT)
            ]
        rendered.append(item)

    return {"selected_id": session.catalog.selected_id, "entries": rendered}


@router.post("/restore")
async def restore_snapshot(
    request: Request, character_id: str, body: RestoreRequest
) -> dict[str, Any]:
    """Restore the whole card or the active section from a snapshot."""
    session = _require_session(request, character_id)
    characters = _character_repo(request)
    if not await session.refresh(characters):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found")
    snapshots = _snapshot_repo(request)
    controller = RestoreController(
        characters,
        recorder=SnapshotRecorder(snapshots),
        scheduler=request.app.state.auto_snapshots.get(character_id),
    )
    scope: Scope = body.scope
    try:
        character = await controller.restore(
            session, body.snapshot_id, scope, confirmed=body.confirm
        )
    except SnapshotNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except (RestoreNotConfirmedError, RestoreScopeError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ConcurrentRestoreError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except RestoreWriteError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    request.app.state.sessions.discard(character_id)
    return {"character": character.model_dump(mode="json"), "scope": scope}


@router.post("/close")
async def close_history(request: Request, character_id: str) -> dict[str, Any]:
    request.app.state.sessions.discard(character_id)
    return {"character_id": character_id, "state": "closed"}


@router.post("/snapshots", status_code=status.HTTP_201_CREATED)
async def create_manual_snapshot(request: Request, character_id: str) -> dict[str, Any]:
    """Capture a manual checkpoint of the live card."""
    character = await _character_repo(request).get_character(character_id)
    if character is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found")
    scheduler = request.app.state.auto_snapshots.get(character_id)
    if scheduler is not None:
        scheduler.cancel()
    snapshot = await SnapshotRecorder(_snapshot_repo(request)).capture(
        character, SnapshotSource.MANUAL
    )
    logger.info(
        "Manual snapshot requested — character=%s created=%s",
        character_id,
        snapshot is not None,
    )
    return {
        "result": "created" if snapshot else "skipped",
        "snapshot_id": snapshot.id if snapshot else None,
    }


@router.post("/edits", status_code=status.HTTP_202_ACCEPTED)
async def record_edit(request: Request, character_id: str) -> dict[str, Any]:
    """Note that the editor saved the card; an auto snapshot follows once idle."""
    character = await _character_repo(request).get_character(character_id)
    if character is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Character not found")
    _auto_scheduler(request, character_id).schedule(character)
    return {"character_id": character_id, "auto_snapshot": "pending"}
