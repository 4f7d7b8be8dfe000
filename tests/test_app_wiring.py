"""Tests for app factory and lifespan wiring."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from character_vault.app import create_app
from character_vault.history.session import ReviewSessionRegistry


def _settings() -> SimpleNamespace:
    return SimpleNamespace(
        app=SimpleNamespace(env="test", log_level="DEBUG", is_development=False),
        cosmos=SimpleNamespace(endpoint="", key="", database="character-vault"),
        history=SimpleNamespace(retention_limit=25),
    )


@pytest.mark.unit
def test_lifespan_wires_database_and_sessions() -> None:
    """Lifespan opens Cosmos, installs per-app state and releases it on exit."""
    settings = _settings()
    cosmos = MagicMock()
    cosmos.close = AsyncMock()

    with (
        patch("character_vault.app.load_settings", return_value=settings),
        patch("character_vault.app.configure_logging") as configure,
        patch(
            "character_vault.app.init_database", new=AsyncMock(return_value=cosmos)
        ) as init_db,
    ):
        app = create_app()
        with TestClient(app):
            assert app.state.cosmos is cosmos
            assert isinstance(app.state.sessions, ReviewSessionRegistry)
            assert app.state.auto_snapshots == {}
            scheduler = MagicMock()
            scheduler.aclose = AsyncMock()
            app.state.auto_snapshots["char-1"] = scheduler

    configure.assert_called_once_with("DEBUG")
    init_db.assert_awaited_once_with(settings.cosmos, provision=False)
    scheduler.aclose.assert_awaited_once()
    cosmos.close.assert_awaited_once()


@pytest.mark.unit
def test_history_routes_are_registered() -> None:
    with (
        patch("character_vault.app.load_settings", return_value=_settings()),
        patch("character_vault.app.configure_logging"),
    ):
        app = create_app()

    paths = app.openapi()["paths"]
    assert "/characters/{character_id}/history/restore" in paths
    assert "/characters/{character_id}/history/diff" in paths
    assert "/characters/{character_id}/history/edits" in paths


@pytest.mark.unit
def test_development_provisions_database() -> None:
    settings = _settings()
    settings.app.is_development = True
    cosmos = MagicMock()
    cosmos.close = AsyncMock()

    with (
        patch("character_vault.app.load_settings", return_value=settings),
        patch("character_vault.app.configure_logging"),
        patch(
            "character_vault.app.init_database", new=AsyncMock(return_value=cosmos)
        ) as init_db,
    ):
        with TestClient(create_app()):
            pass

    init_db.assert_awaited_once_with(settings.cosmos, provision=True)
