"""FastAPI application factory and lifespan wiring."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from character_vault.config import load_settings
from character_vault.database.client import init_database
from character_vault.history.session import ReviewSessionRegistry
from character_vault.logging_config import configure_logging
from character_vault.routes import history

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = app.state.settings
    cosmos = await init_database(settings.cosmos, provision=settings.app.is_development)
    app.state.cosmos = cosmos
    app.state.sessions = ReviewSessionRegistry()
    app.state.auto_snapshots = {}
    logger.info("Character vault started — env=%s", settings.app.env)
    try:
        yield
    finally:
        for scheduler in app.state.auto_snapshots.values():
            await scheduler.aclose()
        await cosmos.close()
        logger.info("Character vault stopped")


def create_app() -> FastAPI:
    settings = load_settings()
    configure_logging(settings.app.log_level)
    app = FastAPI(
        title="Character Vault",
        debug=settings.app.is_development,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.include_router(history.router)
    return app
