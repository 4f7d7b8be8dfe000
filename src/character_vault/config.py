"""Environment-driven configuration for the character vault."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env(key: str, default: str = "") -> str:
    """Read an environment variable, falling back to a default."""
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    raw = _env(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class CosmosConfig:
    """Cosmos DB connection settings."""

    endpoint: str = field(default_factory=lambda: _env("COSMOS_ENDPOINT"))
    key: str = field(default_factory=lambda: _env("COSMOS_KEY"))
    database: str = field(
        default_factory=lambda: _env("COSMOS_DATABASE", "character-vault")
    )


@dataclass(frozen=True)
class HistoryConfig:
    """Snapshot history tuning knobs."""

    retention_limit: int = field(
        default_factory=lambda: _env_int("HISTORY_RETENTION_LIMIT", 25)
    )
    auto_snapshot_idle_seconds: int = field(
        default_factory=lambda: _env_int("HISTORY_AUTO_SNAPSHOT_IDLE_SECONDS", 30)
    )
    long_content_chars: int = field(
        default_factory=lambda: _env_int("HISTORY_LONG_CONTENT_CHARS", 900)
    )
    long_content_lines: int = field(
        default_factory=lambda: _env_int("HISTORY_LONG_CONTENT_LINES", 18)
    )


@dataclass(frozen=True)
class AppConfig:
    """Application runtime settings."""

    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class Settings:
    """Top-level settings aggregate."""

    cosmos: CosmosConfig = field(default_factory=CosmosConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    app: AppConfig = field(default_factory=AppConfig)


def load_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
