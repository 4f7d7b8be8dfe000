"""Process-wide logging setup."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s — %(message)s"

_NOISY_LOGGERS = (
    "azure.core.pipeline.policies.http_logging_policy",
    "azure.cosmos",
    "httpx",
)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once and quiet chatty SDK loggers."""
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT, force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger(__name__).debug("Logging configured — level=%s", level)
