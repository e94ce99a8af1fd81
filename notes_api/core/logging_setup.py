"""Process-wide logging configuration."""

from __future__ import annotations

import logging

from .config import get_settings

_HANDLER_NAME = "notes_api"


def configure_logging(level: str | None = None) -> None:
    """Install one stream handler on the package logger (idempotent)."""
    settings = get_settings()
    logger = logging.getLogger("notes_api")
    logger.setLevel(level or settings.log_level)
    if any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logger.addHandler(handler)
