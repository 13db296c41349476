"""Logging configuration shared by the engine and the CLI."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_LOGGING_CONFIGURED = False


def _resolve_level(level: str | int | None) -> int:
    """Resolves an explicit level, then LOG_LEVEL, then INFO."""
    candidate: str | int | None = level
    if candidate is None:
        candidate = os.getenv("LOG_LEVEL")
    if candidate is None or candidate == "":
        return logging.INFO
    if isinstance(candidate, int):
        return candidate
    resolved = logging.getLevelName(str(candidate).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int | None = None) -> int:
    """Configures root logging once and returns the applied level.

    Later calls only adjust the level, so an explicit CLI flag can override
    the environment after the first initialization.
    """
    global _LOGGING_CONFIGURED

    resolved = _resolve_level(level)
    root_logger = logging.getLogger()
    if not _LOGGING_CONFIGURED and not root_logger.handlers:
        logging.basicConfig(format=LOG_FORMAT, level=resolved)
        for handler in root_logger.handlers:
            handler.setLevel(resolved)
    root_logger.setLevel(resolved)
    _LOGGING_CONFIGURED = True
    return resolved


def get_logger(name: str) -> logging.Logger:
    """Returns a named logger, configuring logging from the environment once."""
    if not _LOGGING_CONFIGURED:
        configure_logging()
    return logging.getLogger(name)
