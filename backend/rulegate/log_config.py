"""Structured logging setup shared by the engine and its callers."""

import logging
from typing import Optional

import structlog

from rulegate.config import Settings, get_settings


def resolve_log_level(name: str) -> int:
    """Map a level name ("debug", "WARNING") to its number. Unknown names mean INFO."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog processors and the minimum level.

    Console rendering in DEBUG mode, one JSON object per event otherwise.
    """
    settings = settings or get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(resolve_log_level(settings.LOG_LEVEL)),
    )
