"""Structured logging configuration.

This module initializes structlog with a stable JSON line format.
Every module obtains its logger through ``get_logger(__name__)``.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL
from core.errors import NoteSyncConfigError


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog processors and the minimum log level.

    Args:
        level: Level name such as ``debug`` or ``info``.

    Raises:
        NoteSyncConfigError: If the level name is unknown.
    """
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        raise NoteSyncConfigError(
            f"Invalid log level '{level}'. Use debug, info, warning, or error."
        )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
