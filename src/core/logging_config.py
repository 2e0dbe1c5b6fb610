"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
Modules obtain loggers here and emit snake_case events with fields.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL
from core.errors import MonitorConfigError


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog processors and the minimum log level.

    Args:
        level: Standard level name such as ``INFO`` or ``DEBUG``.

    Raises:
        MonitorConfigError: If the level name is unknown.
    """
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        logger_factory=_stderr_logger_factory,
        cache_logger_on_first_use=False,
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


def _stderr_logger_factory(*args: Any) -> structlog.PrintLogger:
    """Write events to the current stderr; stdout carries dry-run output."""
    return structlog.PrintLogger(sys.stderr)


def _resolve_level(level: str) -> int:
    """Translate a level name into its numeric value."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise MonitorConfigError(
            f"Invalid log level '{level}'. "
            "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    return numeric_level
