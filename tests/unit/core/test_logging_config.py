"""Unit tests for structured logging configuration."""

from __future__ import annotations

import pytest

from core.errors import MonitorConfigError
from core.logging_config import configure_logging, get_logger


def test_configure_logging_rejects_unknown_level() -> None:
    """Unknown level names should raise a config error."""
    with pytest.raises(MonitorConfigError):
        configure_logging("LOUD")


def test_get_logger_emits_json_events(capsys) -> None:
    """Loggers should render events as JSON lines."""
    configure_logging("INFO")
    logger = get_logger("tests.logging")

    logger.info("logging_probe", answer=42)
    output = capsys.readouterr().err

    assert '"event": "logging_probe"' in output and '"answer": 42' in output
