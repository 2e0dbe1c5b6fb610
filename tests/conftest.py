"""Pytest configuration and shared fixtures for monitor tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def monitor_config(tmp_path: Path):
    """Config whose data roots live under ``tmp_path`` and retry without delay."""
    from core.config import MonitorConfig

    return MonitorConfig(
        influxdb_url="http://localhost:8086",
        influxdb_token="token",
        influxdb_org="org",
        influxdb_bucket="bucket",
        trades_base_path=tmp_path / "node_trades" / "hourly",
        orders_base_path=tmp_path / "node_order_statuses" / "hourly",
        retry_attempts=1,
        retry_delay_seconds=0.0,
    )
