"""Unit tests for core config parsing."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from core.config import MonitorConfig
from core.errors import MonitorConfigError
from core.types import RecordKind


def test_from_env_reads_base_paths(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Config should resolve both data roots from environment."""
    monkeypatch.setenv("TRADES_BASE_PATH", str(tmp_path / "node_trades"))
    monkeypatch.setenv("ORDERS_BASE_PATH", str(tmp_path / "node_order_statuses"))

    config = MonitorConfig.from_env()

    assert config.trades_base_path.name == "node_trades"
    assert config.orders_base_path.name == "node_order_statuses"


def test_from_env_applies_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset numeric settings should fall back to retry and batch defaults."""
    for name in (
        "MONITOR_RETRY_ATTEMPTS",
        "MONITOR_RETRY_DELAY_SECONDS",
        "MONITOR_WRITE_BATCH_SIZE",
        "INFLUXDB_URL",
    ):
        monkeypatch.delenv(name, raising=False)

    config = MonitorConfig.from_env()

    assert (config.retry_attempts, config.retry_delay_seconds) == (5, 1.0)
    assert config.influxdb_url == "http://localhost:8086"


def test_from_env_raises_for_invalid_retry_attempts(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric retry attempts."""
    monkeypatch.setenv("MONITOR_RETRY_ATTEMPTS", "five")

    with pytest.raises(MonitorConfigError):
        MonitorConfig.from_env()

    assert os.getenv("MONITOR_RETRY_ATTEMPTS") == "five"


def test_from_env_raises_for_negative_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject negative retry delays."""
    monkeypatch.setenv("MONITOR_RETRY_DELAY_SECONDS", "-1")

    with pytest.raises(MonitorConfigError):
        MonitorConfig.from_env()


def test_from_env_loads_env_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Env file values should fill variables missing from the process environment."""
    monkeypatch.setenv("INFLUXDB_BUCKET", "placeholder")
    monkeypatch.delenv("INFLUXDB_BUCKET")
    env_file = tmp_path / ".env"
    env_file.write_text("INFLUXDB_BUCKET=hyperliquid\n", encoding="utf-8")

    config = MonitorConfig.from_env(env_file)

    assert config.influxdb_bucket == "hyperliquid"


def test_from_env_raises_for_missing_env_file(tmp_path: Path) -> None:
    """A named env file that does not exist is a config error."""
    with pytest.raises(MonitorConfigError):
        MonitorConfig.from_env(tmp_path / "missing.env")


def test_data_roots_pair_paths_with_record_kinds(tmp_path: Path) -> None:
    """Trade root should carry TRADE and order root ORDER_STATUS."""
    config = MonitorConfig(
        influxdb_url="http://localhost:8086",
        influxdb_token="",
        influxdb_org="org",
        influxdb_bucket="bucket",
        trades_base_path=tmp_path / "trades",
        orders_base_path=tmp_path / "orders",
    )

    trade_root, order_root = config.data_roots()

    assert trade_root.kind is RecordKind.TRADE
    assert order_root.kind is RecordKind.ORDER_STATUS
