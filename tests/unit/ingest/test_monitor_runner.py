"""Unit tests for monitor orchestration."""

from __future__ import annotations

import threading

import pytest

from core.config import MonitorConfig
from core.errors import MonitorScanError
from core.types import RecordKind
from ingest.monitor_runner import MonitorRunner
from tests.fixture_records import (
    TRADE_LINE,
    FakeObserver,
    RecordingSink,
    order_status_payload,
    to_line,
    write_lines,
)


def test_backfill_processes_both_roots_and_flushes_once(monitor_config: MonitorConfig) -> None:
    """Backfill should scan trades then order statuses and flush a single time."""
    config = monitor_config
    write_lines(config.trades_base_path / "20250328" / "10" / "node_trades", [TRADE_LINE])
    write_lines(config.orders_base_path / "20250328" / "10", [to_line(order_status_payload())])
    sink = RecordingSink()

    summaries = MonitorRunner(config, sink).backfill()

    assert summaries[RecordKind.TRADE].points == 2
    assert summaries[RecordKind.ORDER_STATUS].points == 1
    assert [point.measurement for point in sink.points] == [
        "trade_side_info",
        "trades",
        "order_statuses",
    ]
    assert sink.flush_count == 1


def test_backfill_raises_for_missing_root(monitor_config: MonitorConfig) -> None:
    """A missing data root should abort startup."""
    config = monitor_config
    config.orders_base_path.mkdir(parents=True)

    with pytest.raises(MonitorScanError):
        MonitorRunner(config, RecordingSink()).backfill()


def test_run_watches_until_stopped(monitor_config: MonitorConfig) -> None:
    """Run should backfill, start watching, and return once stopped."""
    config = monitor_config
    config.trades_base_path.mkdir(parents=True)
    config.orders_base_path.mkdir(parents=True)
    observer = FakeObserver()
    runner = MonitorRunner(config, RecordingSink(), observer_factory=lambda: observer)
    worker = threading.Thread(target=runner.run)

    worker.start()
    runner.stop()
    worker.join(timeout=5)

    assert not worker.is_alive()
    assert observer.stopped
