"""Unit tests for backfill partition traversal."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import MonitorScanError
from core.types import DataRoot, RecordKind
from ingest.partition_scanner import iter_partition_files, scan_partitions
from ingest.record_pipeline import RecordPipeline
from tests.fixture_records import (
    RecordingSink,
    order_status_payload,
    to_line,
    trade_payload,
    write_lines,
)


def test_iter_partition_files_walks_nested_layout_in_order(tmp_path: Path) -> None:
    """Nested layout should yield files by ascending date then numeric hour."""
    write_lines(tmp_path / "20250329" / "0" / "a", ["x"])
    write_lines(tmp_path / "20250328" / "10" / "b", ["x"])
    write_lines(tmp_path / "20250328" / "9" / "c", ["x"])

    files = [path.relative_to(tmp_path).as_posix() for path in iter_partition_files(tmp_path)]

    assert files == ["20250328/9/c", "20250328/10/b", "20250329/0/a"]


def test_iter_partition_files_walks_flat_layout(tmp_path: Path) -> None:
    """Flat layout should yield numeric hour files directly under DATE."""
    write_lines(tmp_path / "20250328" / "23", ["x"])
    write_lines(tmp_path / "20250328" / "5", ["x"])

    files = [path.name for path in iter_partition_files(tmp_path)]

    assert files == ["5", "23"]


def test_iter_partition_files_skips_non_partitions(tmp_path: Path) -> None:
    """Non-DATE directories and non-HOUR entries should be ignored."""
    write_lines(tmp_path / "2025032" / "1" / "a", ["x"])
    write_lines(tmp_path / "abc12345" / "1" / "a", ["x"])
    write_lines(tmp_path / "20250328" / "09a", ["x"])
    write_lines(tmp_path / "20250328" / "notes" / "a", ["x"])
    write_lines(tmp_path / "README", ["x"])

    assert list(iter_partition_files(tmp_path)) == []


def test_iter_partition_files_raises_for_missing_root(tmp_path: Path) -> None:
    """An unreadable data root should be fatal."""
    with pytest.raises(MonitorScanError):
        iter_partition_files(tmp_path / "missing")


def test_iter_partition_files_skips_unreadable_partition(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A partition that fails to list should be skipped, not fatal."""
    write_lines(tmp_path / "20250327" / "1" / "a", ["x"])
    write_lines(tmp_path / "20250328" / "1" / "b", ["x"])
    original_iterdir = Path.iterdir

    def _flaky_iterdir(self: Path):
        if self.name == "20250327":
            raise PermissionError(13, "Permission denied", str(self))
        return original_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", _flaky_iterdir)

    files = [path.name for path in iter_partition_files(tmp_path)]

    assert files == ["b"]


def test_scan_partitions_feeds_every_line_to_the_sink(tmp_path: Path) -> None:
    """Scanning should map every line of every file and count results."""
    trades_root = tmp_path / "node_trades" / "hourly"
    write_lines(
        trades_root / "20250328" / "10" / "node_trades",
        [to_line(trade_payload(side_count=2)), "", to_line(trade_payload(side_count=1))],
    )
    sink = RecordingSink()

    summary = scan_partitions(
        DataRoot(trades_root, RecordKind.TRADE), RecordPipeline(RecordKind.TRADE, sink)
    )

    assert (summary.files, summary.lines, summary.points) == (1, 2, 5)
    assert len(sink.points) == 5


def test_scan_partitions_is_repeatable(tmp_path: Path) -> None:
    """Re-running a scan over an unchanged tree should produce identical points."""
    orders_root = tmp_path / "node_order_statuses" / "hourly"
    write_lines(
        orders_root / "20250328" / "10",
        [to_line(order_status_payload()), to_line(order_status_payload(status="filled"))],
    )
    data_root = DataRoot(orders_root, RecordKind.ORDER_STATUS)
    first_sink = RecordingSink()
    second_sink = RecordingSink()

    scan_partitions(data_root, RecordPipeline(RecordKind.ORDER_STATUS, first_sink))
    scan_partitions(data_root, RecordPipeline(RecordKind.ORDER_STATUS, second_sink))

    assert first_sink.points == second_sink.points and len(first_sink.points) == 2
