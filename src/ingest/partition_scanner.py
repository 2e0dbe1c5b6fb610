"""Backfill traversal of partitioned data roots.

This module walks ``root/DATE/HOUR/file`` (nested) and ``root/DATE/HOUR``
(flat) layouts in ascending partition order and feeds every data file
through a record pipeline.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from core.errors import MonitorScanError
from core.logging_config import get_logger
from core.types import DataRoot, ScanSummary
from ingest.partition_layout import hour_sort_key, is_date_dir, is_hour_unit
from ingest.record_pipeline import RecordPipeline

_LOGGER = get_logger(__name__)


def scan_partitions(data_root: DataRoot, pipeline: RecordPipeline) -> ScanSummary:
    """Process every existing data file under a root.

    Args:
        data_root: Root directory and its record kind.
        pipeline: Pipeline bound to the same record kind.

    Returns:
        Aggregated counters for the scan.

    Raises:
        MonitorScanError: If the root itself cannot be read.
    """
    summary = ScanSummary()
    for file_path in iter_partition_files(data_root.path):
        summary = summary.merge(pipeline.process_file(file_path))
    _LOGGER.info(
        "backfill_root_completed",
        root=str(data_root.path),
        kind=data_root.kind.value,
        files=summary.files,
        lines=summary.lines,
        points=summary.points,
        failed_lines=summary.failed_lines,
    )
    return summary


def iter_partition_files(root: Path) -> Iterator[Path]:
    """Return data files under a root in partition order.

    The root listing happens eagerly so an unreadable root fails before
    any file is yielded. Unreadable partitions below it are logged and
    skipped.

    Args:
        root: Data root directory.

    Returns:
        Iterator of data file paths.

    Raises:
        MonitorScanError: If the root cannot be listed.
    """
    try:
        entries = _sorted_entries(root)
    except OSError as error:
        raise MonitorScanError(
            f"Failed to read data root {root}: {error.strerror or error}. "
            "Check the configured base path and its permissions."
        ) from error
    date_dirs = [entry for entry in entries if entry.is_dir() and is_date_dir(entry.name)]
    return _iter_date_dirs(date_dirs)


def _iter_date_dirs(date_dirs: list[Path]) -> Iterator[Path]:
    for date_dir in date_dirs:
        hour_units = _list_partition(date_dir)
        if hour_units is None:
            continue
        hour_units = [unit for unit in hour_units if is_hour_unit(unit.name)]
        for hour_unit in sorted(hour_units, key=lambda unit: hour_sort_key(unit.name)):
            if hour_unit.is_dir():
                yield from _iter_hour_dir(hour_unit)
            elif hour_unit.is_file():
                yield hour_unit


def _iter_hour_dir(hour_dir: Path) -> Iterator[Path]:
    files = _list_partition(hour_dir)
    if files is None:
        return
    for file_path in files:
        if file_path.is_file():
            yield file_path


def _list_partition(partition: Path) -> list[Path] | None:
    """List a partition directory, logging and skipping on failure."""
    try:
        return _sorted_entries(partition)
    except OSError as error:
        _LOGGER.warning(
            "partition_unreadable",
            path=str(partition),
            error=str(error),
        )
        return None


def _sorted_entries(directory: Path) -> list[Path]:
    return sorted(directory.iterdir(), key=lambda entry: entry.name)
