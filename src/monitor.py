"""Public import surface for the node monitor.

This module provides a stable import path for embedding the monitor.
It re-exports the runner, config, typed models, and core operations.
"""

from __future__ import annotations

from core.config import MonitorConfig
from core.types import (
    DataRoot,
    Order,
    OrderStatus,
    Point,
    RecordKind,
    ScanSummary,
    SideInfo,
    Trade,
)
from ingest.live_watcher import LiveWatcher
from ingest.monitor_runner import MonitorRunner
from ingest.partition_layout import is_date_dir, is_hour_unit
from ingest.partition_scanner import iter_partition_files, scan_partitions
from ingest.record_decoder import decode_record
from ingest.record_mapper import map_record
from ingest.record_pipeline import RecordPipeline
from ingest.retrying_reader import RetryingFileReader
from store.point_sink import InfluxPointSink, LineProtocolSink, PointSink

__all__ = [
    "DataRoot",
    "InfluxPointSink",
    "LineProtocolSink",
    "LiveWatcher",
    "MonitorConfig",
    "MonitorRunner",
    "Order",
    "OrderStatus",
    "Point",
    "PointSink",
    "RecordKind",
    "RecordPipeline",
    "RetryingFileReader",
    "ScanSummary",
    "SideInfo",
    "Trade",
    "decode_record",
    "is_date_dir",
    "is_hour_unit",
    "iter_partition_files",
    "map_record",
    "scan_partitions",
]
