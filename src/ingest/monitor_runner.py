"""Monitor orchestration: backfill, then live watching.

This module wires config, pipelines, the retrying reader, and the live
watcher around a single point sink.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from watchdog.observers import Observer

from core.config import MonitorConfig
from core.logging_config import get_logger
from core.types import DataRoot, RecordKind, ScanSummary
from ingest.live_watcher import LiveWatcher
from ingest.partition_scanner import scan_partitions
from ingest.record_pipeline import RecordPipeline
from ingest.retrying_reader import RetryingFileReader
from store.point_sink import PointSink

_LOGGER = get_logger(__name__)


class MonitorRunner:
    """Stateful runner for one monitor process."""

    def __init__(
        self,
        config: MonitorConfig,
        sink: PointSink,
        observer_factory: Callable[[], Any] = Observer,
    ) -> None:
        self._config = config
        self._sink = sink
        self._observer_factory = observer_factory
        self._stop_event = threading.Event()
        self._pipelines = {kind: RecordPipeline(kind, sink) for kind in RecordKind}
        self._watcher: LiveWatcher | None = None

    @property
    def data_roots(self) -> tuple[DataRoot, ...]:
        return self._config.data_roots()

    def run(self) -> None:
        """Backfill every root, then watch until ``stop`` is called."""
        self.backfill()
        self.watch()

    def backfill(self) -> dict[RecordKind, ScanSummary]:
        """Process all existing files synchronously and flush once.

        Returns:
            Scan counters keyed by record kind.

        Raises:
            MonitorScanError: If a data root cannot be read.
        """
        summaries: dict[RecordKind, ScanSummary] = {}
        for data_root in self.data_roots:
            summaries[data_root.kind] = scan_partitions(
                data_root, self._pipelines[data_root.kind]
            )
        self._sink.flush()
        _LOGGER.info(
            "backfill_completed",
            files=sum(summary.files for summary in summaries.values()),
            points=sum(summary.points for summary in summaries.values()),
        )
        return summaries

    def watch(self) -> None:
        """Start the live watcher and block in its event loop.

        Raises:
            MonitorWatchError: If the watch subsystem cannot be created.
        """
        reader = RetryingFileReader(
            max_attempts=self._config.retry_attempts,
            retry_delay=self._config.retry_delay_seconds,
            stop_event=self._stop_event,
        )
        self._watcher = LiveWatcher(
            data_roots=self.data_roots,
            pipelines=self._pipelines,
            sink=self._sink,
            reader=reader,
            stop_event=self._stop_event,
            observer_factory=self._observer_factory,
        )
        self._watcher.start()
        self._watcher.run()

    def stop(self) -> None:
        """Request shutdown of the live phase; safe from any thread."""
        self._stop_event.set()
