"""Live filesystem watching for partitioned data roots.

This module schedules one recursive watchdog watch per data root and
keeps an explicit watch set on top of it. The watch set starts as every
directory found below the roots, grows as new DATE and HOUR partitions
appear, and shrinks when directories are deleted or moved away. Events
from directories outside the watch set are ignored, so only partition
directories pick up new files while the monitor runs.

The watchdog observer thread only enqueues events. A single worker loop
(``run``) consumes them in delivery order and owns every sink call
during live operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import os
from pathlib import Path
import queue
import threading
from typing import Any, Callable, Iterable, Mapping

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from core.constants import WATCH_QUEUE_POLL_SECONDS
from core.errors import MonitorStoreError, MonitorWatchError
from core.logging_config import get_logger
from core.types import DataRoot, RecordKind
from ingest.partition_layout import is_date_dir, is_hour_unit
from ingest.record_pipeline import RecordPipeline
from ingest.retrying_reader import RetryingFileReader
from store.point_sink import PointSink

_LOGGER = get_logger(__name__)


class WatcherState(str, Enum):
    """Lifecycle of a live watcher."""

    IDLE = "idle"
    WATCHING = "watching"
    STOPPED = "stopped"


@dataclass(frozen=True)
class WatchEvent:
    """A created or removed filesystem entry reported by the observer."""

    path: Path
    is_directory: bool
    removed: bool = False


class _WatchEventHandler(FileSystemEventHandler):
    """Forward creation, deletion, and move events to the watcher queue."""

    def __init__(self, enqueue: Callable[[WatchEvent], None]) -> None:
        super().__init__()
        self._enqueue = enqueue

    def on_created(self, event: FileSystemEvent) -> None:
        self._enqueue(WatchEvent(_to_path(event.src_path), event.is_directory))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            self._enqueue(WatchEvent(_to_path(event.src_path), True, removed=True))

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            self._enqueue(WatchEvent(_to_path(event.src_path), True, removed=True))
        # writers that rename a finished temp file into place
        self._enqueue(WatchEvent(_to_path(event.dest_path), event.is_directory))


class LiveWatcher:
    """Stateful watcher over the trade and order-status roots."""

    def __init__(
        self,
        data_roots: Iterable[DataRoot],
        pipelines: Mapping[RecordKind, RecordPipeline],
        sink: PointSink,
        reader: RetryingFileReader,
        stop_event: threading.Event,
        observer_factory: Callable[[], Any] = Observer,
    ) -> None:
        """Initialize the watcher without touching the filesystem.

        Args:
            data_roots: Roots to watch, each with its record kind.
            pipelines: Record pipeline per record kind.
            sink: Sink flushed after every processed file.
            reader: Retrying reader sharing ``stop_event``.
            stop_event: Shutdown signal observed between events.
            observer_factory: Builds the watchdog observer.
        """
        self._data_roots = tuple(data_roots)
        self._pipelines = dict(pipelines)
        self._sink = sink
        self._reader = reader
        self._stop_event = stop_event
        self._observer_factory = observer_factory
        self._observer: Any = None
        self._handler = _WatchEventHandler(self._enqueue)
        self._events: queue.Queue[WatchEvent] = queue.Queue()
        self._watched: set[Path] = set()
        self.state = WatcherState.IDLE

    @property
    def watched_paths(self) -> frozenset[Path]:
        """Directories whose new entries are currently handled."""
        return frozenset(self._watched)

    def start(self) -> None:
        """Create the observer, watch every root recursively, and start it.

        Raises:
            MonitorWatchError: If the observer cannot be created, a root
                cannot be scheduled, or the observer fails to start.
        """
        try:
            self._observer = self._observer_factory()
        except OSError as error:
            raise MonitorWatchError(f"Failed to create file watcher: {error}") from error
        for data_root in self._data_roots:
            try:
                self._observer.schedule(self._handler, str(data_root.path), recursive=True)
            except OSError as error:
                raise MonitorWatchError(
                    f"Failed to watch data root {data_root.path}: {error}"
                ) from error
            self._add_tree(data_root.path)
        try:
            self._observer.start()
        except OSError as error:
            raise MonitorWatchError(f"Failed to start file watcher: {error}") from error
        self.state = WatcherState.WATCHING
        _LOGGER.info(
            "watch_started",
            roots=[str(data_root.path) for data_root in self._data_roots],
            watched_dirs=len(self._watched),
        )

    def run(self) -> None:
        """Consume events until ``stop`` is called, then shut the observer down."""
        try:
            while not self._stop_event.is_set():
                self.process_next(WATCH_QUEUE_POLL_SECONDS)
        finally:
            self._shutdown()

    def stop(self) -> None:
        """Signal shutdown; in-flight work completes and new events are dropped."""
        self._stop_event.set()

    def process_next(self, timeout: float) -> bool:
        """Handle the next queued event.

        Args:
            timeout: Seconds to wait for an event.

        Returns:
            Whether an event was handled.
        """
        try:
            event = self._events.get(timeout=timeout)
        except queue.Empty:
            return False
        if event.removed:
            self._handle_removed_directory(event.path)
        elif event.is_directory:
            self._handle_directory(event.path)
        else:
            self._handle_file(event.path)
        return True

    def _enqueue(self, event: WatchEvent) -> None:
        if self._stop_event.is_set():
            return
        self._events.put(event)

    def _handle_directory(self, directory: Path) -> None:
        if directory in self._watched or directory.parent not in self._watched:
            return
        if is_date_dir(directory.name) or (
            is_hour_unit(directory.name) and is_date_dir(directory.parent.name)
        ):
            self._add_tree(directory)
            _LOGGER.info("watch_partition_added", path=str(directory))

    def _handle_removed_directory(self, directory: Path) -> None:
        removed = {
            path for path in self._watched if path == directory or path.is_relative_to(directory)
        }
        if not removed:
            return
        self._watched -= removed
        _LOGGER.info("watch_partition_removed", path=str(directory), watched_dirs=len(removed))

    def _handle_file(self, file_path: Path) -> None:
        data_root = self._root_for(file_path)
        if data_root is None or file_path.parent not in self._watched:
            _LOGGER.debug("watch_event_ignored", path=str(file_path))
            return
        _LOGGER.info("data_file_detected", path=str(file_path), kind=data_root.kind.value)
        summary = self._reader.read(file_path, self._pipelines[data_root.kind])
        if summary is not None:
            _LOGGER.info(
                "data_file_processed",
                path=str(file_path),
                lines=summary.lines,
                points=summary.points,
                failed_lines=summary.failed_lines,
            )
        self._flush_sink()

    def _flush_sink(self) -> None:
        try:
            self._sink.flush()
        except MonitorStoreError as error:
            _LOGGER.error("sink_flush_failed", error=str(error))

    def _root_for(self, candidate: Path) -> DataRoot | None:
        for data_root in self._data_roots:
            if data_root.contains(candidate):
                return data_root
        return None

    def _add_tree(self, top: Path) -> None:
        """Add a directory and every directory nested below it to the watch set."""
        self._watched.add(top)
        for dir_path, dir_names, _ in os.walk(top, onerror=self._log_walk_error):
            for dir_name in dir_names:
                self._watched.add(Path(dir_path) / dir_name)

    def _log_walk_error(self, error: OSError) -> None:
        _LOGGER.warning("watch_walk_failed", path=error.filename, error=str(error))

    def _shutdown(self) -> None:
        if self._observer is not None and self.state is WatcherState.WATCHING:
            self._observer.stop()
            self._observer.join()
        self.state = WatcherState.STOPPED
        _LOGGER.info("watch_stopped", watched_dirs=len(self._watched))


def _to_path(raw_path: str | bytes) -> Path:
    return Path(os.fsdecode(raw_path))
