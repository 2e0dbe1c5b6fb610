"""Bounded-retry reader for files discovered while watching.

A creation event can fire before the writer has flushed content, or
before the path is even visible. The reader retries a fixed number of
times with a fixed delay and then gives up on the path for good.
"""

from __future__ import annotations

import threading
from pathlib import Path

from core.constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_DELAY_SECONDS
from core.logging_config import get_logger
from core.types import ScanSummary
from ingest.record_pipeline import RecordPipeline, split_lines

_LOGGER = get_logger(__name__)


class RetryingFileReader:
    """Read a file through a pipeline, retrying transient failures."""

    def __init__(
        self,
        max_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
        stop_event: threading.Event | None = None,
    ) -> None:
        """Initialize retry policy.

        Args:
            max_attempts: Total read attempts per path.
            retry_delay: Seconds to wait after a failed attempt.
            stop_event: Shutdown signal that cuts retry waits short.
        """
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._stop_event = stop_event or threading.Event()

    def read(self, file_path: Path, pipeline: RecordPipeline) -> ScanSummary | None:
        """Read all lines of a path and process them.

        Args:
            file_path: File announced by a creation event.
            pipeline: Pipeline for the root the file belongs to.

        Returns:
            Counters for the processed file, or ``None`` when every attempt
            failed or shutdown interrupted the retries.
        """
        for attempt in range(1, self.max_attempts + 1):
            text = self._attempt_read(file_path, attempt)
            if text is not None:
                return pipeline.process_lines(split_lines(text))
            if attempt == self.max_attempts:
                break
            if self._stop_event.wait(self.retry_delay):
                _LOGGER.info("file_retry_cancelled", path=str(file_path), attempt=attempt)
                return None
        _LOGGER.error(
            "file_retries_exhausted",
            path=str(file_path),
            attempts=self.max_attempts,
        )
        return None

    def _attempt_read(self, file_path: Path, attempt: int) -> str | None:
        if not file_path.exists():
            _LOGGER.info("file_not_visible", path=str(file_path), attempt=attempt)
            return None
        try:
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as error:
            _LOGGER.warning(
                "file_read_failed",
                path=str(file_path),
                attempt=attempt,
                error=str(error),
            )
            return None
