"""Per-line decode, map, and write pipeline.

This module is the failure boundary for a single log line: decode and
mapping errors are logged and the line is dropped, so one bad line never
stops the lines after it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.errors import MonitorDecodeError, MonitorMappingError
from core.logging_config import get_logger
from core.types import RecordKind, ScanSummary
from ingest.record_decoder import decode_record
from ingest.record_mapper import map_record
from store.point_sink import PointSink

_LOGGER = get_logger(__name__)


class RecordPipeline:
    """Decode lines of one record kind and hand their points to a sink."""

    def __init__(self, kind: RecordKind, sink: PointSink) -> None:
        self.kind = kind
        self._sink = sink

    def process_line(self, line: str) -> int | None:
        """Process one non-empty line.

        Args:
            line: Raw JSON text line.

        Returns:
            Number of points written, or ``None`` if the line was dropped.
        """
        try:
            record = decode_record(line, self.kind)
        except MonitorDecodeError as error:
            _LOGGER.warning("record_decode_failed", kind=self.kind.value, error=str(error))
            return None
        try:
            points = map_record(record)
        except MonitorMappingError as error:
            _LOGGER.warning("record_mapping_failed", kind=self.kind.value, error=str(error))
            return None
        for point in points:
            self._sink.write(point)
        return len(points)

    def process_lines(self, lines: Iterable[str]) -> ScanSummary:
        """Process every non-empty line and return file-level counters."""
        line_count = 0
        point_count = 0
        failed_count = 0
        for line in lines:
            if not line.strip():
                continue
            line_count += 1
            written = self.process_line(line)
            if written is None:
                failed_count += 1
            else:
                point_count += written
        return ScanSummary(
            files=1, lines=line_count, points=point_count, failed_lines=failed_count
        )

    def process_file(self, file_path: Path) -> ScanSummary:
        """Read and process a file once, logging and skipping read failures."""
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as error:
            _LOGGER.warning("file_read_failed", path=str(file_path), error=str(error))
            return ScanSummary()
        return self.process_lines(split_lines(text))


def split_lines(text: str) -> list[str]:
    """Split file content on newline characters only."""
    return text.split("\n")
