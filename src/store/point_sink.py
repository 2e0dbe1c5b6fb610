"""Time-series point sinks.

This module defines the write/flush contract consumed by the ingest
pipeline and an InfluxDB-backed implementation with explicit batching.
"""

from __future__ import annotations

from typing import Protocol, TextIO

from influxdb_client import InfluxDBClient
from influxdb_client.client.write_api import SYNCHRONOUS
from influxdb_client.rest import ApiException
from urllib3.exceptions import HTTPError

from core.config import MonitorConfig
from core.errors import MonitorStoreError
from core.logging_config import get_logger
from core.types import Point
from store.point_payload import point_to_influx, point_to_line_protocol

_LOGGER = get_logger(__name__)


class PointSink(Protocol):
    """Destination for mapped points."""

    def write(self, point: Point) -> None:
        """Accept one point; buffering is allowed and store failures surface in flush."""

    def flush(self) -> None:
        """Block until buffered points are sent."""

    def close(self) -> None:
        """Flush and release resources."""


class InfluxPointSink:
    """Buffered InfluxDB writer.

    Points accumulate in memory and are sent in one request on ``flush``
    or when the buffer reaches the configured batch size. A failed batch
    is logged and dropped.
    """

    def __init__(self, config: MonitorConfig, client: InfluxDBClient | None = None) -> None:
        """Initialize the sink from config.

        Args:
            config: Runtime configuration with InfluxDB connection values.
            client: Optional pre-built client, mainly for tests.

        Raises:
            MonitorStoreError: If bucket or org are not configured.
        """
        if not config.influxdb_bucket or not config.influxdb_org:
            raise MonitorStoreError(
                "InfluxDB bucket and org are required. "
                "Set INFLUXDB_BUCKET and INFLUXDB_ORG before starting the monitor."
            )
        self._bucket = config.influxdb_bucket
        self._org = config.influxdb_org
        self._batch_size = config.write_batch_size
        self._client = client or InfluxDBClient(
            url=config.influxdb_url,
            token=config.influxdb_token,
            org=config.influxdb_org,
        )
        self._write_api = self._client.write_api(write_options=SYNCHRONOUS)
        self._buffer: list[Point] = []
        self.points_written = 0
        self.points_dropped = 0

    def write(self, point: Point) -> None:
        """Buffer a point, flushing when the batch is full."""
        self._buffer.append(point)
        if len(self._buffer) >= self._batch_size:
            self.flush()

    def flush(self) -> None:
        """Send buffered points in one request."""
        if not self._buffer:
            return
        batch = self._buffer
        self._buffer = []
        try:
            self._write_api.write(
                bucket=self._bucket,
                org=self._org,
                record=[point_to_influx(point) for point in batch],
            )
        except (ApiException, HTTPError, OSError) as error:
            self.points_dropped += len(batch)
            _LOGGER.error(
                "point_write_failed",
                bucket=self._bucket,
                points=len(batch),
                error=str(error),
            )
            return
        self.points_written += len(batch)
        _LOGGER.debug("points_flushed", bucket=self._bucket, points=len(batch))

    def close(self) -> None:
        """Flush pending points and close the client."""
        self.flush()
        self._write_api.close()
        self._client.close()


class LineProtocolSink:
    """Dry-run sink that prints line protocol instead of writing to a store."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def write(self, point: Point) -> None:
        self._stream.write(point_to_line_protocol(point) + "\n")

    def flush(self) -> None:
        self._stream.flush()

    def close(self) -> None:
        self.flush()
