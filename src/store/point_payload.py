"""Shared conversion of monitor points into InfluxDB points.

This module centralizes field value rendering for the store layer.
It is reused by the InfluxDB sink and the line-protocol dry-run sink.
"""

from __future__ import annotations

import json

from influxdb_client import Point as InfluxPoint
from influxdb_client import WritePrecision

from core.types import Point


def point_to_influx(point: Point) -> InfluxPoint:
    """Convert a monitor point into an InfluxDB client point.

    Args:
        point: Immutable monitor point.

    Returns:
        InfluxDB point with tags, rendered fields, and nanosecond time.
    """
    influx_point = InfluxPoint(point.measurement)
    for key, value in point.tags.items():
        influx_point.tag(key, value)
    for key, value in point.fields.items():
        rendered = render_field_value(value)
        if rendered is not None:
            influx_point.field(key, rendered)
    return influx_point.time(point.time, WritePrecision.NS)


def render_field_value(value: object) -> object | None:
    """Render a field value into a type InfluxDB accepts.

    Sequences become JSON strings. ``None`` yields ``None`` so the caller
    omits the field, since InfluxDB has no null field values.
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), separators=(",", ":"))
    return value


def point_to_line_protocol(point: Point) -> str:
    """Render a monitor point as one InfluxDB line-protocol row."""
    return point_to_influx(point).to_line_protocol()
