"""Record to time-series point mapping.

This module is a pure transformation: one decoded record in, an ordered
tuple of points out. It performs no I/O and produces no partial output.
"""

from __future__ import annotations

from datetime import datetime, timezone
import math
import re

from core.constants import (
    ORDER_STATUSES_MEASUREMENT,
    TRADE_SIDE_INFO_MEASUREMENT,
    TRADES_MEASUREMENT,
    UTC_ZONE_SUFFIX,
)
from core.errors import MonitorMappingError
from core.types import NodeRecord, OrderStatus, Point, SideInfo, Trade

_TIMESTAMP_PATTERN = re.compile(
    r"([0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2})(?:\.([0-9]+))?Z"
)
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def map_record(record: NodeRecord) -> tuple[Point, ...]:
    """Map a decoded record into its time-series points.

    Args:
        record: Trade or order-status record.

    Returns:
        ``1 + len(side_info)`` points for a trade, one point for an
        order status.

    Raises:
        MonitorMappingError: If the record timestamp cannot be parsed.
    """
    if isinstance(record, Trade):
        return map_trade(record)
    if isinstance(record, OrderStatus):
        return (map_order_status(record),)
    raise MonitorMappingError(f"Unsupported record type: {type(record).__name__}")


def map_trade(trade: Trade) -> tuple[Point, ...]:
    """Map a trade into side-info points followed by the parent trade point."""
    point_time = parse_utc_timestamp(trade.time)
    side_points = [
        _side_info_point(trade, side_info, index, point_time)
        for index, side_info in enumerate(trade.side_info)
    ]
    trade_point = Point(
        measurement=TRADES_MEASUREMENT,
        tags={
            "coin": trade.coin,
            "side": trade.side,
            "hash": trade.hash,
            "trade_dir_override": trade.trade_dir_override,
        },
        fields={
            "price": parse_decimal(trade.px),
            "size": parse_decimal(trade.sz),
            "user_count": len(trade.side_info),
        },
        time=point_time,
    )
    return (*side_points, trade_point)


def map_order_status(order_status: OrderStatus) -> Point:
    """Map an order-status event into one ``order_statuses`` point."""
    point_time = parse_utc_timestamp(order_status.time)
    order = order_status.order
    return Point(
        measurement=ORDER_STATUSES_MEASUREMENT,
        tags={"coin": order.coin},
        fields={
            "user": order_status.user,
            "status": order_status.status,
            "side": order.side,
            "order_type": order.order_type,
            "time_in_force": order.tif,
            "order_id": order.oid,
            "limit_price": parse_decimal(order.limit_px),
            "size": parse_decimal(order.sz),
            "orig_size": parse_decimal(order.orig_sz),
            "timestamp": order.timestamp,
            "is_trigger": order.is_trigger,
            "trigger_price": parse_decimal(order.trigger_px),
            "is_position_tpsl": order.is_position_tpsl,
            "reduce_only": order.reduce_only,
            "children": order.children,
            "cloid": order.cloid,
        },
        time=point_time,
    )


def parse_utc_timestamp(value: str) -> datetime:
    """Parse a zone-less node timestamp as UTC.

    The zone marker is appended before parsing, so values that already
    carry a zone are rejected. Sub-microsecond digits are truncated.

    Args:
        value: Timestamp such as ``2025-03-28T10:00:00.000``.

    Returns:
        Timezone-aware UTC datetime.

    Raises:
        MonitorMappingError: If the value is not an RFC 3339 timestamp.
    """
    match = _TIMESTAMP_PATTERN.fullmatch(value + UTC_ZONE_SUFFIX)
    if match is None:
        raise MonitorMappingError(f"Failed to parse time '{value}'")
    try:
        base_time = datetime.strptime(match.group(1), "%Y-%m-%dT%H:%M:%S")
    except ValueError as error:
        raise MonitorMappingError(f"Failed to parse time '{value}': {error}") from error
    fraction = (match.group(2) or "")[:6].ljust(6, "0")
    return base_time.replace(microsecond=int(fraction), tzinfo=timezone.utc)


def parse_decimal(value: str) -> float:
    """Parse a decimal string, returning ``0.0`` when it is not numeric."""
    if _DECIMAL_PATTERN.fullmatch(value) is None:
        return 0.0
    parsed = float(value)
    # overflow such as 1e999 parses to inf
    return 0.0 if math.isinf(parsed) else parsed


def _side_info_point(
    trade: Trade,
    side_info: SideInfo,
    index: int,
    point_time: datetime,
) -> Point:
    return Point(
        measurement=TRADE_SIDE_INFO_MEASUREMENT,
        tags={"coin": trade.coin},
        fields={
            "side": trade.side,
            "hash": trade.hash,
            "user": side_info.user,
            "order_id": str(side_info.oid),
            "start_pos": parse_decimal(side_info.start_pos),
            "has_twap": side_info.twap_id is not None,
            "has_cloid": side_info.cloid is not None,
            "side_index": index,
        },
        time=point_time,
    )
