"""Shared typed models.

This module defines immutable record and point models used by the
decoder, mapper, pipeline, and sink layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Union


class RecordKind(str, Enum):
    """Record family carried by one data root."""

    TRADE = "trade"
    ORDER_STATUS = "order_status"


@dataclass(frozen=True)
class DataRoot:
    """A partitioned data directory and the record kind it holds.

    Attributes:
        path: Root directory containing DATE partitions.
        kind: Record kind decoded from every file under the root.
    """

    path: Path
    kind: RecordKind

    def contains(self, candidate: Path) -> bool:
        """Return whether a path lies under this root."""
        return candidate != self.path and candidate.is_relative_to(self.path)


@dataclass(frozen=True)
class SideInfo:
    """One counter-party entry of an executed trade.

    Attributes:
        user: Counter-party address.
        start_pos: Position before the fill, as a decimal string.
        oid: Order id that produced the fill.
        twap_id: TWAP id when the fill came from a TWAP order.
        cloid: Client order id when one was supplied.
    """

    user: str
    start_pos: str
    oid: int
    twap_id: str | None = None
    cloid: str | None = None


@dataclass(frozen=True)
class Trade:
    """One executed trade from ``node_trades``.

    Attributes:
        coin: Asset symbol.
        side: Aggressor side code.
        time: UTC timestamp without zone suffix.
        px: Execution price as a decimal string.
        sz: Execution size as a decimal string.
        hash: Execution hash.
        trade_dir_override: Trade direction override marker.
        side_info: Counter-party entries in node order.
    """

    coin: str
    side: str
    time: str
    px: str
    sz: str
    hash: str
    trade_dir_override: str
    side_info: tuple[SideInfo, ...] = ()


@dataclass(frozen=True)
class Order:
    """Order payload embedded in an order-status event."""

    coin: str
    side: str
    limit_px: str
    sz: str
    oid: int
    timestamp: int
    trigger_condition: str
    is_trigger: bool
    trigger_px: str
    children: tuple[object, ...]
    is_position_tpsl: bool
    reduce_only: bool
    order_type: str
    orig_sz: str
    tif: str
    cloid: str | None = None


@dataclass(frozen=True)
class OrderStatus:
    """One order lifecycle event from ``node_order_statuses``.

    Attributes:
        time: UTC timestamp without zone suffix.
        user: Order owner address.
        status: Lifecycle status name.
        order: Embedded order payload.
    """

    time: str
    user: str
    status: str
    order: Order


NodeRecord = Union[Trade, OrderStatus]


@dataclass(frozen=True)
class Point:
    """Immutable time-series point.

    Attributes:
        measurement: Measurement name.
        tags: Indexed low-cardinality string values.
        fields: Payload values keyed by field name.
        time: UTC point timestamp.
    """

    measurement: str
    tags: Mapping[str, str]
    fields: Mapping[str, object]
    time: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True)
class ScanSummary:
    """Counters for one processed data root or file.

    Attributes:
        files: Files read.
        lines: Non-empty lines seen.
        points: Points handed to the sink.
        failed_lines: Lines dropped by decode or mapping failures.
    """

    files: int = 0
    lines: int = 0
    points: int = 0
    failed_lines: int = 0

    def merge(self, other: "ScanSummary") -> "ScanSummary":
        """Return the element-wise sum of two summaries."""
        return ScanSummary(
            files=self.files + other.files,
            lines=self.lines + other.lines,
            points=self.points + other.points,
            failed_lines=self.failed_lines + other.failed_lines,
        )
