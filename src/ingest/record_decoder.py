"""Line decoder for node trade and order-status logs.

This module turns one line of strict JSON into a typed record.
The record kind comes from the data root, never from line content.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

from core.errors import MonitorDecodeError
from core.types import NodeRecord, Order, OrderStatus, RecordKind, SideInfo, Trade

_NULL_DEFAULTS: dict[type, Callable[[], Any]] = {str: str, int: int, bool: bool, list: list}


def decode_record(line: str, kind: RecordKind) -> NodeRecord:
    """Decode one log line into the record shape for its root.

    Args:
        line: Raw JSON text line.
        kind: Record kind of the data root the line came from.

    Returns:
        Parsed trade or order-status record.

    Raises:
        MonitorDecodeError: If the line is not valid JSON or misses
            required keys.
    """
    payload = _parse_json_object(line)
    if kind is RecordKind.TRADE:
        return _decode_trade(payload)
    return _decode_order_status(payload)


def _parse_json_object(line: str) -> Mapping[str, Any]:
    try:
        payload = json.loads(line, parse_constant=_reject_constant)
    except (json.JSONDecodeError, ValueError) as error:
        raise MonitorDecodeError(f"Invalid JSON: {error}") from error
    except RecursionError as error:
        raise MonitorDecodeError("Invalid JSON: nesting too deep") from error
    if not isinstance(payload, dict):
        raise MonitorDecodeError(
            f"Invalid record: expected JSON object, got {type(payload).__name__}"
        )
    return payload


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _decode_trade(payload: Mapping[str, Any]) -> Trade:
    side_info_payload = _require(payload, "side_info", list, "trade")
    return Trade(
        coin=_require(payload, "coin", str, "trade"),
        side=_require(payload, "side", str, "trade"),
        time=_require(payload, "time", str, "trade"),
        px=_require(payload, "px", str, "trade"),
        sz=_require(payload, "sz", str, "trade"),
        hash=_require(payload, "hash", str, "trade"),
        trade_dir_override=_require(payload, "trade_dir_override", str, "trade"),
        side_info=tuple(
            _decode_side_info(entry, index) for index, entry in enumerate(side_info_payload)
        ),
    )


def _decode_side_info(entry: Any, index: int) -> SideInfo:
    context = f"side_info[{index}]"
    if not isinstance(entry, dict):
        raise MonitorDecodeError(f"Invalid {context}: expected JSON object")
    return SideInfo(
        user=_require(entry, "user", str, context),
        start_pos=_require(entry, "start_pos", str, context),
        oid=_require_int(entry, "oid", context),
        twap_id=_optional_id(entry, "twap_id", context),
        cloid=_optional_id(entry, "cloid", context),
    )


def _decode_order_status(payload: Mapping[str, Any]) -> OrderStatus:
    order_payload = _require(payload, "order", dict, "order status")
    return OrderStatus(
        time=_require(payload, "time", str, "order status"),
        user=_require(payload, "user", str, "order status"),
        status=_require(payload, "status", str, "order status"),
        order=_decode_order(order_payload),
    )


def _decode_order(payload: Mapping[str, Any]) -> Order:
    return Order(
        coin=_require(payload, "coin", str, "order"),
        side=_require(payload, "side", str, "order"),
        limit_px=_require(payload, "limitPx", str, "order"),
        sz=_require(payload, "sz", str, "order"),
        oid=_require_int(payload, "oid", "order"),
        timestamp=_require_int(payload, "timestamp", "order"),
        trigger_condition=_require(payload, "triggerCondition", str, "order"),
        is_trigger=_require(payload, "isTrigger", bool, "order"),
        trigger_px=_require(payload, "triggerPx", str, "order"),
        children=tuple(_require(payload, "children", list, "order")),
        is_position_tpsl=_require(payload, "isPositionTpsl", bool, "order"),
        reduce_only=_require(payload, "reduceOnly", bool, "order"),
        order_type=_require(payload, "orderType", str, "order"),
        orig_sz=_require(payload, "origSz", str, "order"),
        tif=_require(payload, "tif", str, "order"),
        cloid=_optional_id(payload, "cloid", "order"),
    )


def _require(payload: Mapping[str, Any], key: str, expected: type, context: str) -> Any:
    """Read a required key; a JSON null yields the zero value of scalar and list keys."""
    if key not in payload:
        raise MonitorDecodeError(f"Invalid {context}: missing key '{key}'")
    value = payload[key]
    if value is None and expected in _NULL_DEFAULTS:
        return _NULL_DEFAULTS[expected]()
    if not isinstance(value, expected):
        raise MonitorDecodeError(
            f"Invalid {context}: key '{key}' expected {expected.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _require_int(payload: Mapping[str, Any], key: str, context: str) -> int:
    value = _require(payload, key, int, context)
    if isinstance(value, bool):
        raise MonitorDecodeError(f"Invalid {context}: key '{key}' expected int, got bool")
    return value


def _optional_id(payload: Mapping[str, Any], key: str, context: str) -> str | None:
    """Read a nullable identifier, accepting string or integer ids."""
    value = payload.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise MonitorDecodeError(
            f"Invalid {context}: key '{key}' expected string or null, "
            f"got {type(value).__name__}"
        )
    return str(value)
