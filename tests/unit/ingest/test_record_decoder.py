"""Unit tests for the log line decoder."""

from __future__ import annotations

import pytest

from core.errors import MonitorDecodeError
from core.types import OrderStatus, RecordKind, Trade
from ingest.record_decoder import decode_record
from tests.fixture_records import TRADE_LINE, order_status_payload, to_line, trade_payload


def test_decode_record_reads_trade_line() -> None:
    """Trade lines should decode with side info in node order."""
    record = decode_record(TRADE_LINE, RecordKind.TRADE)

    assert isinstance(record, Trade)
    assert (record.coin, record.px, record.side_info[0].oid) == ("BTC", "50000.5", 1)
    assert record.side_info[0].twap_id is None and record.side_info[0].cloid is None


def test_decode_record_reads_order_status_line() -> None:
    """Order-status lines should decode the embedded order's camelCase keys."""
    record = decode_record(to_line(order_status_payload()), RecordKind.ORDER_STATUS)

    assert isinstance(record, OrderStatus)
    assert record.order.limit_px == "140.2" and record.order.reduce_only is True


def test_decode_record_uses_root_kind_not_content() -> None:
    """A trade line read from an order-status root should fail to decode."""
    with pytest.raises(MonitorDecodeError):
        decode_record(TRADE_LINE, RecordKind.ORDER_STATUS)


@pytest.mark.parametrize(
    "line",
    ['{"coin": "BTC"', "[1, 2]", '"text"', '{"px": NaN}'],
)
def test_decode_record_rejects_malformed_json(line: str) -> None:
    """Truncated, non-object, and non-standard JSON should be rejected."""
    with pytest.raises(MonitorDecodeError):
        decode_record(line, RecordKind.TRADE)


def test_decode_record_rejects_missing_required_key() -> None:
    """Missing required keys should be decode failures."""
    payload = trade_payload()
    del payload["hash"]

    with pytest.raises(MonitorDecodeError):
        decode_record(to_line(payload), RecordKind.TRADE)


def test_decode_record_rejects_boolean_order_id() -> None:
    """Integer fields should not accept JSON booleans."""
    payload = order_status_payload()
    payload["order"]["oid"] = True

    with pytest.raises(MonitorDecodeError):
        decode_record(to_line(payload), RecordKind.ORDER_STATUS)


def test_decode_record_accepts_numeric_twap_id() -> None:
    """Optional ids may be numeric and are kept as strings."""
    payload = trade_payload(side_count=1)
    payload["side_info"][0]["twap_id"] = 4521

    record = decode_record(to_line(payload), RecordKind.TRADE)

    assert isinstance(record, Trade) and record.side_info[0].twap_id == "4521"


def test_decode_record_reads_null_keys_as_zero_values() -> None:
    """Null scalar and list keys should decode to empty or zero values."""
    payload = order_status_payload()
    payload["order"].update(tif=None, children=None, isTrigger=None, timestamp=None)

    record = decode_record(to_line(payload), RecordKind.ORDER_STATUS)

    assert isinstance(record, OrderStatus)
    order = record.order
    assert (order.tif, order.children, order.is_trigger, order.timestamp) == ("", (), False, 0)


def test_decode_record_reads_null_side_info_as_empty() -> None:
    """A null side-info list should decode as a trade without counter-parties."""
    record = decode_record(to_line(trade_payload(side_info=None)), RecordKind.TRADE)

    assert isinstance(record, Trade) and record.side_info == ()


def test_decode_record_rejects_wrong_non_null_type() -> None:
    """Non-null values of the wrong type should still be decode failures."""
    payload = order_status_payload()
    payload["order"]["tif"] = 5

    with pytest.raises(MonitorDecodeError):
        decode_record(to_line(payload), RecordKind.ORDER_STATUS)


def test_decode_record_rejects_deeply_nested_line() -> None:
    """Recursion exhaustion while parsing should surface as a decode failure."""
    with pytest.raises(MonitorDecodeError):
        decode_record("[" * 200000, RecordKind.TRADE)
