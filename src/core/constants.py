"""Core constants used across monitor modules.

This module centralizes defaults and wire-format names.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_INFLUXDB_URL = "http://localhost:8086"
DEFAULT_TRADES_BASE_PATH = Path("~/hl/data/node_trades/hourly")
DEFAULT_ORDERS_BASE_PATH = Path("~/hl/data/node_order_statuses/hourly")
DEFAULT_WRITE_BATCH_SIZE = 500
DEFAULT_RETRY_ATTEMPTS = 5
DEFAULT_RETRY_DELAY_SECONDS = 1.0
DEFAULT_LOG_LEVEL = "INFO"
DATE_DIR_NAME_LENGTH = 8
UTC_ZONE_SUFFIX = "Z"
TRADES_MEASUREMENT = "trades"
TRADE_SIDE_INFO_MEASUREMENT = "trade_side_info"
ORDER_STATUSES_MEASUREMENT = "order_statuses"
WATCH_QUEUE_POLL_SECONDS = 0.5
