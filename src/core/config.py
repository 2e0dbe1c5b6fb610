"""Runtime configuration model for the node monitor.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from dotenv import load_dotenv

from core.constants import (
    DEFAULT_INFLUXDB_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_ORDERS_BASE_PATH,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY_SECONDS,
    DEFAULT_TRADES_BASE_PATH,
    DEFAULT_WRITE_BATCH_SIZE,
)
from core.errors import MonitorConfigError
from core.types import DataRoot, RecordKind


@dataclass(frozen=True)
class MonitorConfig:
    """Validated runtime configuration.

    Attributes:
        influxdb_url: InfluxDB server URL.
        influxdb_token: InfluxDB API token.
        influxdb_org: InfluxDB organization name.
        influxdb_bucket: Destination bucket for all measurements.
        trades_base_path: Root of the ``node_trades`` partition tree.
        orders_base_path: Root of the ``node_order_statuses`` partition tree.
        write_batch_size: Buffered points that trigger an automatic flush.
        retry_attempts: Read attempts for files discovered while watching.
        retry_delay_seconds: Fixed wait between read attempts.
        log_level: Minimum structured log level.
    """

    influxdb_url: str
    influxdb_token: str
    influxdb_org: str
    influxdb_bucket: str
    trades_base_path: Path
    orders_base_path: Path
    write_batch_size: int = DEFAULT_WRITE_BATCH_SIZE
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_delay_seconds: float = DEFAULT_RETRY_DELAY_SECONDS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "MonitorConfig":
        """Build config from process environment variables.

        Args:
            env_file: Optional dotenv file loaded before reading variables.
                Values already present in the environment take precedence.

        Returns:
            A validated config object.

        Raises:
            MonitorConfigError: If environment values are invalid.
        """
        if env_file is not None:
            _load_env_file(env_file)
        return cls(
            influxdb_url=os.getenv("INFLUXDB_URL", DEFAULT_INFLUXDB_URL),
            influxdb_token=os.getenv("INFLUXDB_TOKEN", ""),
            influxdb_org=os.getenv("INFLUXDB_ORG", ""),
            influxdb_bucket=os.getenv("INFLUXDB_BUCKET", ""),
            trades_base_path=_parse_path(
                os.getenv("TRADES_BASE_PATH"), DEFAULT_TRADES_BASE_PATH
            ),
            orders_base_path=_parse_path(
                os.getenv("ORDERS_BASE_PATH"), DEFAULT_ORDERS_BASE_PATH
            ),
            write_batch_size=_parse_positive_int(
                "MONITOR_WRITE_BATCH_SIZE", DEFAULT_WRITE_BATCH_SIZE
            ),
            retry_attempts=_parse_positive_int("MONITOR_RETRY_ATTEMPTS", DEFAULT_RETRY_ATTEMPTS),
            retry_delay_seconds=_parse_delay(
                "MONITOR_RETRY_DELAY_SECONDS", DEFAULT_RETRY_DELAY_SECONDS
            ),
            log_level=os.getenv("MONITOR_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )

    def data_roots(self) -> tuple[DataRoot, DataRoot]:
        """Return the trade and order-status roots with their record kinds."""
        return (
            DataRoot(path=self.trades_base_path, kind=RecordKind.TRADE),
            DataRoot(path=self.orders_base_path, kind=RecordKind.ORDER_STATUS),
        )


def _load_env_file(env_file: Path) -> None:
    """Load a dotenv file into the process environment.

    Raises:
        MonitorConfigError: If the file does not exist.
    """
    if not env_file.is_file():
        raise MonitorConfigError(
            f"Env file not found at {env_file}. "
            "Create the file or omit --env-file to use the process environment."
        )
    load_dotenv(env_file, override=False)


def _parse_path(raw_value: str | None, default: Path) -> Path:
    """Resolve a base path value, falling back to the default location."""
    value = Path(raw_value) if raw_value else default
    return value.expanduser().resolve()


def _parse_positive_int(name: str, default: int) -> int:
    """Parse a positive integer environment value.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset.

    Returns:
        Parsed integer.

    Raises:
        MonitorConfigError: If value is not a positive integer.
    """
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        parsed = int(raw_value)
    except ValueError as error:
        raise MonitorConfigError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a numeric value."
        ) from error
    if parsed < 1:
        raise MonitorConfigError(f"Invalid {name} value: expected >= 1, got {parsed}.")
    return parsed


def _parse_delay(name: str, default: float) -> float:
    """Parse a non-negative delay in seconds.

    Raises:
        MonitorConfigError: If value is not a non-negative number.
    """
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        parsed = float(raw_value)
    except ValueError as error:
        raise MonitorConfigError(
            f"Invalid {name} value: expected seconds, got '{raw_value}'."
        ) from error
    if parsed < 0:
        raise MonitorConfigError(f"Invalid {name} value: expected >= 0, got {parsed}.")
    return parsed
