"""Monitor exception hierarchy.

Startup failures (config, root scan, watch setup) abort the process.
Decode, mapping, and store errors are caught at the per-line or
per-batch boundary and logged.
"""

from __future__ import annotations


class MonitorError(Exception):
    """Base exception for all monitor failures."""


class MonitorConfigError(MonitorError):
    """Raised for invalid runtime configuration."""


class MonitorScanError(MonitorError):
    """Raised when a data root cannot be enumerated."""


class MonitorDecodeError(MonitorError):
    """Raised when a log line is not a structurally valid record."""


class MonitorMappingError(MonitorError):
    """Raised when a decoded record cannot be turned into points."""


class MonitorWatchError(MonitorError):
    """Raised when the filesystem watch cannot be established."""


class MonitorStoreError(MonitorError):
    """Raised for time-series store connection failures."""
