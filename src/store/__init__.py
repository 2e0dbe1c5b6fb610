"""Time-series storage layer.

This module converts monitor points for InfluxDB and owns the
buffered write and flush contract used by ingestion.
"""
