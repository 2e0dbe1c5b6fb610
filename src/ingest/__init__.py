"""Node log ingestion.

This module discovers partitioned trade and order-status files,
decodes their lines, and maps records into time-series points.
"""
