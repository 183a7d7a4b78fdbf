"""Metric ingest service with time-series charts and sparkline badges."""

__version__ = "0.1.0"
