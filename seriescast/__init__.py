"""Time-series analytics engine for statistical dashboards."""

__version__ = "0.1.0"
