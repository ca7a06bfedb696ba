"""Logging, error taxonomy, configuration and serialization utilities."""

from seriescast.utils.error_handling import (
    AnalyticsError,
    InsufficientHistoryError,
    InvalidParameterError,
    EmptyInputError,
    SeriesOrderError,
    validate_horizon,
    validate_window,
)
from seriescast.utils.config_manager import ConfigManager
from seriescast.utils.logging_config import setup_logging, get_logger
from seriescast.utils.serialization import to_json, save_json, load_json

__all__ = [
    "AnalyticsError",
    "InsufficientHistoryError",
    "InvalidParameterError",
    "EmptyInputError",
    "SeriesOrderError",
    "validate_horizon",
    "validate_window",
    "ConfigManager",
    "setup_logging",
    "get_logger",
    "to_json",
    "save_json",
    "load_json",
]
