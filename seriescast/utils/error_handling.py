"""Error taxonomy and parameter checks for the analytics engine."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class AnalyticsError(Exception):
    """Base class for all errors raised by the analytics engine."""


class InsufficientHistoryError(AnalyticsError):
    """History is shorter than the minimum a strategy needs."""

    def __init__(self, required: int, available: int, strategy: str = ""):
        self.required = required
        self.available = available
        self.strategy = strategy
        prefix = f"{strategy}: " if strategy else ""
        super().__init__(
            f"{prefix}need at least {required} historical records, got {available}"
        )


class InvalidParameterError(AnalyticsError, ValueError):
    """A forecast parameter (horizon, window size, ...) is out of range."""


class EmptyInputError(AnalyticsError):
    """Statistics or a forecast were requested over a zero-length series."""


class SeriesOrderError(AnalyticsError, ValueError):
    """Combined periods are not strictly increasing."""


def validate_horizon(horizon: int) -> int:
    """
    Check that a forecast horizon is a positive integer.

    Args:
        horizon: Number of future periods to generate

    Returns:
        The horizon, unchanged

    Raises:
        InvalidParameterError: If horizon is not an integer >= 1
    """
    if isinstance(horizon, bool) or not isinstance(horizon, int):
        raise InvalidParameterError(f"Horizon must be an integer, got {horizon!r}")
    if horizon <= 0:
        raise InvalidParameterError(f"Horizon must be >= 1, got {horizon}")
    return horizon


def validate_window(window_size: int, history_length: Optional[int] = None) -> int:
    """
    Check that a window size is positive and, optionally, fits the history.

    Args:
        window_size: Number of most recent records to average
        history_length: Length of the history the window is applied to

    Returns:
        The window size, unchanged

    Raises:
        InvalidParameterError: If the window is <= 0 or larger than the history
    """
    if isinstance(window_size, bool) or not isinstance(window_size, int):
        raise InvalidParameterError(
            f"Window size must be an integer, got {window_size!r}"
        )
    if window_size <= 0:
        raise InvalidParameterError(f"Window size must be >= 1, got {window_size}")
    if history_length is not None and window_size > history_length:
        raise InvalidParameterError(
            f"Window size {window_size} exceeds history length {history_length}"
        )
    return window_size
