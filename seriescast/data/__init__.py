"""Series data model, period arithmetic and loading."""

from .structs import (
    Period,
    Record,
    ForecastPoint,
    TimeSeries,
    CombinedSeries,
    period_kind,
    period_to_date,
    shift_period,
)
from .loaders import SeriesLoader, ValidationResult

__all__ = [
    "Period",
    "Record",
    "ForecastPoint",
    "TimeSeries",
    "CombinedSeries",
    "period_kind",
    "period_to_date",
    "shift_period",
    "SeriesLoader",
    "ValidationResult",
]
