"""Core data structures for the analytics engine."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union
import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# A calendar year (2021) or an ISO calendar date ("2021-03-14")
Period = Union[int, str]

YEAR = "year"
DATE = "date"


def period_kind(period: Period) -> str:
    """Return ``"year"`` for integer periods and ``"date"`` for ISO date strings."""
    if isinstance(period, (int, np.integer)) and not isinstance(period, bool):
        return YEAR
    if isinstance(period, str):
        return DATE
    raise TypeError(f"Unsupported period type: {type(period).__name__}")


def shift_period(period: Period, steps: int) -> Period:
    """
    Move a period forward by a number of steps.

    Years advance by one per step, dates by one calendar day per step.

    Args:
        period: Year as int or ISO date string
        steps: Number of periods to move (may be negative)

    Returns:
        The shifted period, of the same kind as the input
    """
    if period_kind(period) == YEAR:
        return int(period) + steps
    shifted = date.fromisoformat(period) + timedelta(days=steps)
    return shifted.isoformat()


def period_to_date(period: Union[Period, date]) -> date:
    """
    Map a date-keyed period to a calendar date.

    Raises:
        TypeError: For year-keyed periods, which carry no day of week
    """
    if isinstance(period, datetime):
        return period.date()
    if isinstance(period, date):
        return period
    if period_kind(period) == YEAR:
        raise TypeError(f"Year period {period!r} cannot be mapped to a calendar date")
    return date.fromisoformat(period)


@dataclass(frozen=True)
class Record:
    """
    One observation of a dataset.

    Attributes:
        period: Ordering key (year or ISO date)
        metrics: Mapping from metric name to numeric value
    """
    period: Period
    metrics: Mapping[str, float] = field(default_factory=dict)

    def value(self, metric: str) -> float:
        """Return a metric value, raising KeyError with context when absent."""
        try:
            return self.metrics[metric]
        except KeyError:
            raise KeyError(
                f"Metric '{metric}' not present for period {self.period!r}; "
                f"available: {sorted(self.metrics)}"
            ) from None

    def to_dict(self, period_key: str = "period") -> Dict[str, Any]:
        """Flatten to ``{period_key: period, metric: value, ...}``."""
        return {period_key: self.period, **self.metrics}


@dataclass(frozen=True)
class ForecastPoint(Record):
    """A record tagged as observed (``is_forecast=False``) or generated."""
    is_forecast: bool = False

    @classmethod
    def from_record(cls, record: Record, is_forecast: bool = False) -> "ForecastPoint":
        """Wrap a plain record."""
        return cls(period=record.period, metrics=dict(record.metrics), is_forecast=is_forecast)

    def to_dict(self, period_key: str = "period") -> Dict[str, Any]:
        """Flatten including the ``isForecast`` tag."""
        data = super().to_dict(period_key)
        data["isForecast"] = self.is_forecast
        return data


class TimeSeries:
    """
    Records of one dataset ordered by period.

    Records are sorted ascending on construction. When two records share a
    period the one supplied last wins.
    """

    def __init__(
        self,
        records: Iterable[Record] = (),
        metric_names: Optional[Sequence[str]] = None,
    ):
        by_period: Dict[Period, Record] = {}
        count = 0
        for record in records:
            by_period[record.period] = record
            count += 1

        if count != len(by_period):
            logger.warning(
                f"Dropped {count - len(by_period)} duplicate period(s); last record wins"
            )

        self._records: Tuple[Record, ...] = tuple(
            sorted(by_period.values(), key=lambda r: r.period)
        )

        if metric_names is not None:
            self._metric_names = tuple(metric_names)
        elif self._records:
            self._metric_names = tuple(self._records[0].metrics)
        else:
            self._metric_names = ()

    @classmethod
    def from_values(
        cls,
        periods: Sequence[Period],
        values: Sequence[float],
        metric: str,
    ) -> "TimeSeries":
        """Build a single-metric series from parallel period/value sequences."""
        if len(periods) != len(values):
            raise ValueError(
                f"Length mismatch: periods ({len(periods)}) vs values ({len(values)})"
            )
        return cls(
            (Record(p, {metric: float(v)}) for p, v in zip(periods, values)),
            metric_names=[metric],
        )

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    @property
    def metric_names(self) -> Tuple[str, ...]:
        return self._metric_names

    @property
    def periods(self) -> List[Period]:
        return [r.period for r in self._records]

    @property
    def last(self) -> Record:
        """Most recent record; IndexError on an empty series."""
        if not self._records:
            raise IndexError("last record requested from an empty series")
        return self._records[-1]

    @property
    def kind(self) -> Optional[str]:
        """``"year"``, ``"date"`` or None for an empty series."""
        return period_kind(self._records[0].period) if self._records else None

    def is_empty(self) -> bool:
        return not self._records

    def values(self, metric: str) -> np.ndarray:
        """Return one metric as a float array in period order."""
        return np.array([r.value(metric) for r in self._records], dtype=float)

    def tail(self, n: int) -> "TimeSeries":
        """Return the last ``n`` records (all of them when fewer exist)."""
        if n <= 0:
            return TimeSeries((), metric_names=self._metric_names)
        return TimeSeries(self._records[-n:], metric_names=self._metric_names)

    def to_frame(self) -> pd.DataFrame:
        """Convert to a DataFrame indexed by period."""
        return pd.DataFrame(
            [dict(r.metrics) for r in self._records],
            index=pd.Index(self.periods, name="period"),
            columns=list(self._metric_names) or None,
        )

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return TimeSeries(self._records[index], metric_names=self._metric_names)
        return self._records[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TimeSeries):
            return NotImplemented
        return self._records == other._records

    def __repr__(self) -> str:
        span = f"{self._records[0].period}..{self._records[-1].period}" if self._records else "empty"
        return f"TimeSeries(len={len(self)}, span={span}, metrics={list(self._metric_names)})"


class CombinedSeries:
    """History followed by its forecast continuation, each point tagged."""

    def __init__(self, points: Iterable[ForecastPoint] = ()):
        self._points: Tuple[ForecastPoint, ...] = tuple(points)

    @property
    def points(self) -> Tuple[ForecastPoint, ...]:
        return self._points

    @property
    def periods(self) -> List[Period]:
        return [p.period for p in self._points]

    @property
    def labels(self) -> List[str]:
        """Period labels for a chart x-axis."""
        return [str(p.period) for p in self._points]

    def split(self) -> Tuple[List[ForecastPoint], List[ForecastPoint]]:
        """Return ``(historical, forecast)`` sub-lists."""
        historical = [p for p in self._points if not p.is_forecast]
        forecast = [p for p in self._points if p.is_forecast]
        return historical, forecast

    def values(self, metric: str) -> List[float]:
        return [p.value(metric) for p in self._points]

    def chart_lines(
        self,
        metric: str,
        bridge: bool = True,
    ) -> Tuple[List[Optional[float]], List[Optional[float]]]:
        """
        Build two aligned value lists for dual-line rendering.

        The historical line holds observed values and None at forecast
        positions; the forecast line holds None at historical positions.
        With ``bridge`` the forecast line also repeats the last observed
        value so the two lines join.

        Args:
            metric: Metric to plot
            bridge: Whether to connect the forecast line to the history

        Returns:
            Tuple of (historical_line, forecast_line), both len(self) long
        """
        historical_line: List[Optional[float]] = []
        forecast_line: List[Optional[float]] = []
        for point in self._points:
            value = point.value(metric)
            historical_line.append(None if point.is_forecast else value)
            forecast_line.append(value if point.is_forecast else None)

        if bridge:
            last_observed = max(
                (i for i, p in enumerate(self._points) if not p.is_forecast),
                default=None,
            )
            has_forecast = any(p.is_forecast for p in self._points)
            if last_observed is not None and has_forecast:
                forecast_line[last_observed] = historical_line[last_observed]

        return historical_line, forecast_line

    def to_frame(self) -> pd.DataFrame:
        """Convert to a DataFrame with an ``is_forecast`` column."""
        rows = [{**p.metrics, "is_forecast": p.is_forecast} for p in self._points]
        return pd.DataFrame(rows, index=pd.Index(self.periods, name="period"))

    def to_records(self, period_key: str = "period") -> List[Dict[str, Any]]:
        return [p.to_dict(period_key) for p in self._points]

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[ForecastPoint]:
        return iter(self._points)

    def __getitem__(self, index):
        return self._points[index]

    def __repr__(self) -> str:
        historical, forecast = self.split()
        return f"CombinedSeries(historical={len(historical)}, forecast={len(forecast)})"
