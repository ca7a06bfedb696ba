"""Period-over-period change statistics."""

from typing import List, Sequence, Tuple
import logging
import math

import numpy as np

from seriescast.data.structs import TimeSeries
from seriescast.utils.error_handling import EmptyInputError, validate_window
from seriescast.utils.rounding import round_half_up

logger = logging.getLogger(__name__)


class ChangeAnalyzer:
    """Computes deltas, percentage changes and extrema over a TimeSeries."""

    def __init__(self, decimals: int = 1):
        """
        Args:
            decimals: Decimal places kept for absolute deltas
        """
        self.decimals = decimals

    def changes(self, series: TimeSeries, metric: str) -> List[float]:
        """
        Absolute change against the previous record.

        Element 0 is the sentinel 0.0, so the result is as long as the series.

        Args:
            series: Historical series
            metric: Metric to difference

        Returns:
            List of deltas rounded to ``decimals`` places
        """
        values = series.values(metric)
        if len(values) == 0:
            return []

        deltas = [0.0]
        for previous, current in zip(values[:-1], values[1:]):
            deltas.append(round_half_up(float(current - previous), self.decimals))
        return deltas

    def percent_changes(self, series: TimeSeries, metric: str) -> List[float]:
        """
        Relative change against the previous record, in percent.

        Element 0 is the sentinel 0.0. A zero previous value yields
        ``inf``/``-inf`` (or ``nan`` for a zero delta); callers must guard.

        Args:
            series: Historical series
            metric: Metric to compare

        Returns:
            List of unrounded percentage changes
        """
        values = series.values(metric)
        if len(values) == 0:
            return []

        result = [0.0]
        for previous, current in zip(values[:-1], values[1:]):
            delta = float(current - previous)
            if previous == 0:
                result.append(math.copysign(math.inf, delta) if delta else math.nan)
            else:
                result.append(delta / float(previous) * 100)
        return result

    def extrema(self, deltas: Sequence[float]) -> Tuple[float, float]:
        """
        Largest and smallest change, skipping the index-0 sentinel.

        Args:
            deltas: Output of ``changes`` or ``percent_changes``

        Returns:
            Tuple of (max, min)

        Raises:
            EmptyInputError: If fewer than 2 entries are given
        """
        if len(deltas) < 2:
            raise EmptyInputError(
                f"Extrema need at least 2 records, got {len(deltas)}"
            )
        body = np.asarray(deltas[1:], dtype=float)
        return float(np.max(body)), float(np.min(body))

    def max_abs_percent_change(self, series: TimeSeries, metrics: Sequence[str]) -> float:
        """
        Largest absolute percentage change across several metrics.

        Args:
            series: Historical series
            metrics: Metric names to scan

        Returns:
            Maximum of ``|percent change|`` over indices >= 1 of every metric

        Raises:
            EmptyInputError: If the series has fewer than 2 records
        """
        if len(series) < 2:
            raise EmptyInputError(
                f"Percentage change needs at least 2 records, got {len(series)}"
            )
        if not metrics:
            raise ValueError("At least one metric is required")

        peaks = []
        for metric in metrics:
            body = np.abs(np.asarray(self.percent_changes(series, metric)[1:], dtype=float))
            peaks.append(float(np.max(body)))
        return max(peaks)

    def moving_average(
        self,
        series: TimeSeries,
        metric: str,
        window_size: int = 3,
    ) -> List[float]:
        """
        Trailing means over every full window.

        Args:
            series: Historical series
            metric: Metric to average
            window_size: Records per window

        Returns:
            ``len(series) - window_size + 1`` means, empty if the window
            is longer than the series
        """
        validate_window(window_size)
        values = series.values(metric)
        if len(values) < window_size:
            return []

        kernel = np.ones(window_size) / window_size
        return np.convolve(values, kernel, mode="valid").tolist()
