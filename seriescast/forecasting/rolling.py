"""Rolling moving average that feeds its own forecasts back into the window."""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import logging

import numpy as np

from seriescast.data.structs import ForecastPoint, TimeSeries
from seriescast.forecasting.base import ForecastStrategy, RandomSource
from seriescast.utils.error_handling import InvalidParameterError
from seriescast.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

Window = Tuple[Tuple[float, ...], ...]


def slide(window: Window, entry: Tuple[float, ...]) -> Window:
    """Drop the oldest row of a fixed-size window and append ``entry``."""
    return window[1:] + (entry,)


class RollingMovingAverage(ForecastStrategy):
    """
    Multi-metric moving average with feedback (migration).

    Each step averages every metric over the current window, rounds the
    means, emits them, then slides the window so the emitted point replaces
    the oldest row. Later steps therefore depend on earlier forecasts.

    Derived metrics are recomputed from the rounded values as
    ``minuend - subtrahend`` rather than averaged on their own.
    """

    def __init__(
        self,
        metrics: Sequence[str],
        window_size: int = 3,
        derived: Optional[Mapping[str, Sequence[str]]] = None,
        decimals: int = 0,
    ):
        """
        Args:
            metrics: Metrics to average
            window_size: Rows kept in the sliding window
            derived: ``{name: (minuend, subtrahend)}`` recomputed per point
            decimals: Rounding of each mean (0 gives integers)
        """
        if not metrics:
            raise InvalidParameterError("At least one metric is required")
        super().__init__(metrics[0], window_size)
        self.metrics = list(metrics)
        self.derived = {name: tuple(parts) for name, parts in (derived or {}).items()}
        for name, parts in self.derived.items():
            if len(parts) != 2 or not set(parts) <= set(self.metrics):
                raise InvalidParameterError(
                    f"Derived metric '{name}' must name two forecast metrics, got {list(parts)}"
                )
        self.decimals = decimals

    @property
    def strategy_type(self) -> str:
        return "rolling_average"

    def _round(self, value: float) -> float:
        rounded = round_half_up(value, self.decimals)
        return int(rounded) if self.decimals == 0 else rounded

    def _generate(
        self,
        history: TimeSeries,
        horizon: int,
        random_source: RandomSource,
    ) -> List[ForecastPoint]:
        window: Window = tuple(
            tuple(float(r.value(m)) for m in self.metrics)
            for r in history.tail(self.window_size)
        )

        points = []
        for step in range(1, horizon + 1):
            means = np.mean(np.array(window), axis=0)
            values = {m: self._round(float(v)) for m, v in zip(self.metrics, means)}
            for name, (minuend, subtrahend) in self.derived.items():
                values[name] = values[minuend] - values[subtrahend]

            points.append(self._emit(history, step, values))
            window = slide(window, tuple(float(values[m]) for m in self.metrics))

        return points

    def get_params(self) -> Dict[str, Any]:
        return {
            "metrics": self.metrics,
            "window_size": self.window_size,
            "derived": {k: list(v) for k, v in self.derived.items()},
            "decimals": self.decimals,
        }
