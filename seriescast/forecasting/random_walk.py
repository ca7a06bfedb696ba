"""Random draws around the recent mean, clamped to the recent range."""

from typing import Any, Dict, List
import logging

import numpy as np

from seriescast.data.structs import ForecastPoint, TimeSeries
from seriescast.forecasting.base import ForecastStrategy, RandomSource
from seriescast.utils.error_handling import InvalidParameterError
from seriescast.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

LOOKBACK = 30
LOW_FACTOR = -0.3
HIGH_FACTOR = 0.7


class BoundedRandomWalk(ForecastStrategy):
    """
    Forecast noisy values inside the range of the last ``lookback`` records.

    Each step draws ``factor ~ U(low_factor, high_factor)`` and emits
    ``clamp(mean + factor * mean, min, max)``. Metrics other than the
    forecast one are emitted as 0.0 placeholders.
    """

    window_is_strict = False
    window_param = "lookback"

    def __init__(
        self,
        metric: str,
        lookback: int = LOOKBACK,
        low_factor: float = LOW_FACTOR,
        high_factor: float = HIGH_FACTOR,
        decimals: int = 1,
    ):
        super().__init__(metric, window_size=lookback)
        if low_factor > high_factor:
            raise InvalidParameterError(
                f"low_factor ({low_factor}) must not exceed high_factor ({high_factor})"
            )
        self.low_factor = low_factor
        self.high_factor = high_factor
        self.decimals = decimals

    @property
    def strategy_type(self) -> str:
        return "bounded_random_walk"

    @property
    def min_history(self) -> int:
        # Uses fewer than lookback records when that is all there is
        return 1

    def _generate(
        self,
        history: TimeSeries,
        horizon: int,
        random_source: RandomSource,
    ) -> List[ForecastPoint]:
        recent = history.tail(self.window_size).values(self.metric)
        low, high, mean = float(np.min(recent)), float(np.max(recent)), float(np.mean(recent))

        points = []
        for step in range(1, horizon + 1):
            random_factor = float(random_source.uniform(self.low_factor, self.high_factor)) * mean
            value = min(max(mean + random_factor, low), high)
            points.append(
                self._emit(history, step, {self.metric: round_half_up(value, self.decimals)})
            )

        return points

    def get_params(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "lookback": self.window_size,
            "low_factor": self.low_factor,
            "high_factor": self.high_factor,
            "decimals": self.decimals,
        }
