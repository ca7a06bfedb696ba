"""Moving-average projection, with or without yearly decay."""

from typing import Any, Dict, List, Optional
import logging

import numpy as np

from seriescast.data.structs import ForecastPoint, TimeSeries
from seriescast.forecasting.base import ForecastStrategy, RandomSource
from seriescast.utils.error_handling import InvalidParameterError
from seriescast.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

# The undecayed projection extrapolates the change over the last two steps
STEP_SPAN = 2


class MovingAverageProjection(ForecastStrategy):
    """
    Project a series forward from the mean of its most recent values.

    With a ``decay_rate`` every step k emits ``mean * (1 - decay_rate * k)``
    (inflation). Without one, step k emits ``last + avg_step * k`` where
    ``avg_step`` is the average change over the last two steps (birth rate).
    """

    def __init__(
        self,
        metric: str,
        window_size: int = 3,
        decay_rate: Optional[float] = None,
        decimals: Optional[int] = None,
    ):
        super().__init__(metric, window_size)
        if decay_rate is not None and decay_rate < 0:
            raise InvalidParameterError(f"Decay rate must be >= 0, got {decay_rate}")
        self.decay_rate = decay_rate
        self.decimals = decimals

    @property
    def strategy_type(self) -> str:
        return "moving_average"

    @property
    def min_history(self) -> int:
        if self.decay_rate is None:
            return max(self.window_size, STEP_SPAN + 1)
        return self.window_size

    def _generate(
        self,
        history: TimeSeries,
        horizon: int,
        random_source: RandomSource,
    ) -> List[ForecastPoint]:
        values = history.values(self.metric)

        if self.decay_rate is not None:
            mean = float(np.mean(values[-self.window_size:]))
            projected = [mean * (1 - self.decay_rate * k) for k in range(1, horizon + 1)]
        else:
            last = float(values[-1])
            avg_step = float(values[-1] - values[-1 - STEP_SPAN]) / STEP_SPAN
            projected = [last + avg_step * k for k in range(1, horizon + 1)]

        if self.decimals is not None:
            projected = [round_half_up(v, self.decimals) for v in projected]

        return [
            self._emit(history, k, {self.metric: value})
            for k, value in enumerate(projected, start=1)
        ]

    def get_params(self) -> Dict[str, Any]:
        params = super().get_params()
        params.update(decay_rate=self.decay_rate, decimals=self.decimals)
        return params
