"""Least-squares trend with saturation towards a ceiling and uniform noise."""

from typing import Any, Dict, List, Tuple
import logging
import math

import numpy as np

from seriescast.data.structs import ForecastPoint, TimeSeries
from seriescast.forecasting.base import ForecastStrategy, RandomSource
from seriescast.utils.error_handling import InvalidParameterError
from seriescast.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

MAX_REASONABLE = 45.0
SATURATION_RATE = 0.3
MIN_POINTS = 3


def linear_fit(values: np.ndarray) -> Tuple[float, float]:
    """Ordinary least squares of ``values`` against 0..n-1; returns (slope, intercept)."""
    index = np.arange(len(values), dtype=float)
    slope, intercept = np.polyfit(index, values, 1)
    return float(slope), float(intercept)


def residual_std(values: np.ndarray, slope: float, intercept: float) -> float:
    """Root mean square of the fit residuals."""
    index = np.arange(len(values), dtype=float)
    residuals = values - (intercept + slope * index)
    return float(np.sqrt(np.mean(residuals ** 2)))


class SaturatingTrend(ForecastStrategy):
    """
    Linear trend over the whole history, bent towards a ceiling.

    For step i (0-indexed) the raw trend value is
    ``intercept + slope * (n + i)``. Above the ceiling it is replaced by
    ``last + (ceiling - last) * (1 - exp(-rate * (i + 1)))``. Uniform noise
    in ``[-std_error, std_error]`` is then added, the result capped at the
    ceiling and rounded.
    """

    window_is_strict = False
    window_param = None

    def __init__(
        self,
        metric: str,
        ceiling: float = MAX_REASONABLE,
        saturation_rate: float = SATURATION_RATE,
        min_points: int = MIN_POINTS,
        decimals: int = 1,
    ):
        if min_points < 2:
            raise InvalidParameterError(f"A linear fit needs min_points >= 2, got {min_points}")
        super().__init__(metric, window_size=min_points)
        self.ceiling = ceiling
        self.saturation_rate = saturation_rate
        self.decimals = decimals

    @property
    def strategy_type(self) -> str:
        return "saturating_trend"

    def _generate(
        self,
        history: TimeSeries,
        horizon: int,
        random_source: RandomSource,
    ) -> List[ForecastPoint]:
        values = history.values(self.metric)
        n = len(values)
        slope, intercept = linear_fit(values)
        std_error = residual_std(values, slope, intercept)
        last = float(values[-1])

        points = []
        for i in range(horizon):
            raw = intercept + slope * (n + i)
            if raw > self.ceiling:
                raw = last + (self.ceiling - last) * (
                    1 - math.exp(-self.saturation_rate * (i + 1))
                )
            value = raw + float(random_source.uniform(-std_error, std_error))
            value = min(value, self.ceiling)
            points.append(
                self._emit(history, i + 1, {self.metric: round_half_up(value, self.decimals)})
            )

        return points

    def get_params(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "ceiling": self.ceiling,
            "saturation_rate": self.saturation_rate,
            "min_points": self.window_size,
            "decimals": self.decimals,
        }
