"""Forecasting strategies.

Four interchangeable policies share the ``ForecastStrategy`` interface:
- Moving-average projection, optionally decayed per step
- Rolling moving average that feeds forecasts back into its window
- Least-squares trend saturating towards a ceiling, with uniform noise
- Bounded random walk around the recent mean
"""

from seriescast.forecasting.base import (
    ForecastStrategy,
    RandomSource,
    default_random_source,
    forecast_or_raise,
)
from seriescast.forecasting.moving_average import MovingAverageProjection
from seriescast.forecasting.rolling import RollingMovingAverage
from seriescast.forecasting.trend import SaturatingTrend
from seriescast.forecasting.random_walk import BoundedRandomWalk
from seriescast.forecasting.registry import STRATEGIES, create_strategy

__all__ = [
    "ForecastStrategy",
    "RandomSource",
    "default_random_source",
    "forecast_or_raise",
    "MovingAverageProjection",
    "RollingMovingAverage",
    "SaturatingTrend",
    "BoundedRandomWalk",
    "STRATEGIES",
    "create_strategy",
]
