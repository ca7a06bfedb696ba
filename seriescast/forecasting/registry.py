"""Build strategies from configuration blocks."""

from typing import Any, Dict, Mapping, Type
import logging

from seriescast.forecasting.base import ForecastStrategy
from seriescast.forecasting.moving_average import MovingAverageProjection
from seriescast.forecasting.random_walk import BoundedRandomWalk
from seriescast.forecasting.rolling import RollingMovingAverage
from seriescast.forecasting.trend import SaturatingTrend

logger = logging.getLogger(__name__)

STRATEGIES: Dict[str, Type[ForecastStrategy]] = {
    "moving_average": MovingAverageProjection,
    "rolling_average": RollingMovingAverage,
    "saturating_trend": SaturatingTrend,
    "bounded_random_walk": BoundedRandomWalk,
}


def create_strategy(spec: Mapping[str, Any]) -> ForecastStrategy:
    """
    Instantiate a strategy from ``{"type": name, **params}``.

    Args:
        spec: Strategy block, e.g. ``{"type": "moving_average", "metric":
            "inflationRate", "decay_rate": 0.05}``

    Returns:
        Configured strategy

    Raises:
        ValueError: If the type is missing or unknown
    """
    params = dict(spec)
    name = params.pop("type", None)
    if name is None:
        raise ValueError("Strategy configuration requires a 'type'")
    if name not in STRATEGIES:
        raise ValueError(
            f"Unknown strategy type: {name}. Supported types are: {sorted(STRATEGIES)}"
        )

    strategy = STRATEGIES[name](**params)
    logger.debug(f"Created {strategy!r}")
    return strategy
