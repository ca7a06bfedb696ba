"""Base interface shared by all forecasting strategies."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Protocol
import logging

import numpy as np

from seriescast.data.structs import ForecastPoint, TimeSeries, shift_period
from seriescast.utils.error_handling import (
    EmptyInputError,
    InsufficientHistoryError,
    validate_horizon,
    validate_window,
)

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything that draws uniform floats; ``numpy.random.Generator`` qualifies."""

    def uniform(self, low: float, high: float) -> float:
        ...


def default_random_source(seed: Optional[int] = None) -> np.random.Generator:
    """Return a numpy Generator, reproducible when a seed is given."""
    return np.random.default_rng(seed)


class ForecastStrategy(ABC):
    """
    Abstract base class for forecasting strategies.

    A strategy is configured once per dataset and then produces a forecast
    continuation for any history it is given. Implementations return an
    empty list when the history is too short rather than raising.
    """

    # Whether a history shorter than window_size is a parameter error at
    # strict call sites
    window_is_strict = True

    # Constructor argument that sets window_size; None when it cannot be overridden
    window_param: Optional[str] = "window_size"

    def __init__(self, metric: str, window_size: int = 3):
        """
        Args:
            metric: Metric being forecast
            window_size: Number of most recent records the strategy looks at
        """
        self.metric = metric
        self.window_size = validate_window(window_size)

    @property
    @abstractmethod
    def strategy_type(self) -> str:
        """Return the strategy type identifier."""
        pass

    @property
    def min_history(self) -> int:
        """Shortest history that yields a non-empty forecast."""
        return self.window_size

    @abstractmethod
    def _generate(
        self,
        history: TimeSeries,
        horizon: int,
        random_source: RandomSource,
    ) -> List[ForecastPoint]:
        """Produce ``horizon`` points for a history of at least ``min_history`` records."""
        pass

    def forecast(
        self,
        history: TimeSeries,
        horizon: int,
        random_source: Optional[RandomSource] = None,
    ) -> List[ForecastPoint]:
        """
        Generate the forecast continuation of a history.

        Args:
            history: Observed records, ascending by period
            horizon: Number of future periods (>= 1)
            random_source: Source of uniform draws for randomized strategies;
                an unseeded numpy Generator is used when omitted

        Returns:
            ``horizon`` ForecastPoints for periods last+1..last+horizon, or an
            empty list when the history is shorter than ``min_history``

        Raises:
            InvalidParameterError: If horizon is not a positive integer
        """
        validate_horizon(horizon)

        if len(history) < self.min_history:
            logger.warning(
                f"{self.strategy_type}: history of {len(history)} record(s) is shorter "
                f"than the required {self.min_history}; returning empty forecast"
            )
            return []

        if random_source is None:
            random_source = default_random_source()

        points = self._generate(history, horizon, random_source)
        logger.debug(
            f"{self.strategy_type} forecast {horizon} period(s) of '{self.metric}' "
            f"from {len(history)} records",
            extra={"props": {"strategy": self.strategy_type, "horizon": horizon}},
        )
        return points

    def get_params(self) -> Dict[str, Any]:
        """Return the strategy configuration."""
        return {"metric": self.metric, "window_size": self.window_size}

    def _emit(
        self,
        history: TimeSeries,
        step: int,
        values: Mapping[str, float],
    ) -> ForecastPoint:
        """
        Build the forecast point ``step`` periods after the last record.

        Metrics of the history schema that the strategy does not forecast
        are filled with 0.0 so every point keeps the historical shape.
        """
        metrics = {name: 0.0 for name in history.metric_names}
        metrics.update(values)
        return ForecastPoint(
            period=shift_period(history.last.period, step),
            metrics=metrics,
            is_forecast=True,
        )

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.get_params().items())
        return f"{self.__class__.__name__}({params})"


def forecast_or_raise(
    strategy: ForecastStrategy,
    history: TimeSeries,
    horizon: int,
    random_source: Optional[RandomSource] = None,
) -> List[ForecastPoint]:
    """
    Forecast for call sites that cannot show an empty result.

    Raises:
        EmptyInputError: If the history has no records
        InvalidParameterError: If the horizon or window is invalid for this history
        InsufficientHistoryError: If the strategy degrades to an empty forecast
    """
    if history.is_empty():
        raise EmptyInputError(f"{strategy.strategy_type}: cannot forecast an empty series")
    validate_horizon(horizon)
    if strategy.window_is_strict:
        validate_window(strategy.window_size, len(history))

    points = strategy.forecast(history, horizon, random_source)
    if not points:
        raise InsufficientHistoryError(
            required=strategy.min_history,
            available=len(history),
            strategy=strategy.strategy_type,
        )
    return points
