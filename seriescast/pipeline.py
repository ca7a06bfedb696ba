"""Per-dataset control flow: forecast, combine, then derive statistics.

Every call recomputes from scratch; nothing is cached between runs, so a
caller re-runs the pipeline whenever the horizon or window size changes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging

from seriescast.analysis.aggregation import Aggregator
from seriescast.analysis.changes import ChangeAnalyzer
from seriescast.analysis.combiner import SeriesCombiner
from seriescast.data.loaders import SeriesLoader
from seriescast.data.structs import CombinedSeries, TimeSeries
from seriescast.forecasting.base import ForecastStrategy, RandomSource, forecast_or_raise
from seriescast.forecasting.registry import STRATEGIES, create_strategy
from seriescast.utils.config_manager import ConfigManager
from seriescast.utils.error_handling import InvalidParameterError, validate_horizon

logger = logging.getLogger(__name__)


@dataclass
class DatasetConfig:
    """Static description of one dataset and how it is forecast."""
    name: str
    period_key: str
    metrics: List[str]
    change_metric: str
    strategy: Dict[str, Any]
    horizon_options: List[int] = field(default_factory=lambda: [1, 2, 3, 5])
    default_horizon: int = 3
    percent_change_metrics: List[str] = field(default_factory=list)
    weekend_metric: Optional[str] = None
    compound_metric: Optional[str] = None
    initial_value: float = 1000.0

    def __post_init__(self):
        """Validate consistency after initialization."""
        if not self.metrics:
            raise ValueError(f"Dataset '{self.name}' declares no metrics")
        if self.change_metric not in self.metrics:
            raise ValueError(
                f"Dataset '{self.name}': change metric '{self.change_metric}' "
                f"is not one of {self.metrics}"
            )
        validate_horizon(self.default_horizon)

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> "DatasetConfig":
        """Create from a configuration block."""
        return cls(
            name=name,
            period_key=data["period_key"],
            metrics=list(data["metrics"]),
            change_metric=data["change_metric"],
            strategy=dict(data["strategy"]),
            horizon_options=list(data.get("horizon_options", [1, 2, 3, 5])),
            default_horizon=data.get("default_horizon", 3),
            percent_change_metrics=list(data.get("percent_change_metrics", [])),
            weekend_metric=data.get("weekend_metric"),
            compound_metric=data.get("compound_metric"),
            initial_value=data.get("initial_value", 1000.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "period_key": self.period_key,
            "metrics": self.metrics,
            "change_metric": self.change_metric,
            "strategy": self.strategy,
            "horizon_options": self.horizon_options,
            "default_horizon": self.default_horizon,
            "percent_change_metrics": self.percent_change_metrics,
            "weekend_metric": self.weekend_metric,
            "compound_metric": self.compound_metric,
            "initial_value": self.initial_value,
        }


@dataclass
class DatasetView:
    """Everything a presentation layer needs for one dataset."""
    name: str
    period_key: str
    horizon: int
    combined: CombinedSeries
    changes: List[float]
    extrema: Optional[Tuple[float, float]]
    summary: Dict[str, float] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def table_rows(self) -> List[Dict[str, Any]]:
        """
        One row per combined point, with the change column for observed rows.

        Forecast rows carry ``change=None``.
        """
        rows = []
        for i, point in enumerate(self.combined):
            row = point.to_dict(self.period_key)
            row["change"] = None if point.is_forecast else self.changes[i]
            rows.append(row)
        return rows

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "horizon": self.horizon,
            "rows": self.table_rows(),
            "extrema": list(self.extrema) if self.extrema is not None else None,
            "summary": self.summary,
            "metadata": self.metadata,
        }


class DashboardPipeline:
    """
    Runs one dataset through forecast, combination and statistics.

    With ``strict=True`` an empty or too-short history raises instead of
    producing an empty forecast.
    """

    def __init__(self, config: DatasetConfig, strict: bool = False):
        self.config = config
        self.strict = strict
        self.analyzer = ChangeAnalyzer()
        self.combiner = SeriesCombiner()
        self.aggregator = Aggregator()

    @classmethod
    def from_config(
        cls,
        manager: ConfigManager,
        name: str,
        strict: bool = False,
    ) -> "DashboardPipeline":
        """
        Build the pipeline for dataset ``name`` from ``datasets.yaml``.

        Raises:
            KeyError: If the dataset is not configured
        """
        return cls(DatasetConfig.from_dict(name, manager.dataset_block(name)), strict=strict)

    def loader(self) -> SeriesLoader:
        """Loader matching this dataset's period key and metrics."""
        return SeriesLoader(period_key=self.config.period_key, metrics=self.config.metrics)

    def build_strategy(self, window_size: Optional[int] = None) -> ForecastStrategy:
        """
        Instantiate the configured strategy, optionally overriding its window.

        The override goes to the strategy's window argument: ``window_size``
        for the moving averages, ``lookback`` for the bounded random walk.

        Raises:
            InvalidParameterError: If a window is given for a strategy without
                one (the saturating trend fits the whole history)
        """
        spec = dict(self.config.strategy)
        if window_size is not None:
            strategy_cls = STRATEGIES.get(spec.get("type"))
            param = getattr(strategy_cls, "window_param", None)
            if param is None:
                raise InvalidParameterError(
                    f"Strategy '{spec.get('type')}' does not take a window size"
                )
            spec[param] = window_size
        return create_strategy(spec)

    def run(
        self,
        history: TimeSeries,
        horizon: Optional[int] = None,
        window_size: Optional[int] = None,
        random_source: Optional[RandomSource] = None,
    ) -> DatasetView:
        """
        Compute the full view of a dataset.

        Args:
            history: Observed records
            horizon: Periods to forecast (defaults to the configured horizon)
            window_size: Window override for moving-average strategies
            random_source: Uniform draw source for randomized strategies

        Returns:
            DatasetView with combined series, change column and summary figures
        """
        horizon = validate_horizon(self.config.default_horizon if horizon is None else horizon)
        if horizon not in self.config.horizon_options:
            logger.warning(
                f"{self.config.name}: horizon {horizon} is not among the offered "
                f"choices {self.config.horizon_options}"
            )

        strategy = self.build_strategy(window_size)
        if self.strict:
            forecast = forecast_or_raise(strategy, history, horizon, random_source)
        else:
            forecast = strategy.forecast(history, horizon, random_source)

        combined = self.combiner.combine(history, forecast)
        changes = self.analyzer.changes(history, self.config.change_metric)
        extrema = self.analyzer.extrema(changes) if len(history) >= 2 else None

        view = DatasetView(
            name=self.config.name,
            period_key=self.config.period_key,
            horizon=horizon,
            combined=combined,
            changes=changes,
            extrema=extrema,
            summary=self._summarize(history, forecast),
            metadata={"strategy": strategy.strategy_type, "params": strategy.get_params()},
        )
        logger.info(
            f"{self.config.name}: {len(history)} observed, {len(forecast)} forecast points"
        )
        return view

    def _summarize(self, history: TimeSeries, forecast) -> Dict[str, float]:
        summary: Dict[str, float] = {}
        if self.config.percent_change_metrics and len(history) >= 2:
            summary["max_abs_percent_change"] = self.analyzer.max_abs_percent_change(
                history, self.config.percent_change_metrics
            )
        if self.config.weekend_metric:
            summary["weekend_sum"] = self.aggregator.weekend_sum(
                history, self.config.weekend_metric
            )
        if self.config.compound_metric:
            summary["compound_value"] = self.aggregator.compound_value(
                self.config.initial_value, forecast, self.config.compound_metric
            )
        return summary
