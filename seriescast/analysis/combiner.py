"""Join history and forecast into one tagged sequence."""

from typing import Sequence
import logging

from seriescast.data.structs import CombinedSeries, ForecastPoint, TimeSeries
from seriescast.utils.error_handling import SeriesOrderError

logger = logging.getLogger(__name__)


class SeriesCombiner:
    """Concatenates a history with its forecast continuation."""

    def combine(
        self,
        history: TimeSeries,
        forecast: Sequence[ForecastPoint],
    ) -> CombinedSeries:
        """
        Build a CombinedSeries of observed points followed by forecast points.

        Args:
            history: Observed records
            forecast: Generated points, already tagged ``is_forecast=True``

        Returns:
            CombinedSeries with strictly increasing periods

        Raises:
            SeriesOrderError: If a forecast point is untagged or periods
                overlap or go backwards
        """
        points = [ForecastPoint.from_record(r, is_forecast=False) for r in history]

        for point in forecast:
            if not point.is_forecast:
                raise SeriesOrderError(
                    f"Forecast point for {point.period!r} is not tagged as forecast"
                )
            points.append(point)

        for previous, current in zip(points[:-1], points[1:]):
            if not previous.period < current.period:
                raise SeriesOrderError(
                    f"Periods must strictly increase: {previous.period!r} "
                    f"followed by {current.period!r}"
                )

        logger.debug(
            f"Combined {len(history)} historical and {len(forecast)} forecast points"
        )
        return CombinedSeries(points)
