"""Dataset-specific rollups."""

from datetime import date
from typing import Callable, Iterable
import logging

from seriescast.data.structs import Period, Record, TimeSeries, period_to_date
from seriescast.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

# date.weekday(): Monday == 0 ... Sunday == 6
WEEKEND_DAYS = (5, 6)


class Aggregator:
    """Summary figures derived from a series."""

    def weekend_sum(
        self,
        series: TimeSeries,
        metric: str,
        date_of_period: Callable[[Period], date] = period_to_date,
    ) -> float:
        """
        Sum a metric over records falling on Saturday or Sunday.

        Missing days are simply absent; nothing is imputed.

        Args:
            series: Date-keyed series
            metric: Metric to sum
            date_of_period: Maps a period to its calendar date

        Returns:
            Weekend total

        Raises:
            TypeError: If a period cannot be mapped to a date (year-keyed series)
        """
        total = 0.0
        for record in series:
            if date_of_period(record.period).weekday() in WEEKEND_DAYS:
                total += record.value(metric)
        return total

    def compound_value(
        self,
        initial_value: float,
        forecast: Iterable[Record],
        metric: str,
        decimals: int = 2,
    ) -> float:
        """
        Grow a value by each forecast rate in turn.

        Each point's metric is a percentage; the value is multiplied by
        ``1 + rate / 100`` per point.

        Args:
            initial_value: Starting value (e.g. today's price)
            forecast: Forecast points carrying the rate
            metric: Metric holding the percentage rate
            decimals: Decimal places of the result

        Returns:
            Compounded value
        """
        value = float(initial_value)
        for point in forecast:
            value *= 1 + point.value(metric) / 100
        return round_half_up(value, decimals)
