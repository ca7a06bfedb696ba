"""Change statistics, series combination and aggregation."""

from seriescast.analysis.changes import ChangeAnalyzer
from seriescast.analysis.combiner import SeriesCombiner
from seriescast.analysis.aggregation import Aggregator

__all__ = [
    "ChangeAnalyzer",
    "SeriesCombiner",
    "Aggregator",
]
