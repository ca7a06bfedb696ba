"""Pytest configuration and shared fixtures."""

from datetime import date, timedelta
from pathlib import Path

import numpy as np
import pytest

from seriescast.data.loaders import SeriesLoader
from seriescast.utils.config_manager import ConfigManager

CONFIG_DIR = Path(__file__).resolve().parents[1] / "seriescast" / "config"


class FixedSource:
    """Random source stub that always draws the same value."""

    def __init__(self, value: float = 0.0):
        self.value = value
        self.calls = []

    def uniform(self, low, high):
        self.calls.append((low, high))
        return self.value


@pytest.fixture
def zero_noise():
    """Random source whose draws are always 0."""
    return FixedSource(0.0)


@pytest.fixture
def fixed_source():
    """Factory for constant random sources."""
    return FixedSource


@pytest.fixture
def seeded_rng():
    """Reproducible numpy Generator."""
    return np.random.default_rng(42)


@pytest.fixture
def config_manager():
    """ConfigManager over the repository's config directory."""
    return ConfigManager(config_dir=str(CONFIG_DIR))


@pytest.fixture
def inflation_rows():
    """Yearly inflation rows, deliberately out of order, with a comment field."""
    return [
        {"year": 2019, "inflationRate": 3.0, "comment": "Low"},
        {"year": 2017, "inflationRate": 2.5, "comment": "Record low"},
        {"year": 2018, "inflationRate": 4.3, "comment": ""},
        {"year": 2020, "inflationRate": 4.9, "comment": "Pandemic"},
        {"year": 2021, "inflationRate": 8.4, "comment": ""},
        {"year": 2022, "inflationRate": 11.9, "comment": "Peak"},
        {"year": 2023, "inflationRate": 7.4, "comment": ""},
    ]


@pytest.fixture
def inflation_series(inflation_rows):
    return SeriesLoader(period_key="year", metrics=["inflationRate"]).from_rows(inflation_rows)


@pytest.fixture
def birth_rows():
    """Share of births outside marriage, percent."""
    return [
        {"year": 2010, "percentage": 24.5},
        {"year": 2011, "percentage": 26.5},
        {"year": 2012, "percentage": 29.5},
        {"year": 2013, "percentage": 32.0},
        {"year": 2014, "percentage": 36.0},
        {"year": 2015, "percentage": 33.0},
        {"year": 2016, "percentage": 24.0},
    ]


@pytest.fixture
def birth_series(birth_rows):
    return SeriesLoader(period_key="year", metrics=["percentage"]).from_rows(birth_rows)


@pytest.fixture
def migration_rows():
    return [
        {"year": 2016, "immigrants": 575158, "emigrants": 313210, "netMigration": 261948},
        {"year": 2017, "immigrants": 589033, "emigrants": 377155, "netMigration": 211878},
        {"year": 2018, "immigrants": 564789, "emigrants": 440831, "netMigration": 123958},
        {"year": 2019, "immigrants": 680011, "emigrants": 394504, "netMigration": 285507},
        {"year": 2020, "immigrants": 584696, "emigrants": 478741, "netMigration": 105955},
    ]


@pytest.fixture
def migration_series(migration_rows):
    return SeriesLoader(
        period_key="year", metrics=["immigrants", "emigrants", "netMigration"]
    ).from_rows(migration_rows)


@pytest.fixture
def jogging_rows():
    """Two weeks of runs starting Monday 2024-03-04, skipping Wednesdays."""
    start = date(2024, 3, 4)
    rows = []
    for offset in range(14):
        day = start + timedelta(days=offset)
        if day.weekday() == 2:
            continue
        distance = 5.0 + offset % 4
        rows.append({
            "date": day.isoformat(),
            "startTime": "07:30",
            "duration": distance * 6,
            "distance": distance,
            "maxSpeed": 12.5,
            "minSpeed": 8.0,
            "avgSpeed": 10.0,
            "avgPulse": 145,
        })
    return rows


@pytest.fixture
def jogging_series(jogging_rows):
    return SeriesLoader(
        period_key="date",
        metrics=["distance", "avgSpeed", "duration", "maxSpeed", "minSpeed", "avgPulse"],
    ).from_rows(jogging_rows)
