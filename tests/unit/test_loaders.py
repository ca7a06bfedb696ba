"""Unit tests for SeriesLoader."""

import json

import pandas as pd
import pytest

from seriescast.data.loaders import SeriesLoader
from seriescast.forecasting import BoundedRandomWalk


class TestSeriesLoader:
    """Tests for building TimeSeries from raw rows."""

    def test_rows_are_sorted_and_non_metrics_dropped(self, inflation_rows):
        loader = SeriesLoader(period_key="year", metrics=["inflationRate"])
        series = loader.from_rows(inflation_rows)
        assert series.periods == list(range(2017, 2024))
        assert series.metric_names == ("inflationRate",)
        assert "comment" not in series[0].metrics

    def test_validation_warns_about_ignored_fields(self, inflation_rows):
        loader = SeriesLoader(period_key="year", metrics=["inflationRate"])
        result = loader.validate_rows(inflation_rows)
        assert result.is_valid
        assert any("comment" in w for w in result.warnings)

    def test_numeric_fields_inferred_without_metric_list(self, jogging_rows):
        series = SeriesLoader(period_key="date").from_rows(jogging_rows)
        assert "distance" in series.metric_names
        assert "startTime" not in series.metric_names
        assert series.kind == "date"

    def test_missing_period_fails_validation(self):
        loader = SeriesLoader(period_key="year", metrics=["v"])
        result = loader.validate_rows([{"v": 1.0}])
        assert not result.is_valid
        assert result.schema_violations["year"] == "missing"
        with pytest.raises(ValueError, match="Schema validation failed"):
            loader.from_rows([{"v": 1.0}])

    def test_non_numeric_metric_fails_validation(self):
        loader = SeriesLoader(period_key="year", metrics=["v"])
        result = loader.validate_rows([{"year": 2020, "v": "high"}])
        assert not result.is_valid
        assert result.schema_violations["v"] == "type_mismatch"

    def test_boolean_is_not_a_number(self):
        loader = SeriesLoader(period_key="year", metrics=["v"])
        assert not loader.validate_rows([{"year": 2020, "v": True}]).is_valid

    def test_mixed_period_kinds_fail_validation(self):
        loader = SeriesLoader(period_key="p", metrics=["v"])
        result = loader.validate_rows([{"p": 2020, "v": 1}, {"p": "2020-01-01", "v": 2}])
        assert not result.is_valid
        assert result.schema_violations["p"] == "mixed_kinds"

    @pytest.mark.parametrize("period", ["2024/03/04", "04.03.2024", "20240304", "2024-02-30", "march"])
    def test_malformed_date_period_fails_validation(self, period):
        loader = SeriesLoader(period_key="date", metrics=["distance"])
        rows = [{"date": "2024-03-03", "distance": 5.0}, {"date": period, "distance": 6.0}]
        result = loader.validate_rows(rows)
        assert not result.is_valid
        assert result.schema_violations["date"] == "type_mismatch"
        with pytest.raises(ValueError, match="unsupported period"):
            loader.from_rows(rows)

    def test_iso_date_periods_load_and_forecast(self, fixed_source):
        loader = SeriesLoader(period_key="date", metrics=["distance"])
        series = loader.from_rows([
            {"date": "2024-03-04", "distance": 5.0},
            {"date": "2024-03-05", "distance": 6.0},
        ])
        points = BoundedRandomWalk("distance").forecast(series, 1, fixed_source(0.0))
        assert points[0].period == "2024-03-06"

    def test_validation_can_be_skipped(self):
        loader = SeriesLoader(period_key="year", metrics=["v"])
        series = loader.from_rows([{"year": 2020, "v": 1.0, "note": "x"}], validate=False)
        assert len(series) == 1

    def test_load_json(self, tmp_path, migration_rows):
        path = tmp_path / "migration.json"
        path.write_text(json.dumps(migration_rows), encoding="utf-8")
        loader = SeriesLoader(period_key="year", metrics=["immigrants", "emigrants", "netMigration"])
        series = loader.load_json(str(path))
        assert len(series) == len(migration_rows)
        assert series.last.value("netMigration") == 105955

    def test_load_json_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            SeriesLoader().load_json(str(tmp_path / "absent.json"))

    def test_load_json_rejects_non_array(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"year": 2020}), encoding="utf-8")
        with pytest.raises(ValueError, match="JSON array"):
            SeriesLoader().load_json(str(path))

    def test_from_frame_with_index(self):
        df = pd.DataFrame({"v": [3.0, 1.0, 2.0]}, index=pd.Index([2022, 2020, 2021]))
        series = SeriesLoader(period_key="year", metrics=["v"]).from_frame(df)
        assert series.periods == [2020, 2021, 2022]
        assert series.values("v").tolist() == [1.0, 2.0, 3.0]

    def test_from_frame_with_timestamp_column(self):
        df = pd.DataFrame({
            "date": pd.date_range("2024-03-01", periods=3, freq="D"),
            "distance": [5.0, 6.0, 7.0],
        })
        series = SeriesLoader(period_key="date", metrics=["distance"]).from_frame(df)
        assert series.periods == ["2024-03-01", "2024-03-02", "2024-03-03"]

    def test_validation_result_to_dict(self):
        result = SeriesLoader(period_key="year", metrics=["v"]).validate_rows([{"v": 1}])
        data = result.to_dict()
        assert data["is_valid"] is False
        assert data["errors"]
