"""Turn raw dataset rows into TimeSeries with schema validation."""

from typing import Dict, Optional, Any, List, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
import json
import logging
import numbers
from pathlib import Path

import pandas as pd

from seriescast.data.structs import DATE, Record, TimeSeries, period_kind

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of row schema validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    schema_violations: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "is_valid": self.is_valid,
            "errors": self.errors,
            "warnings": self.warnings,
            "schema_violations": self.schema_violations,
        }


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_iso_date(text: str) -> bool:
    """True for canonical ``YYYY-MM-DD`` strings."""
    try:
        return date.fromisoformat(text).isoformat() == text
    except ValueError:
        return False


class SeriesLoader:
    """
    Builds TimeSeries from flat ``{period, metric1, metric2, ...}`` rows.

    Non-numeric fields that are not declared metrics (comments, start
    times) are dropped with a warning.
    """

    def __init__(self, period_key: str = "year", metrics: Optional[Sequence[str]] = None):
        """
        Args:
            period_key: Name of the field holding the period
            metrics: Metric names to keep (defaults to every numeric field)
        """
        self.period_key = period_key
        self.metrics = list(metrics) if metrics is not None else None

    def validate_rows(self, rows: Sequence[Mapping[str, Any]]) -> ValidationResult:
        """
        Validate raw rows against the loader's schema.

        Args:
            rows: Raw rows as mappings

        Returns:
            ValidationResult with validation details
        """
        errors: List[str] = []
        warnings: List[str] = []
        schema_violations: Dict[str, str] = {}
        kinds = set()
        dropped = set()

        for i, row in enumerate(rows):
            if self.period_key not in row:
                errors.append(f"Row {i} is missing period field '{self.period_key}'")
                schema_violations[self.period_key] = "missing"
                continue

            period = row[self.period_key]
            try:
                kind = period_kind(period)
            except TypeError:
                kind = None
            if kind == DATE and not _is_iso_date(period):
                kind = None
            if kind is None:
                errors.append(f"Row {i} has unsupported period {period!r}")
                schema_violations[self.period_key] = "type_mismatch"
            else:
                kinds.add(kind)

            expected = self.metrics if self.metrics is not None else [
                k for k in row if k != self.period_key and _is_number(row[k])
            ]
            for name in expected:
                if name not in row:
                    errors.append(f"Row {i} is missing metric '{name}'")
                    schema_violations[name] = "missing"
                elif not _is_number(row[name]):
                    errors.append(
                        f"Row {i} metric '{name}' is not numeric: {row[name]!r}"
                    )
                    schema_violations[name] = "type_mismatch"

            dropped.update(
                k for k in row if k != self.period_key and k not in expected
            )

        if len(kinds) > 1:
            errors.append("Rows mix year and date periods")
            schema_violations[self.period_key] = "mixed_kinds"

        if dropped:
            warnings.append(f"Ignored non-metric fields: {sorted(dropped)}")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            schema_violations=schema_violations,
        )

    def from_rows(
        self,
        rows: Iterable[Mapping[str, Any]],
        validate: bool = True,
    ) -> TimeSeries:
        """
        Build a TimeSeries from raw rows in any order.

        Args:
            rows: Raw rows
            validate: Whether to check the schema first

        Returns:
            TimeSeries sorted ascending by period

        Raises:
            ValueError: If schema validation fails
        """
        rows = list(rows)

        if validate:
            result = self.validate_rows(rows)
            if not result.is_valid:
                raise ValueError(f"Schema validation failed: {'; '.join(result.errors)}")
            for warning in result.warnings:
                logger.warning(warning)

        records = []
        for row in rows:
            names = self.metrics if self.metrics is not None else [
                k for k in row if k != self.period_key and _is_number(row[k])
            ]
            records.append(
                Record(row[self.period_key], {name: row[name] for name in names})
            )

        series = TimeSeries(records, metric_names=self.metrics)
        logger.info(f"Loaded {len(series)} records keyed by '{self.period_key}'")
        return series

    def load_json(self, path: str) -> TimeSeries:
        """
        Load rows from a JSON array file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the content is not a list of objects or fails validation
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Dataset file not found: {path}")

        with open(file_path, "r", encoding="utf-8") as f:
            rows = json.load(f)

        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            raise ValueError(f"Expected a JSON array of objects in {path}")

        return self.from_rows(rows)

    def from_frame(self, df: pd.DataFrame) -> TimeSeries:
        """
        Build a TimeSeries from a DataFrame.

        The period is taken from the ``period_key`` column when present,
        otherwise from the index.
        """
        frame = df if self.period_key in df.columns else df.rename_axis(self.period_key).reset_index()
        rows = []
        for row in frame.to_dict(orient="records"):
            period = row[self.period_key]
            if isinstance(period, pd.Timestamp):
                row[self.period_key] = period.date().isoformat()
            elif hasattr(period, "item"):
                # numpy scalar
                row[self.period_key] = period.item()
            rows.append(row)
        return self.from_rows(rows)
