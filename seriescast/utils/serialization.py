"""
Serialization helpers for handing computed views to a presentation layer.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Union
from datetime import date, datetime

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class DateTimeEncoder(json.JSONEncoder):
    """JSON encoder that handles dates and numpy types."""

    def default(self, obj):
        if isinstance(obj, (datetime, date, pd.Timestamp)):
            return obj.isoformat()
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, tuple):
            return list(obj)
        return super().default(obj)


def _null_non_finite(data: Any) -> Any:
    """Replace inf/nan (undefined percentage changes) with None."""
    if isinstance(data, float) and not math.isfinite(data):
        return None
    if isinstance(data, dict):
        return {k: _null_non_finite(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_null_non_finite(v) for v in data]
    return data


def to_json(data: Any, **kwargs) -> str:
    """Serialize to a JSON string; non-finite floats become null."""
    return json.dumps(_null_non_finite(data), cls=DateTimeEncoder, **kwargs)


def save_json(data: Any, path: Union[str, Path], **kwargs) -> None:
    """Save data to JSON with date and numpy support."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding="utf-8") as f:
        json.dump(_null_non_finite(data), f, cls=DateTimeEncoder, indent=2, **kwargs)
    logger.debug(f"Saved JSON to {path}")


def load_json(path: Union[str, Path]) -> Any:
    """Load data from JSON."""
    with open(path, 'r', encoding="utf-8") as f:
        return json.load(f)
