"""Rounding used by every strategy and statistic."""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round with ties going towards positive infinity.

    Python's built-in ``round`` rounds ties to even, so ``round(2.5) == 2``;
    dashboard figures expect ``3``.

    Args:
        value: Number to round
        ndigits: Decimal places to keep

    Returns:
        Rounded value as float
    """
    if not math.isfinite(value):
        return value
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor
