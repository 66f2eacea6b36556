"""
analytics/statistics.py
───────────────────────
Small NumPy statistics shared by every forecasting strategy.

All helpers accept any sequence of numbers and never raise on short input:
empty or single-point windows collapse to 0.
"""

from typing import Sequence

import numpy as np


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty window."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(arr.mean())


def variance(values: Sequence[float]) -> float:
    """Population variance (divides by N), 0.0 for fewer than 2 points."""
    arr = np.asarray(values, dtype=float)
    if arr.size < 2:
        return 0.0
    return float(np.var(arr, ddof=0))


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation."""
    return float(np.sqrt(variance(values)))


def safe_ratio(numerator: float, denominator: float) -> float:
    """``numerator / denominator``, or 0.0 when the denominator is zero."""
    if denominator == 0:
        return 0.0
    return float(numerator / denominator)
