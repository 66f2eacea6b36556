"""
analytics/metrics.py
────────────────────
Error and accuracy metrics between an actual and a predicted price series.

- MSE and MAE are scale-normalised: each error is divided by the largest
  actual price in the window, so scores are comparable across tickers.
- R² uses the raw prices.
- Directional accuracy is the percentage of steps where both series move
  the same way (a flat step counts as a fall).

Every metric returns 0 on empty or mismatched input.  Callers therefore
cannot tell "no data" from "perfect zero error" by MSE/MAE alone.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from schemas.forecast import ModelMetrics

logger = logging.getLogger(__name__)


def _aligned(actual: Sequence[float], predicted: Sequence[float]) -> tuple[np.ndarray, np.ndarray] | None:
    """Return both series as float arrays, or None when they cannot be scored."""
    actual_arr = np.asarray(actual, dtype=float)
    predicted_arr = np.asarray(predicted, dtype=float)
    if actual_arr.size == 0 or actual_arr.size != predicted_arr.size:
        return None
    return actual_arr, predicted_arr


def _scale(actual: np.ndarray) -> float:
    peak = float(actual.max())
    return peak if peak != 0 else 1.0


def mean_squared_error(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Mean of ``((actual − predicted) / max(actual))²``."""
    pair = _aligned(actual, predicted)
    if pair is None:
        return 0.0
    a, p = pair
    return float(np.mean(((a - p) / _scale(a)) ** 2))


def mean_absolute_error(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Mean of ``|(actual − predicted) / max(actual)|``."""
    pair = _aligned(actual, predicted)
    if pair is None:
        return 0.0
    a, p = pair
    return float(np.mean(np.abs((a - p) / _scale(a))))


def r_squared(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Coefficient of determination on raw prices; 0 when the actuals are constant."""
    pair = _aligned(actual, predicted)
    if pair is None:
        return 0.0
    a, p = pair
    ss_tot = float(np.sum((a - a.mean()) ** 2))
    if ss_tot <= 0:
        return 0.0
    ss_res = float(np.sum((a - p) ** 2))
    return 1 - ss_res / ss_tot


def directional_accuracy(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """
    Percentage (0–100) of adjacent steps where both series move the same way.

    Needs at least two points.
    """
    pair = _aligned(actual, predicted)
    if pair is None or pair[0].size < 2:
        return 0.0
    a, p = pair
    actual_dir = np.where(np.diff(a) > 0, 1, -1)
    predicted_dir = np.where(np.diff(p) > 0, 1, -1)
    return float(np.mean(actual_dir == predicted_dir) * 100.0)


def evaluate(actual: Sequence[float], predicted: Sequence[float]) -> ModelMetrics:
    """
    Score a predicted series against the actual one.

    Args:
        actual:    Realised closes.
        predicted: Forecast closes, same length.

    Returns:
        ``ModelMetrics``; all zeros when the lengths differ or are 0.
    """
    if _aligned(actual, predicted) is None:
        logger.debug(
            "Cannot score series of length %d vs %d; returning zero metrics",
            len(actual),
            len(predicted),
        )
        return ModelMetrics()

    return ModelMetrics(
        mse=mean_squared_error(actual, predicted),
        r2=r_squared(actual, predicted),
        mae=mean_absolute_error(actual, predicted),
        accuracy=directional_accuracy(actual, predicted),
    )
