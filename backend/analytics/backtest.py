"""
analytics/backtest.py
─────────────────────
Train / validation backtest of all four strategies and best-model election.

The history is split at ``floor(0.8 · n)``.  Every validation bar ``i``
(0-based) is forecast from the same fixed training prefix with
``days_ahead = i + 1``: an expanding-horizon forecast, not a re-fit
rolling one.  The strategy with the highest R² wins; ties go to the first
name in ``MODEL_NAMES``.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from analytics.forecasting.factory import ForecastingFactory
from analytics.history import closes
from analytics.metrics import evaluate
from schemas.forecast import (
    DEFAULT_MODEL,
    MODEL_NAMES,
    AllModelMetrics,
    HistoricalDataPoint,
    ModelMetrics,
)

logger = logging.getLogger(__name__)

MIN_BACKTEST_POINTS = 20
VALIDATION_SPLIT = 0.8


def split_history(
    history: Sequence[HistoricalDataPoint],
) -> tuple[Sequence[HistoricalDataPoint], Sequence[HistoricalDataPoint]]:
    """Split into ``(train, validation)`` at ``floor(0.8 · n)``."""
    split_idx = int(len(history) * VALIDATION_SPLIT)
    return history[:split_idx], history[split_idx:]


def select_best_model(metrics: Dict[str, ModelMetrics]) -> str:
    """Name with the highest R²; the earliest in ``MODEL_NAMES`` wins ties."""
    return max(MODEL_NAMES, key=lambda name: metrics[name].r2)


def backtest_all_models(
    history: Sequence[HistoricalDataPoint],
    rng: Optional[np.random.Generator] = None,
) -> AllModelMetrics:
    """
    Score every strategy on the trailing 20 % of the history.

    Args:
        history: Daily bars, oldest → newest.
        rng:     Generator shared by the noisy strategies.

    Returns:
        ``AllModelMetrics``.  With fewer than ``MIN_BACKTEST_POINTS`` bars
        every score is zero and ``best_model`` is ``"lstm"``.
    """
    if len(history) < MIN_BACKTEST_POINTS:
        logger.info(
            "Backtest needs %d points, got %d; returning zero metrics",
            MIN_BACKTEST_POINTS,
            len(history),
        )
        return AllModelMetrics(best_model=DEFAULT_MODEL)

    train, validation = split_history(history)
    actual = closes(validation)

    scores: Dict[str, ModelMetrics] = {}
    for name, forecaster in ForecastingFactory.create_all(rng).items():
        predicted: List[float] = [
            forecaster.forecast(train, days_ahead=i + 1) for i in range(len(validation))
        ]
        scores[name] = evaluate(actual, predicted)
        logger.info(
            "Backtest %s: r2=%.4f mse=%.6f mae=%.6f accuracy=%.1f%%",
            name,
            scores[name].r2,
            scores[name].mse,
            scores[name].mae,
            scores[name].accuracy,
        )

    best = select_best_model(scores)
    result = AllModelMetrics(
        linear_regression=scores["linearRegression"],
        arima=scores["arima"],
        random_forest=scores["randomForest"],
        lstm=scores["lstm"],
        best_model=best,
    )
    logger.info("Best model by R²: %s (r2=%.4f)", best, result.for_model(best).r2)
    return result
