"""
analytics/predictions.py
────────────────────────
Public entry point: a horizon of dated, confidence-scored predictions.

- ``generate_predictions`` drives one strategy across ``days_to_predict``
  trading days.  Every step is forecast from the full original history
  with ``days_ahead = i``; nothing is re-fit between steps.
- ``combine_with_predictions`` merges history and forecast into the single
  chronological series the chart layer renders.
"""

import logging
from datetime import date as Date
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from analytics.forecasting.factory import ForecastingFactory
from schemas.forecast import ChartPoint, HistoricalDataPoint, PredictionResult

logger = logging.getLogger(__name__)

MIN_PREDICTION_POINTS = 15
DEFAULT_HORIZON_DAYS = 7

# Starting confidence per requested model name; anything else gets the default.
BASE_CONFIDENCE: Dict[str, float] = {
    "lstm": 0.92,
    "randomForest": 0.88,
    "arima": 0.85,
}
DEFAULT_BASE_CONFIDENCE = 0.82
CONFIDENCE_DECAY_PER_DAY = 0.05
MIN_CONFIDENCE = 0.55


def next_trading_date(last_date: Date, offset: int) -> Date:
    """
    ``last_date + offset`` calendar days, pushed forward past a weekend.

    Each offset is corrected on its own, so consecutive offsets that land on
    the same weekend map to the same Monday.
    """
    candidate = pd.Timestamp(last_date) + pd.Timedelta(days=offset)
    while candidate.dayofweek >= 5:
        candidate += pd.Timedelta(days=1)
    return candidate.date()


def confidence_for(model_name: str, offset: int) -> float:
    """``max(0.55, base − 0.05 · offset)`` with the base keyed by model name."""
    base = BASE_CONFIDENCE.get(model_name, DEFAULT_BASE_CONFIDENCE)
    return max(MIN_CONFIDENCE, base - CONFIDENCE_DECAY_PER_DAY * offset)


def generate_predictions(
    history: Sequence[HistoricalDataPoint],
    days_to_predict: int = DEFAULT_HORIZON_DAYS,
    model_name: str = "lstm",
    rng: Optional[np.random.Generator] = None,
) -> List[PredictionResult]:
    """
    Forecast ``days_to_predict`` trading days past the end of ``history``.

    Args:
        history:         Daily bars, oldest → newest.  Not mutated.
        days_to_predict: Horizon length.
        model_name:      Strategy name.  Unknown names run ``lstm`` but keep
                         the requested label and the default confidence.
        rng:             Generator for the noisy strategies.

    Returns:
        One ``PredictionResult`` per step, or ``[]`` when the history has
        fewer than ``MIN_PREDICTION_POINTS`` bars.
    """
    if len(history) < MIN_PREDICTION_POINTS:
        logger.info(
            "Need at least %d points to predict, got %d",
            MIN_PREDICTION_POINTS,
            len(history),
        )
        return []

    forecaster = ForecastingFactory.create_forecaster(model_name, rng=rng)
    last_date = history[-1].date

    predictions: List[PredictionResult] = []
    for offset in range(1, days_to_predict + 1):
        predicted = forecaster.forecast(history, days_ahead=offset)
        predictions.append(
            PredictionResult(
                date=next_trading_date(last_date, offset),
                predicted_close=round(predicted, 2),
                confidence=confidence_for(model_name, offset),
                is_prediction=True,
                model=model_name,
            )
        )

    logger.debug(
        "Generated %d %s predictions from %d points",
        len(predictions),
        model_name,
        len(history),
    )
    return predictions


def combine_with_predictions(
    history: Sequence[HistoricalDataPoint],
    predictions: Sequence[PredictionResult],
) -> List[ChartPoint]:
    """
    Merge history and predictions into one chart series.

    Historical records carry ``actual``/``close``; prediction records carry
    ``predicted``/``predicted_close``.  Order is history then predictions.
    """
    combined = [
        ChartPoint(date=point.date, close=point.close, actual=point.close, is_prediction=False)
        for point in history
    ]
    combined.extend(
        ChartPoint(
            date=pred.date,
            predicted=pred.predicted_close,
            predicted_close=pred.predicted_close,
            is_prediction=True,
        )
        for pred in predictions
    )
    return combined
