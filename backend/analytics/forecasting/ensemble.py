"""
analytics/forecasting/ensemble.py
─────────────────────────────────
Committee of technical-signal heuristics ("randomForest").

Five independent "trees" each produce a price estimate from a different
signal; the forecast is their plain average.

Trees
-----
momentum           Weighted 5/10-session return, scaled by the horizon.
mean_reversion     Pulls the last close back toward the 20-day SMA.
volume_trend       5-session slope, nudged ±2 % by relative volume.
support_resistance Decays the last close toward the 20-day channel midpoint.
breakout           10-day σ pushed in the direction of the 5-session trend.
"""

from typing import Callable, List, Sequence

import numpy as np

from analytics.forecasting.base import BaseForecaster
from analytics.history import closes, volumes
from analytics.statistics import mean, safe_ratio, std_dev
from schemas.forecast import HistoricalDataPoint

ENSEMBLE_MIN_POINTS = 15
ENSEMBLE_FLOOR_RATIO = 0.70

MOMENTUM_WEIGHTS = (0.7, 0.3)
MOMENTUM_HORIZON_SCALE = 0.1
REVERSION_RATE = 0.2
VOLUME_BOOST = 1.02
VOLUME_DAMPEN = 0.98
CHANNEL_DECAY = 0.92
BREAKOUT_SCALE = 0.3

SMA_WINDOW = 20
CHANNEL_WINDOW = 20
BREAKOUT_WINDOW = 10
SHORT_VOLUME_WINDOW = 5
LONG_VOLUME_WINDOW = 20


def _momentum_tree(prices: np.ndarray, vols: np.ndarray, days_ahead: int) -> float:
    last = prices[-1]
    momentum5 = safe_ratio(last - prices[-6], prices[-6])
    momentum10 = safe_ratio(last - prices[-11], prices[-11])
    blended = momentum5 * MOMENTUM_WEIGHTS[0] + momentum10 * MOMENTUM_WEIGHTS[1]
    return last * (1 + blended * days_ahead * MOMENTUM_HORIZON_SCALE)


def _mean_reversion_tree(prices: np.ndarray, vols: np.ndarray, days_ahead: int) -> float:
    last = prices[-1]
    sma = mean(prices[-SMA_WINDOW:])
    deviation = safe_ratio(last - sma, sma)
    return last - deviation * last * REVERSION_RATE * days_ahead


def _volume_trend_tree(prices: np.ndarray, vols: np.ndarray, days_ahead: int) -> float:
    last = prices[-1]
    recent_volume = mean(vols[-SHORT_VOLUME_WINDOW:])
    average_volume = mean(vols[-LONG_VOLUME_WINDOW:])
    volume_signal = VOLUME_BOOST if recent_volume > average_volume else VOLUME_DAMPEN
    slope = (last - prices[-5]) / 5
    return last + slope * days_ahead * volume_signal


def _support_resistance_tree(prices: np.ndarray, vols: np.ndarray, days_ahead: int) -> float:
    window = prices[-CHANNEL_WINDOW:]
    midpoint = (window.max() + window.min()) / 2
    return midpoint + (prices[-1] - midpoint) * CHANNEL_DECAY**days_ahead


def _breakout_tree(prices: np.ndarray, vols: np.ndarray, days_ahead: int) -> float:
    last = prices[-1]
    volatility = std_dev(prices[-BREAKOUT_WINDOW:])
    direction = 1 if last > prices[-5] else -1
    return last + direction * volatility * np.sqrt(days_ahead) * BREAKOUT_SCALE


TREES: List[Callable[[np.ndarray, np.ndarray, int], float]] = [
    _momentum_tree,
    _mean_reversion_tree,
    _volume_trend_tree,
    _support_resistance_tree,
    _breakout_tree,
]


class EnsembleTreeForecaster(BaseForecaster):
    """Averages the five heuristic trees ("voting")."""

    name = "randomForest"
    min_points = ENSEMBLE_MIN_POINTS
    floor_ratio = ENSEMBLE_FLOOR_RATIO

    def tree_predictions(
        self, history: Sequence[HistoricalDataPoint], days_ahead: int
    ) -> List[float]:
        """Individual tree estimates, in ``TREES`` order."""
        prices = closes(history)
        vols = volumes(history)
        return [float(tree(prices, vols, days_ahead)) for tree in TREES]

    def _predict(self, history: Sequence[HistoricalDataPoint], days_ahead: int) -> float:
        return mean(self.tree_predictions(history, days_ahead))
