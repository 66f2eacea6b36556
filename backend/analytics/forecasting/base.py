"""
analytics/forecasting/base.py
─────────────────────────────
Abstract base class shared by the four heuristic price forecasters.

Classes
-------
BaseForecaster
    Interface every strategy implements: a single
    ``forecast(history, days_ahead) -> price`` call.

None of the strategies is a trained model.  "LSTM", "ARIMA" and "Random
Forest" name heuristic approximations; there is no fit step and nothing is
persisted.  Each call is a pure function of the history, the day offset
and (for the noisy strategies) the injected random generator.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Optional, Sequence

import numpy as np

from analytics.history import last_close
from schemas.forecast import HistoricalDataPoint

logger = logging.getLogger(__name__)

# Epsilon added to denominators that may legitimately reach zero.
EPSILON = 1e-8


class BaseForecaster(ABC):
    """
    Abstract base class for heuristic price forecasters.

    Subclasses set three class attributes and implement ``_predict``:

    name:
        Public strategy name (one of ``MODEL_NAMES``).
    min_points:
        Minimum history length.  Shorter input returns the last close.
    floor_ratio:
        Output is never below ``floor_ratio × last close``.

    Args:
        rng: Random generator for strategies that perturb their output.
             ``None`` creates an unseeded ``np.random.default_rng()``.
    """

    name: ClassVar[str]
    min_points: ClassVar[int]
    floor_ratio: ClassVar[float]

    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()

    def forecast(self, history: Sequence[HistoricalDataPoint], days_ahead: int) -> float:
        """
        Predict the close ``days_ahead`` trading steps after the last bar.

        Args:
            history:    Daily bars, oldest → newest.  Not mutated.
            days_ahead: Forecast offset, 1 for the next session.

        Returns:
            Predicted close.  Exactly the last close (0.0 for empty input)
            when the history is shorter than ``min_points``.
        """
        if len(history) < self.min_points:
            logger.debug(
                "%s needs %d points, got %d; returning last close",
                self.name,
                self.min_points,
                len(history),
            )
            return last_close(history)

        prediction = self._predict(history, days_ahead)
        return max(prediction, last_close(history) * self.floor_ratio)

    @abstractmethod
    def _predict(self, history: Sequence[HistoricalDataPoint], days_ahead: int) -> float:
        """Raw (unclamped) prediction; history length is at least ``min_points``."""

    def _centered_uniform(self) -> float:
        """Uniform draw on [-0.5, 0.5)."""
        return float(self.rng.random()) - 0.5

    def get_model_info(self) -> Dict[str, Any]:
        """
        Return model metadata for logging / API responses.

        Returns:
            Dict with ``model_name``, ``class_name``, ``min_points`` and
            ``version`` keys.
        """
        return {
            "model_name": self.name,
            "class_name": self.__class__.__name__,
            "min_points": self.min_points,
            "version": "1.0",
        }
