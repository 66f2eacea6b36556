"""
analytics/forecasting/arima.py
──────────────────────────────
ARIMA-style differencing heuristic ("arima").

Not a fitted ARIMA: the AR(2) and MA(2) coefficients are fixed.  Starting
from the last close, each forecast step adds the AR term decayed by 0.9ⁱ
and the MA term decayed by 0.85ⁱ, so short-term momentum fades with the
horizon.
"""

from typing import Any, Dict, Sequence

import numpy as np

from analytics.forecasting.base import BaseForecaster
from analytics.history import closes
from analytics.statistics import mean, std_dev
from schemas.forecast import HistoricalDataPoint

ARIMA_MIN_POINTS = 10
ARIMA_FLOOR_RATIO = 0.75

# AR(2) weights on the two most recent first differences.
AR_WEIGHTS = (0.6, 0.3)
# MA weight on the mean of the last two deviations from the trailing SMA.
MA_WEIGHT = 0.4
MA_WINDOW = 10

AR_DECAY = 0.9
MA_DECAY = 0.85

VOLATILITY_WINDOW = 20
NOISE_SCALE = 0.15


class DifferencedARForecaster(BaseForecaster):
    """Fixed-coefficient AR/MA forecaster over first differences."""

    name = "arima"
    min_points = ARIMA_MIN_POINTS
    floor_ratio = ARIMA_FLOOR_RATIO

    def _predict(self, history: Sequence[HistoricalDataPoint], days_ahead: int) -> float:
        prices = closes(history)
        last = float(prices[-1])

        diffs = np.diff(prices)
        ar_component = AR_WEIGHTS[0] * diffs[-1] + AR_WEIGHTS[1] * diffs[-2]

        recent = prices[-MA_WINDOW:]
        errors = recent - mean(recent)
        ma_component = MA_WEIGHT * mean(errors[-2:])

        steps = np.arange(max(days_ahead, 0))
        drift = np.sum(ar_component * AR_DECAY**steps + ma_component * MA_DECAY**steps)

        noise = self._centered_uniform() * std_dev(prices[-VOLATILITY_WINDOW:]) * NOISE_SCALE
        return float(last + drift + noise)

    def get_model_info(self) -> Dict[str, Any]:
        """Return ARIMA heuristic metadata."""
        info = super().get_model_info()
        info.update(
            {
                "ar_weights": list(AR_WEIGHTS),
                "ma_weight": MA_WEIGHT,
                "ar_decay": AR_DECAY,
                "ma_decay": MA_DECAY,
                "floor_ratio": self.floor_ratio,
            }
        )
        return info
