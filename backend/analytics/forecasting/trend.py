"""
analytics/forecasting/trend.py
──────────────────────────────
Ordinary-least-squares trend extrapolation ("linearRegression").

Fits ``close = m·i + b`` over the bar index and extends the line
``days_ahead`` steps past the last bar, then perturbs the result by a
random amount proportional to recent volatility.
"""

from typing import Any, Dict, Sequence

import numpy as np

from analytics.forecasting.base import BaseForecaster
from analytics.history import closes
from analytics.statistics import mean, safe_ratio, std_dev
from schemas.forecast import HistoricalDataPoint

TREND_MIN_POINTS = 5
TREND_FLOOR_RATIO = 0.70
VOLATILITY_WINDOW = 20
NOISE_SCALE = 0.1


class TrendForecaster(BaseForecaster):
    """
    Linear-trend forecaster with volatility-scaled noise.

    The noise term is ``(u − 0.5) × (σ/μ of the last 20 closes) × last ×
    0.1`` with ``u`` drawn from the injected generator.
    """

    name = "linearRegression"
    min_points = TREND_MIN_POINTS
    floor_ratio = TREND_FLOOR_RATIO

    def _predict(self, history: Sequence[HistoricalDataPoint], days_ahead: int) -> float:
        prices = closes(history)
        n = len(prices)
        last = float(prices[-1])

        slope, intercept = np.polyfit(np.arange(n, dtype=float), prices, deg=1)
        trend_value = slope * (n + days_ahead - 1) + intercept

        window = prices[-VOLATILITY_WINDOW:]
        volatility = safe_ratio(std_dev(window), mean(window))
        noise = self._centered_uniform() * volatility * last * NOISE_SCALE

        return float(trend_value + noise)

    def get_model_info(self) -> Dict[str, Any]:
        """Return trend model metadata."""
        info = super().get_model_info()
        info.update(
            {
                "volatility_window": VOLATILITY_WINDOW,
                "noise_scale": NOISE_SCALE,
                "floor_ratio": self.floor_ratio,
            }
        )
        return info
