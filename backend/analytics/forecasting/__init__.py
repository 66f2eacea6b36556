"""
analytics/forecasting — Heuristic price forecasting strategies.

Public API
----------
    from analytics.forecasting import BaseForecaster, ForecastingFactory
    from analytics.forecasting import TrendForecaster, DifferencedARForecaster
    from analytics.forecasting import EnsembleTreeForecaster, SequenceMemoryForecaster
"""

from analytics.forecasting.arima import DifferencedARForecaster
from analytics.forecasting.base import BaseForecaster
from analytics.forecasting.ensemble import EnsembleTreeForecaster
from analytics.forecasting.factory import ForecastingFactory
from analytics.forecasting.sequence_memory import SequenceMemoryForecaster
from analytics.forecasting.trend import TrendForecaster

__all__ = [
    "BaseForecaster",
    "DifferencedARForecaster",
    "EnsembleTreeForecaster",
    "ForecastingFactory",
    "SequenceMemoryForecaster",
    "TrendForecaster",
]
