"""
analytics/forecasting/factory.py
────────────────────────────────
Strategy selection by name.

The registry is closed: exactly the four strategies in ``MODEL_NAMES``.
An unrecognised name is not an error; it takes the explicit default arm
(``lstm``, the sequence-memory strategy) and logs a warning.

Usage
-----
    from analytics.forecasting.factory import ForecastingFactory

    forecaster = ForecastingFactory.create_forecaster("arima", rng=rng)
    price = forecaster.forecast(history, days_ahead=3)
"""

import logging
from typing import Any, Dict, List, Optional, Type

import numpy as np

from analytics.forecasting.arima import DifferencedARForecaster
from analytics.forecasting.base import BaseForecaster
from analytics.forecasting.ensemble import EnsembleTreeForecaster
from analytics.forecasting.sequence_memory import SequenceMemoryForecaster
from analytics.forecasting.trend import TrendForecaster
from schemas.forecast import DEFAULT_MODEL, MODEL_NAMES

logger = logging.getLogger(__name__)


class ForecastingFactory:
    """
    Factory for the four heuristic forecasting strategies.

    Registration order matches ``MODEL_NAMES``; ``create_all`` relies on it.
    """

    _models: Dict[str, Type[BaseForecaster]] = {
        "linearRegression": TrendForecaster,
        "arima": DifferencedARForecaster,
        "randomForest": EnsembleTreeForecaster,
        "lstm": SequenceMemoryForecaster,
    }

    @classmethod
    def resolve_name(cls, model_type: str) -> str:
        """
        Map a requested strategy name onto a registered one.

        Args:
            model_type: Requested name, e.g. ``"arima"``.

        Returns:
            ``model_type`` itself when registered, else ``DEFAULT_MODEL``.
        """
        if model_type in cls._models:
            return model_type
        logger.warning(
            "Unknown model type '%s', falling back to '%s'. Available models: %s",
            model_type,
            DEFAULT_MODEL,
            ", ".join(cls._models),
        )
        return DEFAULT_MODEL

    @classmethod
    def create_forecaster(
        cls,
        model_type: str = DEFAULT_MODEL,
        rng: Optional[np.random.Generator] = None,
    ) -> BaseForecaster:
        """
        Create a forecaster instance.

        Args:
            model_type: Strategy name.  Unknown names use ``lstm``.
            rng:        Random generator handed to the strategy.

        Returns:
            An instance of the resolved strategy.
        """
        model_class = cls._models[cls.resolve_name(model_type)]
        logger.debug("Creating %s forecaster", model_class.name)
        return model_class(rng=rng)

    @classmethod
    def create_all(cls, rng: Optional[np.random.Generator] = None) -> Dict[str, BaseForecaster]:
        """
        One instance of every strategy, keyed by name in declaration order.

        All instances share ``rng`` (a fresh unseeded one when ``None``).
        """
        shared = rng if rng is not None else np.random.default_rng()
        return {name: cls._models[name](rng=shared) for name in MODEL_NAMES}

    @classmethod
    def list_available_models(cls) -> List[str]:
        """
        List all available forecasting models.

        Returns:
            Strategy names in declaration order.
        """
        return list(cls._models.keys())

    @classmethod
    def get_model_info(cls, model_type: str) -> Dict[str, Any]:
        """
        Get information about a specific model type.

        Args:
            model_type: Strategy name.

        Returns:
            The strategy's ``get_model_info()`` dict plus its docstring.

        Raises:
            ValueError: If ``model_type`` is not registered.
        """
        if model_type not in cls._models:
            raise ValueError(f"Unknown model type: {model_type}")

        model_class = cls._models[model_type]
        info = model_class(rng=np.random.default_rng(0)).get_model_info()
        info["doc"] = (model_class.__doc__ or "").strip() or None
        return info
