"""
Pydantic schemas for forecast request / response.

Value objects (``HistoricalDataPoint``, ``PredictionResult``,
``ModelMetrics``, ``AllModelMetrics``, ``ChartPoint``) are shared by the
analytics core and the HTTP layer.  They serialise with the camelCase keys
the charting frontend expects (``predictedClose``, ``bestModel`` …) while
Python code uses snake_case attributes.
"""

from datetime import date as Date
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Strategy names
# ---------------------------------------------------------------------------
# Declaration order matters: the backtest breaks R² ties in favour of the
# first name in this tuple.
# ---------------------------------------------------------------------------
ModelName = Literal["linearRegression", "arima", "randomForest", "lstm"]

MODEL_NAMES: Tuple[str, ...] = ("linearRegression", "arima", "randomForest", "lstm")

DEFAULT_MODEL: str = "lstm"


class _CamelModel(BaseModel):
    """Base for every payload: camelCase on the wire, field names also accepted on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HistoricalDataPoint(_CamelModel):
    """
    One daily OHLCV bar, supplied by the data-acquisition layer.

    Assumed ascending by date; no gap or ordering validation is done.
    """

    model_config = ConfigDict(frozen=True)

    date: Date
    open: float
    high: float
    low: float
    close: float
    volume: float


class PredictionResult(_CamelModel):
    """A single dated forecast produced by ``generate_predictions``."""

    date: Date
    predicted_close: float
    confidence: float = Field(ge=0.55, le=0.95)
    is_prediction: bool = True
    model: str


class ModelMetrics(_CamelModel):
    """Backtest scores for one strategy.  ``accuracy`` is a 0–100 percentage."""

    mse: float = 0.0
    r2: float = 0.0
    mae: float = 0.0
    accuracy: float = 0.0


class AllModelMetrics(_CamelModel):
    """Backtest scores for every strategy plus the elected best model."""

    linear_regression: ModelMetrics = Field(default_factory=ModelMetrics)
    arima: ModelMetrics = Field(default_factory=ModelMetrics)
    random_forest: ModelMetrics = Field(default_factory=ModelMetrics)
    lstm: ModelMetrics = Field(default_factory=ModelMetrics)
    best_model: ModelName = DEFAULT_MODEL

    def for_model(self, name: str) -> ModelMetrics:
        """Look up a strategy's metrics by its public name (e.g. ``randomForest``)."""
        return getattr(self, _FIELD_BY_MODEL[name])


_FIELD_BY_MODEL: Dict[str, str] = {
    "linearRegression": "linear_regression",
    "arima": "arima",
    "randomForest": "random_forest",
    "lstm": "lstm",
}


class ChartPoint(_CamelModel):
    """
    One record of the merged historical + forecast chart series.

    Exactly one of ``actual`` / ``predicted`` is set.
    """

    date: Date
    close: Optional[float] = None
    actual: Optional[float] = None
    predicted: Optional[float] = None
    predicted_close: Optional[float] = None
    is_prediction: bool = False


# ---------------------------------------------------------------------------
# HTTP envelopes
# ---------------------------------------------------------------------------


class _SymbolRequest(_CamelModel):
    symbol: str
    history: List[HistoricalDataPoint]
    seed: Optional[int] = Field(
        default=None,
        description="Seed for the random perturbation used by the trend and ARIMA models.",
    )

    @field_validator("symbol")
    @classmethod
    def normalise_symbol(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("symbol must not be empty")
        return v


class ForecastRequest(_SymbolRequest):
    """
    Payload for POST /api/v1/forecast/predict.

    Attributes:
        symbol:          Ticker (e.g. ``AAPL``).  Upper-cased on input.
        history:         Daily OHLCV bars, oldest → newest.
        days:            Number of trading days to forecast (server default
                         when omitted).
        model:           Strategy name (server default when omitted).
                         Unknown names use ``lstm``.
        include_history: Also return the merged chart series.
        seed:            Optional RNG seed for reproducible output.
    """

    days: Optional[int] = Field(default=None, ge=1, le=365)
    model: Optional[str] = None
    include_history: bool = False


class ForecastResponse(_CamelModel):
    """
    Forecast result.

    Attributes:
        symbol:           Ticker the forecast was built for.
        model:            Strategy name as requested.
        days:             Requested horizon.
        data_points_used: Historical bars the strategy saw.
        predictions:      Dated, confidence-scored forecasts.
        chart:            Merged history + forecast view (when requested).
        error:            Set when the history was too short to forecast.
    """

    symbol: str
    model: str
    days: int
    data_points_used: int
    predictions: List[PredictionResult]
    chart: Optional[List[ChartPoint]] = None
    error: Optional[str] = None


class ModelMetricsRequest(_SymbolRequest):
    """Payload for POST /api/v1/forecast/metrics."""


class ModelMetricsResponse(_CamelModel):
    """Backtest scores for all four strategies."""

    symbol: str
    data_points_used: int
    metrics: AllModelMetrics
    error: Optional[str] = None


class ModelInfo(_CamelModel):
    """Metadata for one registered strategy."""

    model_config = ConfigDict(protected_namespaces=())

    model_name: str
    class_name: str
    min_points: int
    version: str
    doc: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)
