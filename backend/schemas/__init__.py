"""
Pydantic schemas for request/response serialization.

Separate from analytics (computation) and routes (HTTP layer).
"""

from schemas.forecast import (
    DEFAULT_MODEL,
    MODEL_NAMES,
    AllModelMetrics,
    ChartPoint,
    ForecastRequest,
    ForecastResponse,
    HistoricalDataPoint,
    ModelInfo,
    ModelMetrics,
    ModelMetricsRequest,
    ModelMetricsResponse,
    ModelName,
    PredictionResult,
)

__all__ = [
    "DEFAULT_MODEL",
    "MODEL_NAMES",
    "AllModelMetrics",
    "ChartPoint",
    "ForecastRequest",
    "ForecastResponse",
    "HistoricalDataPoint",
    "ModelInfo",
    "ModelMetrics",
    "ModelMetricsRequest",
    "ModelMetricsResponse",
    "ModelName",
    "PredictionResult",
]
