"""
app/api/v1/endpoints/forecast.py
──────────────────────────────────
Forecast endpoints.

Routes
------
GET  /api/v1/forecast/models   Metadata for the four strategies.
POST /api/v1/forecast/predict  Dated predictions from one strategy.
POST /api/v1/forecast/metrics  Backtest all strategies and elect the best.

Design note
-----------
The heuristics are CPU-bound.  Each endpoint offloads the work to a
thread-pool executor so FastAPI's asyncio event loop is never blocked.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from analytics.backtest import MIN_BACKTEST_POINTS, backtest_all_models
from analytics.forecasting import ForecastingFactory
from analytics.predictions import (
    MIN_PREDICTION_POINTS,
    combine_with_predictions,
    generate_predictions,
)
from app.api.dependencies import get_app_settings, make_rng
from core.config import Settings
from schemas.forecast import (
    ForecastRequest,
    ForecastResponse,
    ModelInfo,
    ModelMetricsRequest,
    ModelMetricsResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()

# A small pool — forecasting is CPU-bound, not I/O-bound.
_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="forecast")


# ── helpers ───────────────────────────────────────────────────────────────────


def _run_predict(req: ForecastRequest, settings: Settings) -> ForecastResponse:
    """Run generate_predictions synchronously (called inside thread pool)."""
    days = req.days or settings.DEFAULT_HORIZON_DAYS
    model = req.model or settings.DEFAULT_MODEL
    if days > settings.MAX_HORIZON_DAYS:
        raise ValueError(f"days must be at most {settings.MAX_HORIZON_DAYS}, got {days}")

    predictions = generate_predictions(
        req.history,
        days_to_predict=days,
        model_name=model,
        rng=make_rng(req.seed, settings),
    )
    error = None
    if not predictions:
        error = (
            f"Need at least {MIN_PREDICTION_POINTS} data points "
            f"(have {len(req.history)})."
        )

    return ForecastResponse(
        symbol=req.symbol,
        model=model,
        days=days,
        data_points_used=len(req.history),
        predictions=predictions,
        chart=combine_with_predictions(req.history, predictions) if req.include_history else None,
        error=error,
    )


def _run_metrics(req: ModelMetricsRequest, settings: Settings) -> ModelMetricsResponse:
    """Run backtest_all_models synchronously (called inside thread pool)."""
    metrics = backtest_all_models(req.history, rng=make_rng(req.seed, settings))
    error = None
    if len(req.history) < MIN_BACKTEST_POINTS:
        error = (
            f"Need at least {MIN_BACKTEST_POINTS} data points "
            f"(have {len(req.history)})."
        )
    return ModelMetricsResponse(
        symbol=req.symbol,
        data_points_used=len(req.history),
        metrics=metrics,
        error=error,
    )


# ── endpoints ─────────────────────────────────────────────────────────────────


@router.get("/models", response_model=List[ModelInfo], summary="Available strategies")
def list_models() -> List[ModelInfo]:
    """
    Describe every registered forecasting strategy.

    Returns:
        One entry per strategy, in tie-break order.
    """
    core_keys = {"model_name", "class_name", "min_points", "version", "doc"}
    infos = []
    for name in ForecastingFactory.list_available_models():
        info = ForecastingFactory.get_model_info(name)
        infos.append(
            ModelInfo(
                model_name=info["model_name"],
                class_name=info["class_name"],
                min_points=info["min_points"],
                version=info["version"],
                doc=info.get("doc"),
                params={k: v for k, v in info.items() if k not in core_keys},
            )
        )
    return infos


@router.post("/predict", response_model=ForecastResponse, summary="Price forecast")
async def predict(
    request: ForecastRequest,
    settings: Settings = Depends(get_app_settings),
) -> ForecastResponse:
    """
    Forecast the next ``days`` trading-day closes with one strategy.

    Args:
        request: Ticker, OHLCV history and forecast parameters.

    Returns:
        Dated predictions with decaying confidence.  Empty, with ``error``
        set, when the history is too short.

    Raises:
        HTTPException 422: On invalid input (e.g. horizon above the cap).
    """
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(_executor, _run_predict, request, settings)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Forecast failed for %s", request.symbol)
        raise HTTPException(status_code=500, detail="Forecast computation failed") from exc


@router.post("/metrics", response_model=ModelMetricsResponse, summary="Backtest all strategies")
async def model_metrics(
    request: ModelMetricsRequest,
    settings: Settings = Depends(get_app_settings),
) -> ModelMetricsResponse:
    """
    Backtest all four strategies on the trailing 20 % of the history.

    Args:
        request: Ticker and OHLCV history.

    Returns:
        Per-strategy MSE, R², MAE and directional accuracy plus the best
        model by R².  All zeros, with ``error`` set, on thin history.
    """
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(_executor, _run_metrics, request, settings)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Backtest failed for %s", request.symbol)
        raise HTTPException(status_code=500, detail="Forecast computation failed") from exc
