"""
app/main.py
────────────
FastAPI application factory.

All business logic lives in ``analytics/``; endpoints live in
``app/api/v1/endpoints/``.  This file is intentionally slim — it wires
together logging, middleware, routers, and lifecycle events only.

API Layout
----------
GET  /                           Health check
GET  /api/v1/forecast/models     Strategy metadata
POST /api/v1/forecast/predict    Dated predictions from one strategy
POST /api/v1/forecast/metrics    Backtest all strategies, elect the best

OpenAPI docs
------------
- Swagger UI:  http://localhost:8000/docs
- ReDoc:       http://localhost:8000/redoc
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.router import api_router
from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


# ── Logging ───────────────────────────────────────────────────────────────────


def configure_logging(settings: Settings) -> None:
    """Install the root handler at the configured level (once per process)."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ── Lifespan ──────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging, then log startup / shutdown."""
    settings = get_settings()
    configure_logging(settings)
    logger.info(
        "Starting %s v%s (debug=%s, seed=%s)",
        settings.APP_TITLE,
        settings.APP_VERSION,
        settings.DEBUG,
        settings.RANDOM_SEED,
    )

    yield  # ← application runs here

    logger.info("Shutting down %s", settings.APP_TITLE)


# ── App factory ───────────────────────────────────────────────────────────────

settings = get_settings()

app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    description=settings.APP_DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# ── Middleware ────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────

app.include_router(api_router, prefix="/api/v1")

# ── Root health-check ─────────────────────────────────────────────────────────


@app.get("/", tags=["health"], summary="Health check")
def health_check() -> dict:
    """
    Lightweight liveness probe.

    Returns:
        Status and current API version.
    """
    return {"status": "ok", "version": settings.APP_VERSION}
