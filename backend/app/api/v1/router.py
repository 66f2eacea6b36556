"""
app/api/v1/router.py
────────────────────
Aggregates every v1 endpoint router under a single ``APIRouter``.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import forecast

api_router = APIRouter()
api_router.include_router(forecast.router, prefix="/forecast", tags=["forecast"])
