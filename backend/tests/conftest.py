"""
tests/conftest.py
──────────────────
Shared pytest fixtures for the backend test suite.

Fixtures
--------
make_history
    Factory building a synthetic daily OHLCV history from a list of closes.

rising_history / random_walk_history
    Ready-made histories (30 strictly rising closes; 120-bar random walk).

rng
    Seeded ``np.random.Generator`` so noisy strategies are reproducible.

app_client / sync_client
    HTTP clients wired to the FastAPI app with settings overridden.

Usage
-----
    def test_something(make_history):
        history = make_history([100, 101, 102])
"""

from datetime import date, timedelta
from typing import AsyncGenerator, Callable, List, Optional, Sequence

import numpy as np
import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_app_settings
from app.main import app
from core.config import Settings
from schemas.forecast import HistoricalDataPoint

# Monday, so weekday arithmetic in tests is easy to reason about.
_START = date(2024, 1, 1)


def build_history(
    closes: Sequence[float],
    volumes: Optional[Sequence[float]] = None,
    start: date = _START,
) -> List[HistoricalDataPoint]:
    """One bar per weekday starting at ``start``; open/high/low hug the close."""
    points: List[HistoricalDataPoint] = []
    day = start
    for i, close in enumerate(closes):
        while day.weekday() >= 5:
            day += timedelta(days=1)
        volume = volumes[i] if volumes is not None else 1_000_000 + 10_000 * (i % 7)
        points.append(
            HistoricalDataPoint(
                date=day,
                open=close,
                high=close * 1.01,
                low=close * 0.99,
                close=close,
                volume=volume,
            )
        )
        day += timedelta(days=1)
    return points


# ── History fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def make_history() -> Callable[..., List[HistoricalDataPoint]]:
    """Return the ``build_history`` factory."""
    return build_history


@pytest.fixture
def rising_history() -> List[HistoricalDataPoint]:
    """30 closes: 100, 101, …, 129."""
    return build_history([100.0 + i for i in range(30)])


@pytest.fixture
def random_walk_history() -> List[HistoricalDataPoint]:
    """120-bar positive random walk around 150 with noisy volume."""
    gen = np.random.default_rng(2024)
    steps = gen.normal(0.0005, 0.015, size=120)
    closes = 150.0 * np.exp(np.cumsum(steps))
    volumes = gen.integers(10_000_000, 60_000_000, size=120)
    return build_history(closes.tolist(), volumes.tolist())


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for the noisy strategies."""
    return np.random.default_rng(42)


# ── HTTP clients ──────────────────────────────────────────────────────────────


@pytest.fixture
def test_settings() -> Settings:
    """Deterministic settings: fixed seed, default horizon 7, cap 30."""
    return Settings(RANDOM_SEED=7, MAX_HORIZON_DAYS=30)


@pytest.fixture
async def app_client(test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTPX client with the settings dependency overridden.

    Startup lifespan is skipped; it only logs.
    """
    app.dependency_overrides[get_app_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sync_client(test_settings: Settings) -> TestClient:
    """Synchronous ``TestClient`` using the same settings override."""
    app.dependency_overrides[get_app_settings] = lambda: test_settings
    client = TestClient(app, raise_server_exceptions=True)
    yield client
    app.dependency_overrides.clear()
