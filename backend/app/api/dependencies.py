"""
app/api/dependencies.py
───────────────────────
FastAPI dependency functions shared across all endpoints.

Usage
-----
    from app.api.dependencies import get_app_settings

    @router.get("/foo")
    def my_route(settings = Depends(get_app_settings)):
        ...
"""

from typing import Optional

import numpy as np

from core.config import Settings, get_settings


def get_app_settings() -> Settings:
    """
    FastAPI dependency that returns the cached ``Settings`` singleton.

    Inject via ``Depends(get_app_settings)``; tests override it through
    ``app.dependency_overrides``.
    """
    return get_settings()


def make_rng(seed: Optional[int], settings: Settings) -> np.random.Generator:
    """
    Build the random generator for one request.

    A per-request ``seed`` wins over ``RANDOM_SEED``; with neither set the
    generator is seeded from OS entropy.
    """
    return np.random.default_rng(seed if seed is not None else settings.RANDOM_SEED)
