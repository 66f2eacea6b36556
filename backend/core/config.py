"""
core/config.py
──────────────
Centralised application settings via ``pydantic-settings``.

All configuration is driven by environment variables (or a ``.env`` file
in the ``backend/`` directory).  ``pydantic-settings`` validates types at
startup, so a malformed value fails fast with a clear error message.

Usage
-----
    from core.config import get_settings

    settings = get_settings()
    print(settings.DEFAULT_HORIZON_DAYS)
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the backend/ directory so relative .env paths work from any cwd.
_BACKEND_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables / ``.env`` file.

    Attributes:
        APP_TITLE:            Human-readable API name shown in OpenAPI docs.
        APP_VERSION:          Semantic version string.
        APP_DESCRIPTION:      Short description shown in the OpenAPI UI.
        DEBUG:                Enable verbose logging.
        LOG_LEVEL:            Root log level when DEBUG is off.
        DEFAULT_HORIZON_DAYS: Forecast horizon used when a client omits it.
        MAX_HORIZON_DAYS:     Largest horizon the API will compute.
        DEFAULT_MODEL:        Strategy used when a client omits it.
        RANDOM_SEED:          Seed for reproducible noise; unset = random.
        FRONTEND_URL:         Optional deployed frontend origin for CORS.
    """

    model_config = SettingsConfigDict(
        env_file=str(_BACKEND_DIR / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        # Extra env vars are ignored — don't raise on unexpected keys.
        extra="ignore",
    )

    # ── API metadata ──────────────────────────────────────────────────────
    APP_TITLE: str = "Price Forecast API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = (
        "Multi-model short-term closing price forecasts with "
        "train/validation backtesting and best-model selection."
    )

    # ── Logging ───────────────────────────────────────────────────────────
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # ── Forecasting defaults ──────────────────────────────────────────────
    DEFAULT_HORIZON_DAYS: int = Field(default=7, ge=1)
    MAX_HORIZON_DAYS: int = Field(default=60, ge=1)
    DEFAULT_MODEL: str = "lstm"
    RANDOM_SEED: Optional[int] = None

    # ── CORS ──────────────────────────────────────────────────────────────
    FRONTEND_URL: str = ""

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """
        Build the full CORS allow-list.

        Hard-coded dev origins plus the optional ``FRONTEND_URL`` env var.

        Returns:
            List of allowed origin strings.
        """
        origins: List[str] = [
            "http://localhost:5173",   # Vite / React dev server
            "http://127.0.0.1:5173",
            "http://localhost:8080",
            "http://127.0.0.1:8080",
        ]
        if self.FRONTEND_URL:
            origins.append(self.FRONTEND_URL)
        return origins

    @property
    def log_level(self) -> int:
        """Numeric root log level (DEBUG overrides LOG_LEVEL)."""
        if self.DEBUG:
            return logging.DEBUG
        return logging.getLevelName(self.LOG_LEVEL)

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, v: str) -> str:
        """Reject level names the logging module does not know."""
        v = v.upper()
        if v not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return a cached ``Settings`` singleton.

    The instance is created (and the ``.env`` file parsed) only once per
    process lifetime, courtesy of ``functools.lru_cache``.

    Returns:
        Settings: Validated application configuration.
    """
    return Settings()
