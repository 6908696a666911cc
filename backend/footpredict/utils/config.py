"""
Configuration module for loading and validating environment variables.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger("footpredict.config")

DEFAULT_BETMINER_BASE_URL = "https://betminer.p.rapidapi.com/bm/predictions/arrays"


class Settings(BaseModel):
    """Application settings loaded from environment variables with defaults."""

    # Application Settings
    APP_NAME: str = "Football Predictions API"
    APP_VERSION: str = "1.0.0"
    APP_DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="development")
    PORT: int = Field(default=3001)

    # Upstream prediction provider (Betminer on RapidAPI)
    RAPIDAPI_KEY: Optional[str] = None
    BETMINER_BASE_URL: str = Field(default=DEFAULT_BETMINER_BASE_URL)
    UPSTREAM_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # Cache store
    CACHE_BACKEND: str = Field(default="redis")
    REDIS_URL: str = Field(default="redis://localhost:6379/0")
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None

    # Other settings
    LOG_LEVEL: str = Field(default="INFO")


def load_settings() -> Settings:
    """Build a Settings object from the current environment."""
    return Settings(
        APP_DEBUG=os.getenv("APP_DEBUG", "False").lower() in ("true", "1", "t"),
        ENVIRONMENT=os.getenv("ENVIRONMENT", "development"),
        PORT=int(os.getenv("PORT", "3001")),
        RAPIDAPI_KEY=os.getenv("RAPIDAPI_KEY") or None,
        BETMINER_BASE_URL=os.getenv("BETMINER_BASE_URL", DEFAULT_BETMINER_BASE_URL),
        UPSTREAM_TIMEOUT_SECONDS=float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10")),
        CACHE_BACKEND=os.getenv("CACHE_BACKEND", "redis").lower(),
        REDIS_URL=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        SUPABASE_URL=os.getenv("SUPABASE_URL") or None,
        SUPABASE_KEY=os.getenv("SUPABASE_KEY") or None,
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


# Create global settings object
settings = load_settings()


def get_settings() -> Settings:
    """Return the global settings object."""
    return settings


def verify_env_variables(current: Optional[Settings] = None) -> bool:
    """
    Verify that the environment variables needed by the selected backends are set.

    A missing RAPIDAPI_KEY is not an error: the upstream source simply runs
    in offline mode and serves the built-in sample set.
    """
    current = current or settings

    required_vars = []
    if current.CACHE_BACKEND == "supabase":
        required_vars = ["SUPABASE_URL", "SUPABASE_KEY"]

    missing_vars = [var for var in required_vars if not getattr(current, var)]

    if not current.RAPIDAPI_KEY:
        logger.warning("RAPIDAPI_KEY is not set - upstream source will run in offline mode")

    if missing_vars:
        logger.warning(f"Missing required environment variables: {', '.join(missing_vars)}")
        return False

    return True
