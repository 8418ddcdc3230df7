"""Process-level settings using Pydantic Settings v2."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime defaults with environment variable support.

    Every field can be overridden with a ``CORRGUIDE_``-prefixed
    environment variable (e.g. ``CORRGUIDE_DEFAULT_THRESHOLD=0.8``) or
    a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORRGUIDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Correlation
    default_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    min_observations: int = Field(default=2, ge=2)
    max_workers: int = Field(default=1, ge=1)

    # Heatmap
    heatmap_high_cutoff: float = Field(default=0.7, gt=0.0, le=1.0)
    heatmap_decimals: int = Field(default=4, ge=0, le=15)

    # Session cache (None keeps entries until explicitly deleted)
    session_ttl_seconds: Optional[float] = Field(default=None, gt=0.0)

    log_level: str = Field(
        default="WARNING",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached process-wide settings instance."""
    return Settings()
