"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() so the CLI and library callers share one cached instance.

Usage:
    from backend.settings import get_settings, Settings

    settings = get_settings()
    use_case = BatchMigrateUseCase.from_settings(settings)

    # Environment variables override defaults, e.g.
    #   MIGRATION_BATCH_SIZE=100 python -m backend migrate workouts.json
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # -------------------------------------------------------------------------
    # Batch Migration
    # -------------------------------------------------------------------------
    migration_batch_size: int = Field(
        default=50,
        gt=0,
        description="Records per batch before yielding to the event loop",
    )
    migration_batch_pause_seconds: float = Field(
        default=0.1,
        ge=0,
        description="Pause between batches",
    )

    # -------------------------------------------------------------------------
    # Converters
    # -------------------------------------------------------------------------
    migration_seconds_per_set: int = Field(
        default=60,
        gt=0,
        description="Assumed work time per strength set when estimating durations",
    )
    migration_default_rest_between_sets: int = Field(
        default=60,
        ge=0,
        description="Rest between sets when a legacy exercise does not specify one",
    )

    # -------------------------------------------------------------------------
    # Rollback
    # -------------------------------------------------------------------------
    rollback_yield_every: int = Field(
        default=10,
        gt=0,
        description="Bulk rollback yields to the event loop every N records",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is one the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log level '{v}'")
        return level

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
