"""
Deployment settings.

Loads settings from environment variables (prefix ``FORECAST_``) and an
optional .env file. Only values that change per deployment live here;
tuning constants belong in `forecasting.config`.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Forecasting settings loaded from environment.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        redis_url: Redis URL for the validation cache. Unset means the
            cache stays in process memory.
        validation_cache_ttl: Seconds a cached validation result stays fresh.
        random_seed: Seed for the forecast models' random generator.
            Unset means fresh OS entropy per engine.
        min_history_points: Shortest history the ensemble will forecast
            from before switching to the fallback model.
        default_horizon_days: Horizon used when a caller does not pass one.
    """

    model_config = SettingsConfigDict(
        env_prefix="FORECAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    redis_url: Optional[str] = None
    validation_cache_ttl: int = 300
    random_seed: Optional[int] = None
    min_history_points: int = 30
    default_horizon_days: int = 7


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
