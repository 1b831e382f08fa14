"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Validation engine settings loaded from environment variables.

    Environment Variables:
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default True)
        ENABLE_METRICS: Record Prometheus metrics per pass (default True)
        SALES_BATCH_MAX_RECORDS: Largest accepted sales import batch
        SALES_STALE_AFTER_DAYS: Age after which a sale date gets a warning
    """

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Metrics
    ENABLE_METRICS: bool = True

    # Sales rules
    SALES_BATCH_MAX_RECORDS: int = 10_000
    SALES_STALE_AFTER_DAYS: int = 30

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
