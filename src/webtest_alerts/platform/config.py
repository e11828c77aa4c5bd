"""
Webtest Alerts Configuration Management

Uses Pydantic Settings for type-safe configuration from environment variables.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # =========================================================================
    # APPLICATION
    # =========================================================================
    APP_NAME: str = "webtest-alerts"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "info"
    VERSION: str = "0.1.0"

    # =========================================================================
    # MONITORING MANAGEMENT API (Upsert target)
    # =========================================================================
    MONITOR_API_URL: str = "https://management.azure.com"
    MONITOR_API_VERSION: str = "2014-04-01"
    MONITOR_SUBSCRIPTION_ID: str = ""
    MONITOR_API_TOKEN: str = ""
    MONITOR_TIMEOUT_SECONDS: float = 30.0

    # =========================================================================
    # RULE DEFAULTS
    # =========================================================================
    DEFAULT_WINDOW_MINUTES: int = 15

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for easy import
settings = get_settings()
