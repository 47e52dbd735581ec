"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from tuning_backend.configs.base import BaseSettings
from tuning_backend.configs.database import DatabaseSettings
from tuning_backend.configs.event_sink import EventSinkSettings
from tuning_backend.configs.realtime import RealtimeSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    realtime: RealtimeSettings = Field(default_factory=RealtimeSettings)
    event_sink: EventSinkSettings = Field(default_factory=EventSinkSettings)

    default_operator_email: str = Field(
        default="admin@example.com",
        description="Operator account provisioned on first start",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from tuning_backend.configs import get_settings
        settings = get_settings()
    """
    return Settings()
