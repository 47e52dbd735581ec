"""
Real-time delivery settings.

Dependencies: pydantic_settings
System role: Event hub and WebSocket connection configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from tuning_backend.configs.base import BaseSettings


class RealtimeSettings(BaseSettings):
    """Event hub configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REALTIME_",
        case_sensitive=False,
        extra="ignore",
    )

    queue_size: int = Field(
        default=256,
        description="Outbound event queue size per connection; overflow drops the event",
    )
    recheck_eligibility: bool = Field(
        default=True,
        description="Re-check role/ownership against the database before each delivery",
    )
