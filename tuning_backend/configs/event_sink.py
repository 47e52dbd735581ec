"""
Outbound event sink settings.

Settings for the fire-and-forget notification bridge. An empty webhook URL
selects the log-only sink.

Dependencies: pydantic_settings
System role: Push-notification bridge configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from tuning_backend.configs.base import BaseSettings


class EventSinkSettings(BaseSettings):
    """Event sink configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EVENT_SINK_",
        case_sensitive=False,
        extra="ignore",
    )

    webhook_url: str = Field(default="", description="Webhook receiving sink events")
    timeout_seconds: float = Field(default=5.0, description="Webhook request timeout")
