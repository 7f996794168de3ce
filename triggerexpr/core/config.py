"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "TriggerExpr"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Trigger ids
    uid_prefix: str = Field(
        default="trigger",
        min_length=1,
        pattern=r"^[A-Za-z0-9]",
        description="Marker prepended to trigger ids that do not start with a letter or digit",
    )

    # System triggers
    startup_start_level: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Start level used by 'System started' triggers (20 = rules loaded)",
    )

    # Generic event triggers
    event_topic: str = Field(
        default="openhab/*",
        description="Event topic filter for generic event triggers",
    )
    event_source_prefix: str = Field(
        default="openhab/",
        description="Prefix for the event source of generic event triggers",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
