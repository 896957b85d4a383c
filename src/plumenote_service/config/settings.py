"""Settings module using pydantic-settings for configuration management."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Service Configuration
    service_name: str = Field(default="plumenote-service")
    environment: str = Field(default="development")
    port: int = Field(default=8010)
    host: str = Field(default="0.0.0.0")

    # Database Configuration (SQLite for development, PostgreSQL in production)
    database_url: str = Field(default="sqlite+aiosqlite:///./plumenote.db")

    # View Tracking
    view_dedup_window_minutes: int = Field(default=60, ge=1)

    # Recent Notes
    recent_notes_default_limit: int = Field(default=5, ge=1)
    recent_notes_max_limit: int = Field(default=20, ge=1)

    # Admin Statistics
    activity_window_days: int = Field(default=30, ge=1)
    active_users_window_days: int = Field(default=7, ge=1)
    top_notes_limit: int = Field(default=10, ge=1)
    top_contributors_limit: int = Field(default=5, ge=1)
    stats_timezone: str = Field(default="UTC", description="Timezone used for daily buckets")

    # Logging
    log_level: str = Field(default="INFO")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
