"""Configuration management for GroupAccess.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Configuration is loaded once and is
immutable during runtime.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GROUPACCESS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "GroupAccess"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./ga_data/groupaccess.db"
    db_echo: bool = False

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Group settings storage
    settings_config_key: str = "groupaccess.settings"
    groups_config_key: str = "groups"

    # Access Settings
    superuser_id: str = Field(
        default="1",
        description="User ID that bypasses every group access check",
    )
    group_manager_full_access: bool = Field(
        default=False,
        description="Grant the owner of a group every permission on that group",
    )

    @field_validator("superuser_id", mode="before")
    @classmethod
    def coerce_superuser_id(cls, v: str | int) -> str:
        """Accept numeric user IDs from the environment."""
        return str(v)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
