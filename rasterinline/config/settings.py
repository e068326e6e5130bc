"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Raster Inline", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional rotating log file")

    # Fetch Configuration
    fetch_timeout: float = Field(default=30.0, gt=0, description="Total fetch timeout in seconds")
    fetch_connect_timeout: float = Field(
        default=10.0, gt=0, description="Connection timeout in seconds"
    )
    user_agent: str = Field(default="rasterinline/1.0", description="User-Agent for HTTP fetches")
    local_root: Optional[Path] = Field(
        default=None, description="Directory that scheme-less URLs are read from"
    )

    # Inlining Configuration
    max_concurrent_fetches: int = Field(
        default=10, gt=0, description="Maximum number of fetches in flight per pass"
    )
    fail_on_missing_resource: bool = Field(
        default=False, description="Raise once a pass completes if any resource failed"
    )
    default_image_mime_type: str = Field(
        default="image/png", description="MIME type used when none can be guessed"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="RASTERINLINE_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
