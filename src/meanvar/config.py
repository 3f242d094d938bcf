"""Configuration management for meanvar tooling.

Provides typed settings using pydantic-settings with support for
environment variables (prefixed ``MEANVAR_``) and .env files.
"""

import os
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from meanvar.models import Distribution


class Settings(BaseSettings):
    """Application configuration settings.

    All settings can be overridden via environment variables or .env file,
    e.g. ``MEANVAR_WINDOW_SIZE=50``.
    """

    model_config = SettingsConfigDict(
        env_prefix="MEANVAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Accuracy comparison
    window_size: int = Field(
        default=20,
        description="Sliding window size",
        gt=0
    )
    sample_count: int = Field(
        default=100000,
        description="Number of random values pushed through the window",
        gt=0
    )
    distribution: Distribution = Field(
        default=Distribution.GAUSSIAN,
        description="Distribution of the random values"
    )
    seed: Optional[int] = Field(
        default=None,
        description="Random seed for reproducible runs"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance.

    Returns:
        Settings: The application settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment/file.

    Returns:
        Settings: The newly loaded settings instance
    """
    global _settings
    _settings = Settings()
    return _settings


def load_settings_from_file(filepath: str) -> Settings:
    """Load settings from a specific .env file.

    Args:
        filepath: Path to the .env file to load

    Returns:
        Settings: Settings loaded from the specified file

    Raises:
        FileNotFoundError: If the specified file doesn't exist
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Settings file not found: {filepath}")
    return Settings(_env_file=filepath)
