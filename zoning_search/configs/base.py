"""
Base configuration settings.

Provides common configuration inherited by all specific config modules.
Handles environment detection and shared defaults.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

from zoning_search.core.exceptions import ConfigurationError


class BaseSettings(PydanticBaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Application environment (development, staging, production)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )


def require_api_key(value: str, setting: str) -> str:
    """
    Return a credential or fail fast when it is missing.

    Args:
        value: Configured credential value
        setting: Environment variable name, reported in the error

    Returns:
        str: The credential, stripped of surrounding whitespace

    Raises:
        ConfigurationError: When the credential is empty
    """
    key = (value or "").strip()
    if not key:
        raise ConfigurationError(f"{setting} is not configured", setting=setting)
    return key
