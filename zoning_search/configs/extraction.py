"""
Document extraction service configuration.

Dependencies: pydantic, pydantic_settings
System role: Reducto parse API connection parameters
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from zoning_search.configs.base import BaseSettings


class ExtractionSettings(BaseSettings):
    """Reducto layout-aware extraction configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REDUCTO_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str = Field(default="", description="Reducto API key")
    api_url: str = Field(
        default="https://platform.reducto.ai/parse",
        description="Reducto parse endpoint",
    )
    timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Per-document parse timeout; large EIR PDFs take minutes",
    )
    max_retries: int = Field(default=3, ge=1, description="Attempts per parse call")
    retry_base_delay_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base delay for exponential backoff between attempts",
    )
    min_paragraph_chars: int = Field(
        default=10,
        ge=0,
        description="Paragraphs at or below this length are dropped from plain-text responses",
    )
