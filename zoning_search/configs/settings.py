"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from zoning_search.configs.base import BaseSettings
from zoning_search.configs.database import DatabaseSettings
from zoning_search.configs.discovery import DiscoverySettings
from zoning_search.configs.embedding import EmbeddingSettings
from zoning_search.configs.extraction import ExtractionSettings
from zoning_search.configs.pipeline import PipelineSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    discovery: DiscoverySettings = Field(default_factory=DiscoverySettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once; call ``get_settings.cache_clear()``
    to reload them.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
