"""
Embedding service configuration.

Dependencies: pydantic, pydantic_settings
System role: Voyage AI embeddings connection and batching parameters
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from zoning_search.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Voyage AI embedding configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VOYAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str = Field(default="", description="Voyage AI API key")
    api_url: str = Field(
        default="https://api.voyageai.com/v1/embeddings",
        description="Voyage embeddings endpoint",
    )
    model: str = Field(default="voyage-law-2", description="Legal-domain embedding model")
    dimensions: int = Field(default=1024, gt=0, description="Expected vector dimensionality")

    batch_size: int = Field(
        default=128,
        ge=1,
        le=128,
        description="Texts per embedding request (provider maximum is 128)",
    )
    batch_delay_seconds: float = Field(
        default=0.1,
        ge=0,
        description="Pause between consecutive batches",
    )
    max_retries: int = Field(default=3, ge=1, description="Attempts per batch call")
    retry_base_delay_seconds: float = Field(default=1.0, ge=0)
    timeout_seconds: float = Field(default=60.0, gt=0)
