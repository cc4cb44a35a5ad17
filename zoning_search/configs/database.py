"""
Chunk store database configuration.

Manages the SQLAlchemy connection URL and the storage/retrieval limits
applied by the chunk store.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from zoning_search.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Chunk store connection configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite:///./zoning_chunks.db",
        description="SQLAlchemy URL (sqlite or postgresql)",
    )
    pool_size: int = Field(default=10, description="Connection pool size (postgresql only)")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    upsert_batch_size: int = Field(
        default=100,
        ge=1,
        description="Chunks written per bulk upsert statement",
    )
    candidate_cap: int = Field(
        default=500,
        ge=1,
        description="Maximum stored chunks scored per search",
    )

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured URL targets SQLite."""
        return self.database_url.startswith("sqlite")
