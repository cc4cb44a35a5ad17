"""
Legislative discovery configuration.

Dependencies: pydantic, pydantic_settings
System role: Legistar OData API parameters
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from zoning_search.configs.base import BaseSettings


class DiscoverySettings(BaseSettings):
    """San Francisco Legistar OData configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LEGISTAR_",
        case_sensitive=False,
        extra="ignore",
    )

    odata_base: str = Field(
        default="https://webapi.legistar.com/v1/sfgov",
        description="Legistar OData root for the San Francisco client",
    )
    matter_scan_limit: int = Field(
        default=500,
        ge=1,
        description="Most recent matters scanned per discovery call",
    )
    default_search_terms: list[str] = Field(
        default=["housing", "zoning", "development", "residential", "EIR", "CEQA", "planning"],
    )
    default_limit: int = Field(default=20, ge=1, description="Default PDF cap per discovery call")
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=1)
    retry_base_delay_seconds: float = Field(default=1.0, ge=0)
