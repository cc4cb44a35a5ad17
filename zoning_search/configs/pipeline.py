"""
Pipeline orchestration defaults.

Dependencies: pydantic, pydantic_settings
System role: Defaults for run_pipeline and search actions
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from zoning_search.configs.base import BaseSettings


class PipelineSettings(BaseSettings):
    """Defaults applied when an orchestration request omits them."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    default_search_terms: list[str] = Field(
        default=[
            "housing development",
            "zoning amendment",
            "environmental impact report",
            "EIR",
            "residential project",
        ],
    )
    default_pdf_limit: int = Field(default=3, ge=1, description="PDFs processed per run")
    default_search_limit: int = Field(default=10, ge=1)
    default_min_score: float = Field(default=0.7, ge=-1.0, le=1.0)
