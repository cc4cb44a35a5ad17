"""
Orchestration request and response schemas.

Dependencies: pydantic, zoning_search.core, zoning_search.boundary.vdb
System role: POST /orchestrate API contracts
"""

from enum import Enum

from pydantic import BaseModel, Field

from zoning_search.boundary.vdb.vector_schemas import SearchResult
from zoning_search.core.document_processing.models import PipelineJob


class OrchestrateAction(str, Enum):
    """Supported orchestration actions."""

    RUN_PIPELINE = "run_pipeline"
    SEARCH = "search"


class OrchestrateRequest(BaseModel):
    """
    Single action-dispatch request.

    ``action`` stays a plain string so an unknown action is answered with
    the standard error envelope rather than a schema error.
    """

    action: str = Field(description="run_pipeline or search")
    file_numbers: list[str] | None = Field(default=None, description="Case identifiers")
    search_terms: list[str] | None = Field(default=None, description="Discovery terms (run_pipeline)")
    pdf_limit: int | None = Field(default=None, description="Maximum PDFs to process (run_pipeline)")
    query: str | None = Field(default=None, description="Free-text query (search)")
    limit: int | None = Field(default=None, description="Maximum results (search)")
    min_score: float | None = Field(default=None, description="Minimum cosine score (search)")


class PipelineRunData(BaseModel):
    """run_pipeline payload: terminal job plus summary."""

    job: PipelineJob
    message: str | None = None


class SearchData(BaseModel):
    """search payload: ranked results plus summary."""

    search_results: list[SearchResult] = Field(default_factory=list)
    total_found: int = 0
    message: str
