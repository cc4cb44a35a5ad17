"""
Chunk store schemas.

Pydantic models returned by chunk store operations.

Dependencies: pydantic
System role: Type definitions for storage and retrieval results
"""

from pydantic import BaseModel, Field

from zoning_search.core.document_processing.models import Chunk


class UpsertResult(BaseModel):
    """Outcome of an upsert call (or one batch of it)."""

    inserted_count: int = Field(default=0, ge=0, description="Records created")
    modified_count: int = Field(default=0, ge=0, description="Existing records overwritten")

    @property
    def total(self) -> int:
        return self.inserted_count + self.modified_count

    def __add__(self, other: "UpsertResult") -> "UpsertResult":
        return UpsertResult(
            inserted_count=self.inserted_count + other.inserted_count,
            modified_count=self.modified_count + other.modified_count,
        )


class SearchResult(BaseModel):
    """Single result from chunk search. The stored embedding is never included."""

    document: Chunk = Field(description="Stored chunk, embedding stripped")
    score: float = Field(description="Cosine similarity to the query, -1.0 to 1.0")
    embedding_dimensions: int | None = Field(
        default=None, description="Dimensionality of the original float vector"
    )
