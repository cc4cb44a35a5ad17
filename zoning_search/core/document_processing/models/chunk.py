"""
Chunk domain model for the zoning document pipeline.

A chunk is one positioned unit of text taken from a PDF page, keyed
by (source_url, chunk_index) and optionally carrying an embedding.

Dependencies: pydantic
System role: Data structure for document chunks in ingestion pipeline
"""

from datetime import datetime

from pydantic import BaseModel, Field

# US Letter in PDF points
DEFAULT_PAGE_WIDTH = 612.0
DEFAULT_PAGE_HEIGHT = 792.0


class BoundingBox(BaseModel):
    """Rectangle locating a chunk on its page, in PDF points."""

    left: float = Field(default=0.0, ge=0)
    top: float = Field(default=0.0, ge=0)
    width: float = Field(default=DEFAULT_PAGE_WIDTH, ge=0)
    height: float = Field(default=DEFAULT_PAGE_HEIGHT, ge=0)

    @classmethod
    def full_page(cls) -> "BoundingBox":
        """Box covering a whole US Letter page."""
        return cls()


class ChunkMetadata(BaseModel):
    """Heuristic labels and provenance timestamps for a chunk."""

    section: str | None = Field(default=None, description="Best-effort section heading")
    table_detected: bool = Field(default=False, description="Content looks tabular")
    document_title: str | None = Field(default=None, description="Title of the source record")
    attachment_type: str | None = Field(default=None, description="Classified attachment kind")
    discovered_at: datetime | None = None
    parsed_at: datetime | None = None
    embedded_at: datetime | None = None


class Chunk(BaseModel):
    """Positioned document chunk with optional embedding vector."""

    text: str = Field(description="Cleaned chunk text")
    page_number: int = Field(default=1, ge=1, description="1-based page number")
    bbox: BoundingBox = Field(default_factory=BoundingBox)
    chunk_index: int = Field(ge=0, description="Position within the source document")
    file_number: str = Field(default="", description="Legislative case identifier")
    source_url: str = Field(default="", description="URL the PDF was fetched from")
    metadata: ChunkMetadata = Field(default_factory=ChunkMetadata)
    embedding: list[float] | None = Field(default=None, description="Embedding vector")

    @property
    def group_key(self) -> tuple[str, str]:
        """(file_number, source_url) pair chunks are batched by for embedding."""
        return (self.file_number, self.source_url)
