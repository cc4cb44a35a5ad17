"""
Extraction result model.

Dependencies: pydantic
System role: Output of the parse stage for one document
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from .chunk import Chunk


class ExtractionResult(BaseModel):
    """Normalized chunks produced from one parsed PDF."""

    source_url: str
    file_number: str
    total_pages: int = Field(default=1, ge=1, description="Pages reported by the parser")
    chunks: list[Chunk] = Field(default_factory=list)
    parsed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def count_pages(chunks: list[Chunk], reported: object = None) -> int:
        """Reported page count when usable, else the highest chunk page, at least 1."""
        if isinstance(reported, int) and not isinstance(reported, bool) and reported >= 1:
            return reported
        return max((chunk.page_number for chunk in chunks), default=1)
