"""
Document chunk ORM model.

One row per (source_url, chunk_index). Embeddings are stored as int8
value lists in a JSON column so the same schema runs on SQLite and
PostgreSQL.

Dependencies: sqlalchemy, zoning_search.boundary.db.base
System role: Chunk persistence for retrieval
"""

from typing import Any

from sqlalchemy import JSON, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from zoning_search.boundary.db.base import Base, TimestampMixin


class ChunkModel(Base, TimestampMixin):
    """
    Stored document chunk.

    Attributes:
        id: Autoincrement key; also the stable scan order for search
        source_url: PDF the chunk came from (part of the natural key)
        chunk_index: Position within the PDF (part of the natural key)
        file_number: Legislative case identifier, indexed for filtering
        text: Cleaned chunk text
        page_number: 1-based page
        bbox: {left, top, width, height} in PDF points
        embedding: Quantized int8 values, NULL until embedded
        embedding_dimensions: Length of the original float vector
        chunk_metadata: Section/table labels and provenance timestamps
    """

    __tablename__ = "document_chunks"
    __table_args__ = (
        UniqueConstraint("source_url", "chunk_index", name="uq_document_chunks_source_chunk"),
        Index("ix_document_chunks_file_number", "file_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    file_number: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    text: Mapped[str] = mapped_column(Text, nullable=False)
    page_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bbox: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    embedding: Mapped[list[int] | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    embedding_dimensions: Mapped[int | None] = mapped_column(Integer, nullable=True)
    chunk_metadata: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return (
            f"<ChunkModel(id={self.id}, file_number={self.file_number!r}, "
            f"source_url={self.source_url!r}, chunk_index={self.chunk_index})>"
        )
