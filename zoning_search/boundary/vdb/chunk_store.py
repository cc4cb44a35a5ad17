"""
Chunk store backed by SQLAlchemy.

Idempotent bulk upsert keyed on (source_url, chunk_index), and
brute-force cosine search over a capped candidate scan. Embeddings are
int8-quantized on write and scored as stored.

Dependencies: sqlalchemy, zoning_search.core (quantizer, retriever)
System role: Vector storage and retrieval
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zoning_search.boundary.db.base import utcnow
from zoning_search.boundary.db.connection import StoreConnection
from zoning_search.boundary.db.models import ChunkModel
from zoning_search.boundary.vdb.vector_schemas import SearchResult, UpsertResult
from zoning_search.core.document_processing.models import BoundingBox, Chunk, ChunkMetadata
from zoning_search.core.exceptions import ValidationError, VectorStoreError
from zoning_search.core.quantizer import quantize_embedding
from zoning_search.core.retriever import Retriever
from zoning_search.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}

# Columns overwritten when the (source_url, chunk_index) key already exists
_UPDATABLE_COLUMNS = (
    "file_number",
    "text",
    "page_number",
    "bbox",
    "embedding",
    "embedding_dimensions",
    "chunk_metadata",
    "updated_at",
)


def _dedupe_last(chunks: Iterable[Chunk]) -> list[Chunk]:
    latest: dict[tuple[str, int], Chunk] = {}
    for chunk in chunks:
        key = (chunk.source_url, chunk.chunk_index)
        latest.pop(key, None)
        latest[key] = chunk
    return list(latest.values())


def _to_chunk(row: ChunkModel) -> Chunk:
    return Chunk(
        text=row.text,
        page_number=row.page_number,
        bbox=BoundingBox.model_validate(row.bbox or {}),
        chunk_index=row.chunk_index,
        file_number=row.file_number,
        source_url=row.source_url,
        metadata=ChunkMetadata.model_validate(row.chunk_metadata or {}),
    )


class ChunkStore:
    """Persist embedded chunks and search them by cosine similarity."""

    def __init__(
        self,
        connection: StoreConnection,
        upsert_batch_size: int = 100,
        candidate_cap: int = 500,
        retriever: Retriever | None = None,
    ) -> None:
        self._connection = connection
        self._batch_size = max(1, upsert_batch_size)
        self._candidate_cap = max(1, candidate_cap)
        self._retriever = retriever or Retriever()

    def upsert(
        self,
        documents: Sequence[Chunk],
        on_batch: Callable[[UpsertResult], None] | None = None,
    ) -> UpsertResult:
        """
        Insert or overwrite chunks keyed on (source_url, chunk_index).

        Re-running with the same input leaves one record per key and
        reports every key as modified. Chunks without an embedding are
        skipped; duplicate keys keep the last occurrence.

        Args:
            documents: Embedded chunks
            on_batch: Called with each committed batch's counts

        Returns:
            UpsertResult: Inserted and modified totals

        Raises:
            VectorStoreError: When a batch cannot be written; earlier batches stay committed
        """
        embedded = [doc for doc in documents if doc.embedding]
        skipped = len(documents) - len(embedded)
        if skipped:
            logger.warning(f"{__name__}:upsert - Skipping {skipped} chunks without embeddings")

        items = _dedupe_last(embedded)
        total = UpsertResult()
        if not items:
            return total

        insert = self._insert_for_dialect()
        for start in range(0, len(items), self._batch_size):
            batch = items[start : start + self._batch_size]
            try:
                rows = [self._to_row(chunk) for chunk in batch]
                with self._connection.session() as session:
                    existing = self._existing_keys(session, batch)
                    stmt = insert(ChunkModel.__table__).values(rows)
                    stmt = stmt.on_conflict_do_update(
                        index_elements=["source_url", "chunk_index"],
                        set_={name: stmt.excluded[name] for name in _UPDATABLE_COLUMNS},
                    )
                    session.execute(stmt)
            except (SQLAlchemyError, ValueError) as e:
                raise VectorStoreError(
                    f"Failed to upsert chunk batch: {e}",
                    operation="upsert",
                    details={"batch_start": start, "batch_size": len(batch)},
                ) from e

            batch_result = UpsertResult(
                inserted_count=len(batch) - len(existing),
                modified_count=len(existing),
            )
            total = total + batch_result
            if on_batch is not None:
                on_batch(batch_result)

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:upsert - Upserted {total.total} chunks",
            inserted=total.inserted_count,
            modified=total.modified_count,
            skipped=skipped,
        )
        return total

    def search(
        self,
        query_vector: Sequence[float],
        file_numbers: Iterable[str] | None = None,
        limit: int = 10,
        min_score: float = 0.7,
    ) -> list[SearchResult]:
        """
        Rank stored chunks against a query vector.

        Scans at most candidate_cap embedded records in storage order,
        optionally restricted to the given case identifiers.

        Raises:
            ValidationError: When limit is below 1
            VectorStoreError: When the candidate query fails
        """
        if limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")

        stmt = select(ChunkModel).where(ChunkModel.embedding.is_not(None))
        wanted = [number for number in file_numbers or [] if number]
        if wanted:
            stmt = stmt.where(ChunkModel.file_number.in_(wanted))
        stmt = stmt.order_by(ChunkModel.id).limit(self._candidate_cap)

        try:
            with self._connection.session() as session:
                rows = list(session.scalars(stmt).all())
        except SQLAlchemyError as e:
            raise VectorStoreError(f"Chunk search failed: {e}", operation="search") from e

        ranked = self._retriever.rank(
            query_vector,
            [(row, row.embedding or []) for row in rows],
            limit=limit,
            min_score=min_score,
        )
        logger.info(
            f"{__name__}:search - {len(ranked)} of {len(rows)} candidates above {min_score}",
            extra={"file_numbers": wanted},
        )
        return [
            SearchResult(
                document=_to_chunk(row),
                score=score,
                embedding_dimensions=row.embedding_dimensions,
            )
            for row, score in ranked
        ]

    def count_by_file_number(self, file_number: str) -> int:
        """Number of stored chunks for a case identifier."""
        stmt = select(func.count()).select_from(ChunkModel).where(ChunkModel.file_number == file_number)
        try:
            with self._connection.session() as session:
                return int(session.scalar(stmt) or 0)
        except SQLAlchemyError as e:
            raise VectorStoreError(f"Chunk count failed: {e}", operation="count") from e

    def _insert_for_dialect(self) -> Callable[..., Any]:
        dialect = self._connection.dialect_name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise VectorStoreError(
                f"Upsert is not supported on the {dialect} dialect",
                operation="upsert",
                details={"supported": sorted(_UPSERT_DIALECTS)},
            )
        return insert

    @staticmethod
    def _existing_keys(session: Session, batch: list[Chunk]) -> set[tuple[str, int]]:
        keys = {(chunk.source_url, chunk.chunk_index) for chunk in batch}
        stmt = select(ChunkModel.source_url, ChunkModel.chunk_index).where(
            ChunkModel.source_url.in_(sorted({url for url, _ in keys})),
            ChunkModel.chunk_index.in_(sorted({index for _, index in keys})),
        )
        found = {(row.source_url, row.chunk_index) for row in session.execute(stmt)}
        return found & keys

    @staticmethod
    def _to_row(chunk: Chunk) -> dict[str, Any]:
        now = utcnow()
        embedding = chunk.embedding or []
        metadata = chunk.metadata.model_copy(update={"embedded_at": now})
        return {
            "source_url": chunk.source_url,
            "chunk_index": chunk.chunk_index,
            "file_number": chunk.file_number,
            "text": chunk.text,
            "page_number": chunk.page_number,
            "bbox": chunk.bbox.model_dump(),
            "embedding": quantize_embedding(embedding),
            "embedding_dimensions": len(embedding),
            "chunk_metadata": metadata.model_dump(mode="json"),
            "created_at": now,
            "updated_at": now,
        }
