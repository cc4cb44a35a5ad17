"""
Embedding generation task using Voyage AI.

Groups chunks by (file_number, source_url), embeds each group in
batches of at most 128 texts, and attaches the vectors. A batch that
still fails after the client's retries is dropped and the run goes on.

Dependencies: pydantic, zoning_search.boundary.clients
System role: Embed stage of the ingestion pipeline
"""

import logging
import time
from collections.abc import Callable, Iterable

from pydantic import BaseModel, Field

from zoning_search.boundary.clients import VoyageEmbeddingClient
from zoning_search.boundary.clients.voyage_client import MAX_BATCH_SIZE
from zoning_search.core.exceptions import EmbeddingError, ValidationError

from ..models import Chunk

logger = logging.getLogger(__name__)


class EmbeddedGroup(BaseModel):
    """Embedded chunks of one (file_number, source_url) group."""

    file_number: str
    source_url: str
    chunks: list[Chunk] = Field(default_factory=list, description="Chunks that received a vector")
    dropped_chunks: int = Field(default=0, ge=0, description="Chunks whose batch failed")


class EmbeddingOutcome(BaseModel):
    """Result of embedding a set of chunks."""

    groups: list[EmbeddedGroup] = Field(default_factory=list)
    total_tokens: int = 0
    model: str = ""

    @property
    def chunks(self) -> list[Chunk]:
        return [chunk for group in self.groups for chunk in group.chunks]

    @property
    def dropped_chunks(self) -> int:
        return sum(group.dropped_chunks for group in self.groups)


def build_embedding_text(chunk: Chunk) -> str:
    """
    Prefix chunk text with its structural labels.

    e.g. "[Section: NOISE] [Page 12] [Contains tabular data] Ambient levels..."
    """
    parts = []
    if chunk.metadata.section:
        parts.append(f"[Section: {chunk.metadata.section}]")
    parts.append(f"[Page {chunk.page_number}]")
    if chunk.metadata.table_detected:
        parts.append("[Contains tabular data]")
    parts.append(chunk.text)
    return " ".join(parts)


def group_chunks(chunks: Iterable[Chunk]) -> dict[tuple[str, str], list[Chunk]]:
    """Group by (file_number, source_url), keeping first-seen group order."""
    groups: dict[tuple[str, str], list[Chunk]] = {}
    for chunk in chunks:
        groups.setdefault(chunk.group_key, []).append(chunk)
    return groups


class EmbeddingTask:
    """Batch chunks through the embedding client."""

    def __init__(
        self,
        client: VoyageEmbeddingClient,
        batch_size: int = MAX_BATCH_SIZE,
        batch_delay_seconds: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            client: Embedding client (retries live there)
            batch_size: Texts per request, 1..128
            batch_delay_seconds: Pause between consecutive requests
            sleep: Sleep function (replaced in tests)

        Raises:
            ValidationError: When batch_size is outside 1..128
        """
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValidationError(
                f"batch_size must be between 1 and {MAX_BATCH_SIZE}", field="batch_size"
            )
        self._client = client
        self._batch_size = batch_size
        self._batch_delay = batch_delay_seconds
        self._sleep = sleep

    def embed(
        self,
        chunks: list[Chunk],
        on_group: Callable[[EmbeddedGroup], None] | None = None,
    ) -> EmbeddingOutcome:
        """
        Embed chunks group by group.

        Args:
            chunks: Normalized chunks, any number of documents
            on_group: Called after each group, for incremental progress

        Returns:
            EmbeddingOutcome: Embedded chunks per group plus token usage
        """
        outcome = EmbeddingOutcome(model=self._client.model)
        requests_sent = 0

        for (file_number, source_url), members in group_chunks(chunks).items():
            group = EmbeddedGroup(file_number=file_number, source_url=source_url)

            for start in range(0, len(members), self._batch_size):
                batch = members[start : start + self._batch_size]
                if requests_sent and self._batch_delay > 0:
                    self._sleep(self._batch_delay)
                requests_sent += 1

                try:
                    response = self._client.embed(
                        [build_embedding_text(chunk) for chunk in batch], input_type="document"
                    )
                except EmbeddingError as e:
                    logger.warning(
                        f"{__name__}:embed - Dropping batch of {len(batch)} chunks: {e}",
                        extra={"file_number": file_number, "source_url": source_url},
                    )
                    group.dropped_chunks += len(batch)
                    continue

                outcome.total_tokens += response.total_tokens
                for chunk, vector in zip(batch, response.vectors):
                    if vector is None:
                        group.dropped_chunks += 1
                    else:
                        group.chunks.append(chunk.model_copy(update={"embedding": vector}))

            logger.info(
                f"{__name__}:embed - Embedded {len(group.chunks)}/{len(members)} chunks",
                extra={"file_number": file_number, "source_url": source_url},
            )
            outcome.groups.append(group)
            if on_group is not None:
                on_group(group)

        return outcome
