"""
Pipeline job state model.

Tracks one run through discover -> parse -> embed -> upsert. Status only
moves forward; counters only grow; a terminal job carries completed_at.

Dependencies: pydantic, zoning_search.core.exceptions
System role: Run state returned to pipeline callers
"""

import random
import string
import time
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field

from zoning_search.core.exceptions import InvalidTransitionError, ValidationError

from .discovery import DiscoveredPdf

_JOB_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_job_id() -> str:
    """Build an id of the form job_<epoch millis>_<7 random base36 chars>."""
    suffix = "".join(random.choices(_JOB_ID_ALPHABET, k=7))
    return f"job_{int(time.time() * 1000)}_{suffix}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PipelineStatus(str, Enum):
    """Pipeline run lifecycle."""

    PENDING = "pending"
    DISCOVERING = "discovering"
    PARSING = "parsing"
    EMBEDDING = "embedding"
    UPSERTING = "upserting"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset({PipelineStatus.COMPLETED, PipelineStatus.FAILED})

_ALLOWED_TRANSITIONS: dict[PipelineStatus, frozenset[PipelineStatus]] = {
    # PARSING directly from PENDING is the single-document path (no discovery)
    PipelineStatus.PENDING: frozenset(
        {PipelineStatus.DISCOVERING, PipelineStatus.PARSING, PipelineStatus.FAILED}
    ),
    PipelineStatus.DISCOVERING: frozenset(
        {PipelineStatus.PARSING, PipelineStatus.COMPLETED, PipelineStatus.FAILED}
    ),
    PipelineStatus.PARSING: frozenset(
        {PipelineStatus.EMBEDDING, PipelineStatus.COMPLETED, PipelineStatus.FAILED}
    ),
    PipelineStatus.EMBEDDING: frozenset({PipelineStatus.UPSERTING, PipelineStatus.FAILED}),
    PipelineStatus.UPSERTING: frozenset({PipelineStatus.COMPLETED, PipelineStatus.FAILED}),
    PipelineStatus.COMPLETED: frozenset(),
    PipelineStatus.FAILED: frozenset(),
}


class PipelineJob(BaseModel):
    """State of one pipeline run."""

    job_id: str = Field(default_factory=generate_job_id)
    status: PipelineStatus = PipelineStatus.PENDING
    file_numbers: list[str] = Field(default_factory=list, description="Requested case identifiers")
    discovered: list[DiscoveredPdf] = Field(default_factory=list)
    discovered_pdfs: int = Field(default=0, ge=0)
    parsed_chunks: int = Field(default=0, ge=0)
    embedded_chunks: int = Field(default=0, ge=0)
    upserted_chunks: int = Field(default=0, ge=0)
    failed_documents: list[str] = Field(
        default_factory=list,
        description="Source URLs whose extraction failed and were skipped",
    )
    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime | None = None
    error: str | None = None
    message: str | None = Field(default=None, description="Human-readable outcome summary")

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition_to(self, target: PipelineStatus) -> None:
        """
        Move to the next lifecycle state.

        Raises:
            InvalidTransitionError: When target is not reachable from the current state
        """
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(self.status.value, target.value)
        self.status = target
        if target in TERMINAL_STATUSES:
            self.completed_at = _utcnow()

    def complete(self) -> None:
        self.transition_to(PipelineStatus.COMPLETED)

    def fail(self, error: str) -> None:
        """Record the error and move to FAILED."""
        self.error = error
        self.transition_to(PipelineStatus.FAILED)

    def record_discovered(self, documents: list[DiscoveredPdf]) -> None:
        self.discovered.extend(documents)
        self.discovered_pdfs += len(documents)

    def add_parsed(self, count: int) -> None:
        self.parsed_chunks += _non_negative(count, "parsed_chunks")

    def add_embedded(self, count: int) -> None:
        self.embedded_chunks += _non_negative(count, "embedded_chunks")

    def add_upserted(self, count: int) -> None:
        self.upserted_chunks += _non_negative(count, "upserted_chunks")


def _non_negative(count: int, field: str) -> int:
    if count < 0:
        raise ValidationError("Pipeline counters cannot decrease", field=field)
    return count
