"""
Common response models and utilities.

The response envelope shared by every orchestration action.

Dependencies: pydantic
System role: Common API response structures
"""

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ResponseMetadata(BaseModel):
    """Timing attached to every response."""

    processing_time_ms: float = Field(description="Server-side handling time")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class APIResponse(BaseModel, Generic[T]):
    """Envelope: success flag, optional data, optional error, metadata."""

    success: bool = True
    data: T | None = None
    error: str | None = Field(default=None, description="Error message when success is false")
    metadata: ResponseMetadata

