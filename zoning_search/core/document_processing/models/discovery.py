"""
Discovered document model.

Dependencies: pydantic
System role: Output of legislative record discovery, input to extraction
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class DiscoveredPdf(BaseModel):
    """A PDF attachment found on a legislative matter."""

    url: str = Field(description="Direct link to the PDF attachment")
    title: str = Field(default="", description="Attachment display name")
    file_number: str = Field(description="Case identifier of the owning matter")
    attachment_type: str = Field(default="Attachment", description="Classified document kind")
    discovered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Matter details (matter_id, matter_title, matter_type, matter_status, intro_date, body_name)",
    )
