"""
Document parsing task.

Sends one discovered PDF to the extraction service and normalizes the
response into positioned chunks.

Dependencies: zoning_search.boundary.clients, normalizing_task
System role: Parse stage of the ingestion pipeline
"""

import logging
from datetime import datetime, timezone

from zoning_search.boundary.clients import ReductoExtractionClient

from ..models import DiscoveredPdf, ExtractionResult
from .normalizing_task import NormalizingTask

logger = logging.getLogger(__name__)


class ParsingTask:
    """Parse remote PDFs into chunks."""

    def __init__(
        self,
        client: ReductoExtractionClient,
        normalizer: NormalizingTask | None = None,
    ) -> None:
        self._client = client
        self._normalizer = normalizer or NormalizingTask()

    def parse(self, document: DiscoveredPdf) -> ExtractionResult:
        """
        Extract and normalize one document.

        Raises:
            ExtractionError: When the extraction service fails after retries
        """
        payload = self._client.parse(document.url)
        result = self._normalizer.normalize(
            payload, document, parsed_at=datetime.now(timezone.utc)
        )
        logger.info(
            f"{__name__}:parse - Extracted {len(result.chunks)} chunks from {result.total_pages} pages",
            extra={"source_url": document.url, "file_number": document.file_number},
        )
        return result
