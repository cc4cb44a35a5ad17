"""
Reducto layout-aware PDF extraction client.

Dependencies: requests, tenacity, zoning_search.configs
System role: Extraction collaborator (PDF URL -> raw parse payload)
"""

import logging
from typing import Any

import requests

from zoning_search.configs import require_api_key
from zoning_search.core.exceptions import ExtractionError

from .base_client import BaseServiceClient

logger = logging.getLogger(__name__)


class ReductoExtractionClient(BaseServiceClient):
    """Submit a PDF URL for parsing and return the raw JSON response."""

    service_name = "reducto"
    error_cls = ExtractionError

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://platform.reducto.ai/parse",
        timeout_seconds: float = 300.0,
        max_retries: int = 3,
        retry_base_delay_seconds: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        """
        Raises:
            ConfigurationError: When api_key is empty
        """
        super().__init__(timeout_seconds, max_retries, retry_base_delay_seconds, session)
        self._api_key = require_api_key(api_key, "REDUCTO_API_KEY")
        self._api_url = api_url

    def parse(self, document_url: str) -> dict[str, Any]:
        """
        Parse a remote PDF.

        Returns:
            dict: Raw parse response, in any of the shapes the normalizer accepts

        Raises:
            ExtractionError: On HTTP failure after retries, or a payload-level error
        """
        logger.info(f"{__name__}:parse - Parsing {document_url}")
        payload = self._request_json(
            "POST",
            self._api_url,
            "parse",
            json={"document_url": document_url},
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
        )

        if not isinstance(payload, dict):
            raise ExtractionError(
                "reducto returned an unexpected payload type",
                service=self.service_name,
                details={"source_url": document_url, "payload_type": type(payload).__name__},
            )
        if payload.get("error"):
            raise ExtractionError(
                f"reducto parse failed: {payload['error']}",
                service=self.service_name,
                details={"source_url": document_url},
            )
        return payload
