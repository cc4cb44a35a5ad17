"""
Voyage AI embeddings client.

Dependencies: requests, tenacity, pydantic, zoning_search.core.query_enrichment
System role: Embedding collaborator (texts -> vectors)
"""

import logging
from typing import Literal

import requests
from pydantic import BaseModel, Field

from zoning_search.configs import require_api_key
from zoning_search.core.exceptions import EmbeddingError, ValidationError
from zoning_search.core.query_enrichment import enhance_query

from .base_client import BaseServiceClient

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 128

InputType = Literal["document", "query"]


class EmbeddingResponse(BaseModel):
    """Vectors for one request, aligned with the input order."""

    vectors: list[list[float] | None] = Field(
        default_factory=list,
        description="Vector per input text; None where the provider returned none",
    )
    total_tokens: int = 0
    model: str = ""


class VoyageEmbeddingClient(BaseServiceClient):
    """Embed document and query text with a Voyage model."""

    service_name = "voyage"
    error_cls = EmbeddingError

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.voyageai.com/v1/embeddings",
        model: str = "voyage-law-2",
        dimensions: int | None = None,
        timeout_seconds: float = 60.0,
        max_retries: int = 3,
        retry_base_delay_seconds: float = 1.0,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(timeout_seconds, max_retries, retry_base_delay_seconds, session)
        self._api_key = require_api_key(api_key, "VOYAGE_API_KEY")
        self._api_url = api_url
        self._model = model
        self._dimensions = dimensions

    @property
    def model(self) -> str:
        return self._model

    def embed(self, texts: list[str], input_type: InputType = "document") -> EmbeddingResponse:
        """
        Embed up to MAX_BATCH_SIZE texts in one request.

        Results are placed by the provider's ``index`` field, not by
        response order. Vectors whose length differs from the configured
        dimensions are discarded and come back as None.

        Raises:
            ValidationError: When more than MAX_BATCH_SIZE texts are passed
            EmbeddingError: On HTTP failure after retries or a malformed payload
        """
        if not texts:
            return EmbeddingResponse(model=self._model)
        if len(texts) > MAX_BATCH_SIZE:
            raise ValidationError(
                f"At most {MAX_BATCH_SIZE} texts can be embedded per request",
                field="texts",
                details={"count": len(texts)},
            )

        payload = self._request_json(
            "POST",
            self._api_url,
            "embed",
            json={"input": texts, "model": self._model, "input_type": input_type},
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
        )
        if not isinstance(payload, dict):
            raise EmbeddingError("voyage returned an unexpected payload type", service=self.service_name)

        try:
            return self._decode(payload, len(texts))
        except (TypeError, ValueError, AttributeError) as e:
            raise EmbeddingError(
                f"voyage returned a malformed embedding payload: {e}",
                service=self.service_name,
            ) from e

    def _decode(self, payload: dict, count: int) -> EmbeddingResponse:
        vectors: list[list[float] | None] = [None] * count
        for item in payload.get("data") or []:
            index = item.get("index") if isinstance(item, dict) else None
            embedding = item.get("embedding") if isinstance(item, dict) else None
            if not (isinstance(index, int) and 0 <= index < count and embedding):
                continue
            if self._dimensions and len(embedding) != self._dimensions:
                logger.warning(
                    f"{__name__}:embed - Discarding {len(embedding)}-d vector, expected {self._dimensions}",
                    extra={"index": index, "model": self._model},
                )
                continue
            vectors[index] = [float(value) for value in embedding]

        usage = payload.get("usage") or {}
        return EmbeddingResponse(
            vectors=vectors,
            total_tokens=int(usage.get("total_tokens") or 0),
            model=payload.get("model") or self._model,
        )

    def embed_query(self, query: str) -> list[float]:
        """
        Embed a search query after zoning vocabulary expansion.

        Raises:
            EmbeddingError: When the provider returns no vector
        """
        response = self.embed([enhance_query(query)], input_type="query")
        vector = response.vectors[0] if response.vectors else None
        if not vector:
            raise EmbeddingError("voyage returned no vector for the query", service=self.service_name)
        return vector
