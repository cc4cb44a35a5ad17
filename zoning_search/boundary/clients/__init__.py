"""
External service clients: Legistar discovery, Reducto extraction, Voyage embeddings.
"""

from .base_client import BaseServiceClient, is_retryable
from .legistar_client import LegistarDiscoveryClient, classify_attachment
from .reducto_client import ReductoExtractionClient
from .voyage_client import EmbeddingResponse, VoyageEmbeddingClient

__all__ = [
    "BaseServiceClient",
    "EmbeddingResponse",
    "LegistarDiscoveryClient",
    "ReductoExtractionClient",
    "VoyageEmbeddingClient",
    "classify_attachment",
    "is_retryable",
]
