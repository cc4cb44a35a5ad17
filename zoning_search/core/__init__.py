"""
Core business logic module.

Contains the exception hierarchy, embedding quantization, similarity
scoring, query enrichment and the document processing pipeline.
"""

from zoning_search.core.exceptions import (
    ConfigurationError,
    DiscoveryError,
    EmbeddingError,
    ExtractionError,
    InvalidTransitionError,
    UpstreamServiceError,
    ValidationError,
    VectorStoreError,
    ZoningSearchException,
)

__all__ = [
    "ConfigurationError",
    "DiscoveryError",
    "EmbeddingError",
    "ExtractionError",
    "InvalidTransitionError",
    "UpstreamServiceError",
    "ValidationError",
    "VectorStoreError",
    "ZoningSearchException",
]
