"""
Observability module.

Provides structured logging configuration, correlation ID tracking
and request logging middleware.
"""

from zoning_search.observability.correlation import get_correlation_id, set_correlation_id
from zoning_search.observability.logger import configure_logging

__all__ = ["configure_logging", "get_correlation_id", "set_correlation_id"]
