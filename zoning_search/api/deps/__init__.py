"""API dependencies."""

from .dependencies import (
    ServiceCache,
    get_orchestrator,
    get_service_cache,
    get_store_connection,
)

__all__ = [
    "ServiceCache",
    "get_orchestrator",
    "get_service_cache",
    "get_store_connection",
]
