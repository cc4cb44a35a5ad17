"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: zoning_search.configs, zoning_search.boundary, zoning_search.core
System role: DI container for service injection
"""

import logging

from zoning_search.boundary.db import StoreConnection
from zoning_search.configs import get_settings
from zoning_search.core.document_processing.entrypoint import PipelineOrchestrator

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for long-lived service instances, owned by the app lifespan."""

    def __init__(self) -> None:
        self._connection: StoreConnection | None = None
        self._orchestrator: PipelineOrchestrator | None = None

    @property
    def connection(self) -> StoreConnection:
        """Get cached store connection."""
        if self._connection is None:
            self._connection = StoreConnection(get_settings().database)
        return self._connection

    @property
    def orchestrator(self) -> PipelineOrchestrator:
        """Get cached pipeline orchestrator sharing the store connection."""
        if self._orchestrator is None:
            self._orchestrator = PipelineOrchestrator(
                get_settings(), connection=self.connection
            )
        return self._orchestrator

    def clear(self) -> None:
        """Close HTTP sessions, dispose the engine and drop cached instances."""
        if self._orchestrator is not None:
            self._orchestrator.close()
        elif self._connection is not None:
            self._connection.dispose()
        self._orchestrator = None
        self._connection = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_orchestrator() -> PipelineOrchestrator:
    """Get the shared pipeline orchestrator."""
    return get_service_cache().orchestrator


def get_store_connection() -> StoreConnection:
    """Get the shared store connection."""
    return get_service_cache().connection
