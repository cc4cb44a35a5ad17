"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, zoning_search.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from zoning_search.api.deps.dependencies import get_service_cache
from zoning_search.api.routers.orchestrate import envelope
from zoning_search.configs import get_settings
from zoning_search.observability import configure_logging
from zoning_search.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import health_router, orchestrate_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Creates the chunk table on startup; disposes the engine and closes
    HTTP sessions on shutdown.
    """
    cache = get_service_cache()
    logger.info("Pre-warming service cache...")
    cache.connection.create_tables()
    _ = cache.orchestrator
    logger.info("Service cache pre-warmed")

    yield

    cache.clear()
    logger.info("Service cache cleared")


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Answer malformed request bodies with the standard envelope."""
    errors = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return envelope(time.perf_counter(), error=f"Invalid request: {errors}", status_code=400)


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="SF Zoning Document Search API",
        description="Ingests San Francisco zoning and EIR PDFs and serves semantic search over them",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(orchestrate_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    uvicorn.run(
        "zoning_search.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
