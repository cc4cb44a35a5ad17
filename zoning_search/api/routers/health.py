"""
Health check API endpoints.

Routes: GET /health, GET /health/store

Dependencies: zoning_search.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from zoning_search.api.deps import get_store_connection
from zoning_search.boundary.db import StoreConnection

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/store", response_model=HealthResponse)
async def health_check_store(
    connection: StoreConnection = Depends(get_store_connection),
):
    """Chunk store connectivity check; 503 when the database is unreachable."""
    try:
        await run_in_threadpool(connection.ping)
    except SQLAlchemyError as e:
        logger.warning(f"{__name__}:health_check_store - Store unreachable: {e}")
        return JSONResponse(
            status_code=503,
            content=HealthResponse(status="unhealthy", message="Chunk store unreachable").model_dump(),
        )
    return HealthResponse(status="healthy", message="Chunk store connection OK")
