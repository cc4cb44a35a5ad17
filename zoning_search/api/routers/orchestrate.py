"""
Orchestration API endpoint.

Routes: POST /orchestrate

Single action dispatch: ``run_pipeline`` runs the ingestion pipeline
synchronously and returns the terminal job; ``search`` embeds a query
and returns ranked chunks. Every response uses the APIResponse
envelope; failures return 500 (400 for bad input) with the error set.

Dependencies: fastapi, zoning_search.core.document_processing
System role: Orchestration HTTP API
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from zoning_search.api.deps import get_orchestrator
from zoning_search.core.document_processing.entrypoint import PipelineOrchestrator
from zoning_search.core.document_processing.models import PipelineStatus
from zoning_search.core.exceptions import ValidationError, ZoningSearchException
from zoning_search.models.common import APIResponse, ResponseMetadata
from zoning_search.models.orchestrate import (
    OrchestrateAction,
    OrchestrateRequest,
    PipelineRunData,
    SearchData,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orchestrate", tags=["orchestrate"])


def envelope(
    start_time: float,
    data: PipelineRunData | SearchData | None = None,
    error: str | None = None,
    status_code: int | None = None,
) -> JSONResponse:
    """Wrap data or an error in the standard response envelope."""
    body = APIResponse(
        success=error is None,
        data=data,
        error=error,
        metadata=ResponseMetadata(
            processing_time_ms=round((time.perf_counter() - start_time) * 1000, 2)
        ),
    )
    if status_code is None:
        status_code = 200 if error is None else 500
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _parse_action(raw: str) -> OrchestrateAction:
    try:
        return OrchestrateAction((raw or "").strip().lower())
    except ValueError as e:
        raise ValidationError(f"Unknown action: {raw}", field="action") from e


@router.post("", response_model=APIResponse)
async def orchestrate(
    request: OrchestrateRequest,
    orchestrator: PipelineOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """
    Dispatch an orchestration action.

    Returns:
        JSONResponse: 200 with data on success; 400 for invalid input;
        500 for configuration, upstream or storage failures (a failed
        pipeline run still returns its job in data)
    """
    start_time = time.perf_counter()
    try:
        action = _parse_action(request.action)

        if action is OrchestrateAction.RUN_PIPELINE:
            job = await run_in_threadpool(
                orchestrator.run_pipeline,
                file_numbers=request.file_numbers,
                search_terms=request.search_terms,
                pdf_limit=request.pdf_limit,
            )
            data = PipelineRunData(job=job, message=job.message)
            if job.status is PipelineStatus.FAILED:
                return envelope(start_time, data=data, error=job.error or "Pipeline failed")
            return envelope(start_time, data=data)

        results = await run_in_threadpool(
            orchestrator.search,
            request.query or "",
            file_numbers=request.file_numbers,
            limit=request.limit,
            min_score=request.min_score,
        )
        return envelope(
            start_time,
            data=SearchData(
                search_results=results,
                total_found=len(results),
                message=f"Found {len(results)} results",
            ),
        )

    except ValidationError as e:
        logger.info(f"{__name__}:orchestrate - Rejected request: {e}")
        return envelope(start_time, error=e.message, status_code=400)
    except ZoningSearchException as e:
        logger.error(
            f"{__name__}:orchestrate - {type(e).__name__}: {e}",
            extra={"action": request.action},
        )
        return envelope(start_time, error=e.message)
    except Exception as e:
        logger.exception(f"{__name__}:orchestrate - Unexpected error", extra={"action": request.action})
        return envelope(start_time, error=str(e) or type(e).__name__)
