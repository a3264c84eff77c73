"""Health check endpoints for liveness and readiness probes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from inventory_search.search.index import IndexStorageError

if TYPE_CHECKING:
    from inventory_search.search import SearchIndex
    from inventory_search.sync import IndexingPipeline

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    """Response model for liveness probe.

    Attributes:
        status: Always 'alive' when process is running.
    """

    status: Literal["alive"]


class ReadinessCheck(BaseModel):
    """Individual dependency check result.

    Attributes:
        name: Identifier for the dependency being checked.
        status: Result of the check ('ok' or 'failed').
        message: Details, or the error when status is 'failed'.
    """

    name: str
    status: Literal["ok", "failed"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Response model for readiness probe.

    Attributes:
        status: Overall readiness ('ready' or 'not_ready').
        checks: List of individual dependency check results.
    """

    status: Literal["ready", "not_ready"]
    checks: list[ReadinessCheck]


def _check_index(search_index: SearchIndex) -> ReadinessCheck:
    """Verify the index database can be queried.

    Args:
        search_index: Active search index.

    Returns:
        Check result with the document count or the error.
    """
    name = f"index:{search_index.db_path}"
    if not search_index.db_path.exists():
        return ReadinessCheck(name=name, status="failed", message="Index database not found")
    try:
        documents = search_index.count()
    except IndexStorageError as e:
        return ReadinessCheck(name=name, status="failed", message=str(e))
    return ReadinessCheck(name=name, status="ok", message=f"{documents} documents")


def _check_pipeline(pipeline: IndexingPipeline) -> ReadinessCheck:
    if pipeline.is_running:
        return ReadinessCheck(name="indexing_pipeline", status="ok")
    return ReadinessCheck(
        name="indexing_pipeline",
        status="failed",
        message="Consumer task is not running",
    )


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe endpoint.

    Returns immediate success if the process is running.

    Returns:
        Liveness status response.
    """
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(request: Request) -> JSONResponse:
    """Readiness probe endpoint.

    Validates that the index database is queryable and the indexing
    pipeline is consuming events. Returns 200 if all checks pass, 503 if
    any fail.

    Returns:
        Readiness status with individual check results.
    """
    checks = [
        _check_index(request.app.state.search_index),
        _check_pipeline(request.app.state.pipeline),
    ]
    all_ok = all(c.status == "ok" for c in checks)
    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        checks=checks,
    )
    code = status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=code)
