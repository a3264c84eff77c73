"""Index maintenance endpoints: rebuild progress, rebuilds and change events."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from fastapi import APIRouter, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from inventory_search.search.schemas import ProgressStatus
from inventory_search.sync.types import IndexAction, IndexEvent

if TYPE_CHECKING:
    from inventory_search.search import IndexProgress
    from inventory_search.sync import IndexingPipeline

logger = structlog.get_logger()

router = APIRouter(prefix="/index", tags=["index"])


class IndexEventRequest(BaseModel):
    """Change notification from the inventory.

    Attributes:
        action: upsert, delete or reindex.
        entity_type: Entity type of the affected row.
        record: Row payload for upserts.
        record_id: Row identifier for deletes.
        reason: Optional description of the change.
    """

    action: IndexAction
    entity_type: str | None = None
    record: dict[str, object] | None = None
    record_id: str | None = None
    reason: str | None = None


class QueuedResponse(BaseModel):
    """Acknowledgement for a queued index event.

    Attributes:
        event_id: Identifier of the queued event.
        action: Queued operation.
        pending: Events waiting in the queue after this one was added.
    """

    event_id: str
    action: IndexAction
    pending: int


@router.get("/progress", response_model=ProgressStatus)
async def progress(request: Request) -> ProgressStatus:
    """Current full rebuild progress.

    Returns:
        Progress snapshot; ``percent`` is 100 when no rebuild is running.
    """
    tracker: IndexProgress = request.app.state.progress
    return tracker.status()


@router.post(
    "/reindex",
    response_model=QueuedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def reindex(request: Request) -> QueuedResponse:
    """Queue a full rebuild of the index.

    Returns:
        Acknowledgement with the queued event id.
    """
    pipeline: IndexingPipeline = request.app.state.pipeline
    event = IndexEvent.reindex("api")
    await pipeline.submit(event)
    logger.info("reindex_requested", event_id=event.id)
    return QueuedResponse(event_id=event.id, action=event.action, pending=pipeline.pending)


@router.post(
    "/events",
    response_model=QueuedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_event(request: Request, body: IndexEventRequest) -> QueuedResponse:
    """Queue one inventory change for the index.

    Args:
        request: FastAPI request (provides access to app state).
        body: Change notification.

    Returns:
        Acknowledgement with the queued event id.

    Raises:
        RequestValidationError: 422 if the payload does not fit the action.
    """
    pipeline: IndexingPipeline = request.app.state.pipeline
    try:
        event = IndexEvent.model_validate(body.model_dump())
    except ValidationError as e:
        raise RequestValidationError(
            e.errors(include_url=False, include_context=False)
        ) from e
    await pipeline.submit(event)
    return QueuedResponse(event_id=event.id, action=event.action, pending=pipeline.pending)
