"""Search and autocomplete endpoints."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from fastapi import APIRouter, HTTPException, Query, Request, status

from inventory_search.query import QueryParseError
from inventory_search.search.schemas import SearchHit

if TYPE_CHECKING:
    from inventory_search.config import Settings
    from inventory_search.query import QueryBuilder
    from inventory_search.search import SearchIndex, SuggestService

logger = structlog.get_logger()

router = APIRouter(prefix="/search", tags=["search"])


@router.get(
    "",
    response_model=list[SearchHit],
    response_model_exclude_none=True,
    summary="Search the inventory",
    description="Free-text or structured search across all entity types, ranked by BM25.",
)
async def search(
    request: Request,
    q: str | None = Query(default=None, max_length=500, description="Search input"),
    type: str | None = Query(default=None, max_length=64, description="Entity type filter"),
    raw: bool | None = Query(
        default=None,
        description="Force (true) or disable (false) structured query parsing",
    ),
) -> list[SearchHit]:
    """Search indexed inventory records.

    Args:
        request: FastAPI request (provides access to app state).
        q: Free text or structured query such as ``type:site zone*``.
        type: Optional entity type, e.g. ``serviceContract``.
        raw: Structured parsing override; detected from ``q`` when omitted.

    Returns:
        Ranked hits; empty when both ``q`` and ``type`` are blank.

    Raises:
        HTTPException: 400 if the structured query is invalid.
    """
    if not (q or "").strip() and not (type or "").strip():
        return []

    builder: QueryBuilder = request.app.state.query_builder
    search_index: SearchIndex = request.app.state.search_index

    try:
        query = builder.build(q, type_filter=type, structured=raw)
    except QueryParseError as e:
        logger.info("search_query_invalid", query=e.query, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid query: {e}",
        ) from e

    return await asyncio.to_thread(search_index.search, query)


@router.get(
    "/suggest",
    response_model=list[str],
    summary="Autocomplete search terms",
)
async def suggest(
    request: Request,
    q: str | None = Query(default=None, max_length=100, description="Typed prefix"),
    max_results: int | None = Query(default=None, alias="max", description="Maximum suggestions"),
) -> list[str]:
    """Suggest indexed terms for a typed prefix.

    Args:
        request: FastAPI request (provides access to app state).
        q: Prefix typed so far; at least two characters.
        max_results: Requested number of suggestions (``max`` parameter),
            clamped to the configured range.

    Returns:
        Matching terms in dictionary order.
    """
    settings: Settings = request.app.state.settings
    suggest_service: SuggestService = request.app.state.suggest_service

    limit = settings.suggest_default_limit if max_results is None else max_results
    limit = max(1, min(settings.suggest_max_limit, limit))

    return await asyncio.to_thread(suggest_service.suggest, q, limit)
