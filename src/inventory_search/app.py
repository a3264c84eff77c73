"""FastAPI application factory and lifespan management."""

import asyncio
import contextlib
from collections.abc import AsyncGenerator, Mapping
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from inventory_search.config import Settings
from inventory_search.inventory import EntityType, InventoryRecord, Repository, load_repositories
from inventory_search.middleware.logging import RequestLoggingMiddleware
from inventory_search.query import QueryBuilder
from inventory_search.routes import health, index, search
from inventory_search.search import IndexProgress, SearchIndex, SuggestService
from inventory_search.sync import IndexEvent, IndexingPipeline, run_reindex_scheduler

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Opens the search index, starts the indexing pipeline and the periodic
    rebuild scheduler, and optionally queues a rebuild at startup. On
    shutdown the queue is drained (bounded by ``shutdown_timeout``) before
    the index is closed.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info("api_startup", host=settings.host, port=settings.port)

    repositories = app.state.repositories
    if repositories is None:
        repositories = load_repositories(settings.data_dir)

    progress = IndexProgress()
    search_index = SearchIndex(
        settings.index_path,
        progress=progress,
        max_hits=settings.search_max_hits,
    )
    search_index.initialize()
    logger.info("search_index_ready", document_count=search_index.count())

    pipeline = IndexingPipeline(
        search_index,
        repositories,
        queue_size=settings.sync_queue_size,
    )
    pipeline.start()

    app.state.progress = progress
    app.state.search_index = search_index
    app.state.suggest_service = SuggestService(search_index)
    app.state.query_builder = QueryBuilder()
    app.state.pipeline = pipeline

    if settings.reindex_on_startup:
        await pipeline.submit(IndexEvent.reindex("startup"))

    scheduler_task = asyncio.create_task(
        run_reindex_scheduler(pipeline, settings.reindex_interval_seconds)
    )

    try:
        yield
    finally:
        scheduler_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await scheduler_task

        await pipeline.stop(timeout=settings.shutdown_timeout)
        search_index.close()
        logger.info("api_shutdown")


def create_app(
    settings: Settings | None = None,
    repositories: Mapping[EntityType, Repository[InventoryRecord]] | None = None,
) -> FastAPI:
    """Factory function to create configured FastAPI application.

    Args:
        settings: Configuration instance. Creates default if None.
        repositories: Row sources for rebuilds. JSON exports under
            ``settings.data_dir`` are used if None.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Inventory Search API",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/v1/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/v1/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.repositories = repositories

    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(search.router, prefix="/api/v1")
    app.include_router(index.router, prefix="/api/v1")

    return app
