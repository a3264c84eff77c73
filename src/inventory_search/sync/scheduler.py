"""Periodic full rebuilds of the search index."""

import asyncio

import structlog

from inventory_search.sync.pipeline import IndexingPipeline
from inventory_search.sync.types import IndexEvent

logger = structlog.get_logger()


async def run_reindex_scheduler(pipeline: IndexingPipeline, interval_seconds: float) -> None:
    """Queue a full rebuild every ``interval_seconds``.

    Runs as a long-lived asyncio task. Rebuilds go through the pipeline so
    they never overlap with incremental updates.

    Args:
        pipeline: Pipeline the rebuild events are submitted to.
        interval_seconds: Delay between rebuilds; 0 or less disables them.
    """
    if interval_seconds <= 0:
        logger.info("reindex_scheduler_disabled")
        return

    logger.info("reindex_scheduler_started", interval_seconds=interval_seconds)
    try:
        while True:
            await asyncio.sleep(interval_seconds)
            await pipeline.submit(IndexEvent.reindex("scheduled"))
    except asyncio.CancelledError:
        logger.info("reindex_scheduler_stopped")
        raise
