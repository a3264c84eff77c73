"""Indexing pipeline and rebuild scheduler tests."""

import asyncio

import pytest

from inventory_search.inventory import (
    City,
    EntityType,
    InMemoryRepository,
    InventoryRecord,
    Repository,
)
from inventory_search.query import QueryBuilder
from inventory_search.search import IndexProgress, SearchIndex
from inventory_search.sync import IndexAction, IndexEvent, IndexingPipeline, run_reindex_scheduler

builder = QueryBuilder()


def test_events_are_applied_in_order(search_index: SearchIndex) -> None:
    async def scenario() -> IndexingPipeline:
        pipeline = IndexingPipeline(search_index, {}, queue_size=10)
        pipeline.start()
        await pipeline.submit(IndexEvent.upsert(City(city_id="VIE", city_name="Vienna")))
        await pipeline.submit(IndexEvent.upsert(City(city_id="VIE", city_name="Wien")))
        await pipeline.submit(IndexEvent.upsert(City(city_id="GRZ", city_name="Graz")))
        await pipeline.submit(IndexEvent.delete("GRZ", EntityType.CITY))
        await pipeline.stop(timeout=5)
        return pipeline

    pipeline = asyncio.run(scenario())

    assert pipeline.processed == 4
    assert pipeline.failed == 0
    assert [hit.text for hit in search_index.search(builder.build(""))] == ["Wien"]


def test_failing_event_is_dropped(search_index: SearchIndex) -> None:
    async def scenario() -> IndexingPipeline:
        pipeline = IndexingPipeline(search_index, {}, queue_size=10)
        pipeline.start()
        await pipeline.submit(
            IndexEvent(
                action=IndexAction.UPSERT,
                entity_type=EntityType.SITE,
                record={"site_name": "no id"},
            )
        )
        await pipeline.submit(IndexEvent.upsert(City(city_id="VIE", city_name="Vienna")))
        await pipeline.join()
        await pipeline.stop(timeout=5)
        return pipeline

    pipeline = asyncio.run(scenario())

    assert pipeline.failed == 1
    assert pipeline.processed == 1
    assert search_index.count() == 1


def test_reindex_event_rebuilds_from_repositories(
    search_index: SearchIndex, progress: IndexProgress
) -> None:
    repositories: dict[EntityType, Repository[InventoryRecord]] = {
        EntityType.CITY: InMemoryRepository([City(city_id="VIE", city_name="Vienna")]),
    }

    async def scenario() -> None:
        pipeline = IndexingPipeline(search_index, repositories, queue_size=10)
        pipeline.start()
        await pipeline.submit(IndexEvent.reindex("test"))
        await pipeline.stop(timeout=5)

    asyncio.run(scenario())

    assert search_index.count() == 1
    assert progress.status().done == {"City": 1}


def test_submit_blocks_when_queue_is_full(search_index: SearchIndex) -> None:
    async def scenario() -> IndexingPipeline:
        pipeline = IndexingPipeline(search_index, {}, queue_size=1)
        await pipeline.submit(IndexEvent.reindex("first"))
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(pipeline.submit(IndexEvent.reindex("second")), timeout=0.05)
        return pipeline

    pipeline = asyncio.run(scenario())
    assert pipeline.pending == 1


def test_stop_without_start_is_noop(search_index: SearchIndex) -> None:
    async def scenario() -> None:
        pipeline = IndexingPipeline(search_index, {})
        await pipeline.stop(timeout=1)
        assert pipeline.is_running is False

    asyncio.run(scenario())


def test_delete_event_requires_record_id() -> None:
    with pytest.raises(ValueError):
        IndexEvent(action=IndexAction.DELETE, record_id=" ")


def test_upsert_event_requires_payload() -> None:
    with pytest.raises(ValueError):
        IndexEvent(action=IndexAction.UPSERT, entity_type=EntityType.CITY)


def test_scheduler_queues_rebuilds(search_index: SearchIndex) -> None:
    async def scenario() -> IndexingPipeline:
        pipeline = IndexingPipeline(search_index, {}, queue_size=10)
        task = asyncio.create_task(run_reindex_scheduler(pipeline, 0.01))
        await asyncio.sleep(0.1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return pipeline

    pipeline = asyncio.run(scenario())
    assert pipeline.pending >= 1


def test_disabled_scheduler_returns_immediately(search_index: SearchIndex) -> None:
    async def scenario() -> int:
        pipeline = IndexingPipeline(search_index, {})
        await asyncio.wait_for(run_reindex_scheduler(pipeline, 0), timeout=1)
        return pipeline.pending

    assert asyncio.run(scenario()) == 0
