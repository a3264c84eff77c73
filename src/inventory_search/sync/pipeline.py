"""Single-writer pipeline that applies index events in submission order."""

import asyncio
from collections.abc import Mapping

import structlog

from inventory_search.inventory.domain import RECORD_MODELS, EntityType, InventoryRecord
from inventory_search.inventory.repositories import Repository
from inventory_search.search.index import SearchIndex
from inventory_search.sync.types import IndexAction, IndexEvent

logger = structlog.get_logger()


class IndexingPipeline:
    """Bounded queue of index events drained by one consumer task.

    Producers block in ``submit`` while the queue is full. The consumer
    applies events one at a time in a worker thread, so index writes
    never interleave. A failing event is logged and dropped.

    Attributes:
        search_index: Index the events are applied to.
        repositories: Row sources used for full rebuilds.
    """

    def __init__(
        self,
        search_index: SearchIndex,
        repositories: Mapping[EntityType, Repository[InventoryRecord]],
        queue_size: int = 2000,
    ) -> None:
        """Initialize pipeline (call start() inside a running event loop).

        Args:
            search_index: Index the events are applied to.
            repositories: Row sources used for full rebuilds.
            queue_size: Maximum number of queued events.
        """
        self.search_index = search_index
        self.repositories = repositories
        self._queue: asyncio.Queue[IndexEvent] = asyncio.Queue(maxsize=queue_size)
        self._task: asyncio.Task[None] | None = None
        self._processed = 0
        self._failed = 0

    @property
    def processed(self) -> int:
        """Events applied successfully."""
        return self._processed

    @property
    def failed(self) -> int:
        """Events dropped after an error."""
        return self._failed

    @property
    def pending(self) -> int:
        """Events waiting in the queue."""
        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the consumer task."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._consume(), name="indexing-pipeline")

    async def submit(self, event: IndexEvent) -> None:
        """Queue an event, waiting while the queue is full.

        Args:
            event: Event to apply.
        """
        await self._queue.put(event)
        logger.debug(
            "index_event_queued",
            event_id=event.id,
            action=event.action.value,
            pending=self._queue.qsize(),
        )

    async def join(self) -> None:
        """Wait until every queued event has been handled."""
        await self._queue.join()

    async def stop(self, timeout: float | None = None) -> None:
        """Drain the queue, then stop the consumer.

        Args:
            timeout: Seconds to wait for queued events; remaining events are
                discarded when it expires.
        """
        if self._task is None:
            return

        try:
            await asyncio.wait_for(self._queue.join(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("indexing_pipeline_drain_timeout", pending=self.pending)

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info(
            "indexing_pipeline_stopped",
            processed=self._processed,
            failed=self._failed,
        )

    async def _consume(self) -> None:
        logger.info("indexing_pipeline_started", queue_size=self._queue.maxsize)
        try:
            while True:
                event = await self._queue.get()
                try:
                    await asyncio.to_thread(self.apply, event)
                    self._processed += 1
                except Exception:
                    self._failed += 1
                    logger.exception(
                        "index_event_failed",
                        event_id=event.id,
                        action=event.action.value,
                    )
                finally:
                    self._queue.task_done()
        except asyncio.CancelledError:
            logger.debug("indexing_pipeline_cancelled", pending=self.pending)
            raise

    def apply(self, event: IndexEvent) -> None:
        """Apply one event to the index (blocking).

        Args:
            event: Event to apply.

        Raises:
            pydantic.ValidationError: If an upsert payload does not match
                its entity model.
            ValueError: If the row has a blank id.
            IndexStorageError: If the index write fails.
        """
        if event.action is IndexAction.UPSERT:
            assert event.entity_type is not None
            record = RECORD_MODELS[event.entity_type].model_validate(event.record)
            self.search_index.index_record(record)
        elif event.action is IndexAction.DELETE:
            assert event.record_id is not None
            doc_type = event.entity_type.value if event.entity_type else None
            self.search_index.delete_record(event.record_id, doc_type)
        else:
            logger.info("reindex_started", reason=event.reason, event_id=event.id)
            self.search_index.reindex_all(self.repositories)
