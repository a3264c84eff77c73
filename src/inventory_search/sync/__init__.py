"""Keeps the search index in sync with inventory changes."""

from inventory_search.sync.pipeline import IndexingPipeline
from inventory_search.sync.scheduler import run_reindex_scheduler
from inventory_search.sync.types import IndexAction, IndexEvent

__all__ = [
    "IndexAction",
    "IndexEvent",
    "IndexingPipeline",
    "run_reindex_scheduler",
]
