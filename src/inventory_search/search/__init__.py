"""Full-text search subsystem: index, progress tracking and suggestions."""

from inventory_search.search.index import IndexStorageError, SearchIndex
from inventory_search.search.progress import IndexProgress
from inventory_search.search.schemas import IndexedDocument, ProgressStatus, SearchHit
from inventory_search.search.suggest import SuggestService

__all__ = [
    "IndexProgress",
    "IndexStorageError",
    "IndexedDocument",
    "ProgressStatus",
    "SearchHit",
    "SearchIndex",
    "SuggestService",
]
