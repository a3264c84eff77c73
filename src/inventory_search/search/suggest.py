"""Prefix autocomplete over the indexed term dictionary."""

import sqlite3
from contextlib import closing

import structlog

from inventory_search.query.analysis import fold
from inventory_search.query.nodes import DEFAULT_FIELD
from inventory_search.search.index import SearchIndex

logger = structlog.get_logger()

MIN_PREFIX_LENGTH = 2


class SuggestService:
    """Suggests indexed terms that start with what the user typed."""

    def __init__(self, search_index: SearchIndex, field: str = DEFAULT_FIELD) -> None:
        self.search_index = search_index
        self.field = field

    def suggest(self, prefix: str | None, max_results: int) -> list[str]:
        """Return up to ``max_results`` distinct terms starting with ``prefix``.

        Args:
            prefix: Partial input; folded like indexed terms, so matching
                is case-insensitive and locale-independent.
            max_results: Maximum number of suggestions.

        Returns:
            Terms in dictionary order. Empty for prefixes shorter than two
            characters, non-positive limits or when the index is unreadable.
        """
        if prefix is None or len(prefix) < MIN_PREFIX_LENGTH or max_results <= 0:
            return []

        pfx = fold(prefix)
        suggestions: list[str] = []
        seen: set[str] = set()
        try:
            with closing(self.search_index.terms(self.field, start=pfx)) as terms:
                for term in terms:
                    if not term.startswith(pfx):
                        break
                    if term in seen:
                        continue
                    seen.add(term)
                    suggestions.append(term)
                    if len(suggestions) >= max_results:
                        break
        except (sqlite3.Error, OSError) as e:
            logger.warning("suggest_failed", prefix=prefix, error=str(e))
            return []
        return suggestions
