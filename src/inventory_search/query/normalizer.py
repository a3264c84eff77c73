"""Translate casual search-box input into structured queries."""

import re

from inventory_search.query.analysis import analyze
from inventory_search.query.nodes import (
    DEFAULT_FIELD,
    TYPE_FIELD,
    BooleanClause,
    BooleanQuery,
    MatchAllQuery,
    Occur,
    PrefixQuery,
    Query,
    TermQuery,
    must,
)
from inventory_search.query.parser import parse_query

_BOOLEAN_OPERATOR = re.compile(r"\s(?:and|or)\s", re.IGNORECASE)


def looks_like_structured_syntax(text: str | None) -> bool:
    """Check whether input already uses the structured query grammar.

    Looks for field separators, quotes, AND/OR operators between
    whitespace, and leading or trailing wildcards.

    Args:
        text: Raw user input.

    Returns:
        True if the input should be parsed as-is.
    """
    if text is None:
        return False
    s = text.strip()
    if not s:
        return False
    return (
        ":" in s
        or '"' in s
        or _BOOLEAN_OPERATOR.search(s) is not None
        or s.endswith("*")
        or s.startswith("*")
    )


def normalize_type(type_filter: str | None) -> str | None:
    """Lower-case a type filter, or None when it is blank."""
    if type_filter is None:
        return None
    trimmed = type_filter.strip()
    if not trimmed:
        return None
    return trimmed.lower()


class QueryBuilder:
    """Builds queries for the search index from search-box input.

    Structured input is parsed with the query grammar. Free text is
    tokenized with the index analyzer and every token becomes a required
    prefix clause on the default field, so partially typed words match.
    """

    def __init__(self, default_field: str = DEFAULT_FIELD) -> None:
        self.default_field = default_field

    def build(
        self,
        user_input: str | None,
        type_filter: str | None = None,
        structured: bool | None = None,
    ) -> Query:
        """Build a query, optionally scoped to one document type.

        Args:
            user_input: Raw text from the search box.
            type_filter: Optional type tag; adds a mandatory type clause.
            structured: Force (True) or forbid (False) structured parsing.
                Detected from the input when None.

        Returns:
            Query tree ready for the search index.

        Raises:
            QueryParseError: If structured input cannot be parsed.
        """
        text = (user_input or "").strip()
        if not text:
            base: Query = MatchAllQuery()
        elif structured or (structured is None and looks_like_structured_syntax(text)):
            base = parse_query(text, self.default_field)
        else:
            base = self._free_text(text)

        type_key = normalize_type(type_filter)
        if type_key is None:
            return base
        return must(base, TermQuery(TYPE_FIELD, type_key))

    def _free_text(self, text: str) -> Query:
        clauses = tuple(
            BooleanClause(PrefixQuery(self.default_field, token), Occur.MUST)
            for token in analyze(text)
        )
        if len(clauses) == 1:
            return clauses[0].query
        return BooleanQuery(clauses)
