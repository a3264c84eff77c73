"""Compile query trees into SQLite FTS5 MATCH expressions."""

from collections.abc import Callable

from inventory_search.query.analysis import analyze
from inventory_search.query.nodes import (
    BooleanQuery,
    MatchAllQuery,
    Occur,
    PhraseQuery,
    PrefixQuery,
    Query,
    TermQuery,
    WildcardQuery,
)

INDEXED_FIELDS = frozenset({"id", "type", "content", "scope"})

# Every row carries this constant in the scope column, so a column filter on
# it matches the whole index.
SCOPE_FIELD = "scope"
SCOPE_VALUE = "document"

TermExpander = Callable[[str, str], list[str]]


def _quote(token: str) -> str:
    return '"' + token.replace('"', '""') + '"'


def _column(field: str, expression: str) -> str | None:
    if field not in INDEXED_FIELDS:
        return None
    return f"{field} : {expression}"


def compile_match(query: Query, expand: TermExpander) -> str | None:
    """Translate a query into an FTS5 MATCH string.

    Args:
        query: Query tree to compile.
        expand: Callback returning the indexed terms of a field matching a
            GLOB pattern; used for wildcard queries.

    Returns:
        MATCH expression, or None when the query cannot match anything.
    """
    if isinstance(query, MatchAllQuery):
        return _column(SCOPE_FIELD, _quote(SCOPE_VALUE))
    if isinstance(query, TermQuery):
        return _phrase(query.field, analyze(query.term))
    if isinstance(query, PhraseQuery):
        return _phrase(query.field, list(query.terms))
    if isinstance(query, PrefixQuery):
        tokens = analyze(query.prefix)
        if not tokens:
            return None
        return _column(query.field, _quote(" ".join(tokens)) + "*")
    if isinstance(query, WildcardQuery):
        return _wildcard(query, expand)
    if isinstance(query, BooleanQuery):
        return _boolean(query, expand)
    raise TypeError(f"Unsupported query node: {type(query).__name__}")


def _phrase(field: str, tokens: list[str]) -> str | None:
    if not tokens:
        return None
    return _column(field, _quote(" ".join(tokens)))


def _wildcard(query: WildcardQuery, expand: TermExpander) -> str | None:
    if query.field not in INDEXED_FIELDS:
        return None
    terms = expand(query.field, query.pattern)
    if not terms:
        return None
    alternatives = " OR ".join(f"{query.field} : {_quote(t)}" for t in terms)
    return f"({alternatives})"


def _boolean(query: BooleanQuery, expand: TermExpander) -> str | None:
    required: list[str] = []
    optional: list[str] = []
    excluded: list[str] = []

    for clause in query.clauses:
        compiled = compile_match(clause.query, expand)
        if clause.occur is Occur.MUST:
            if compiled is None:
                return None
            required.append(compiled)
        elif compiled is None:
            continue
        elif clause.occur is Occur.SHOULD:
            optional.append(compiled)
        else:
            excluded.append(compiled)

    # Optional clauses only influence scoring once something is required.
    if required:
        positive = " AND ".join(f"({part})" for part in required)
    elif optional:
        positive = " OR ".join(f"({part})" for part in optional)
    else:
        return None

    for part in excluded:
        positive = f"({positive}) NOT ({part})"
    return positive
