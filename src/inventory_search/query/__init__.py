"""Query syntax detection, parsing and query building."""

from inventory_search.query.analysis import TOKENIZER, analyze, fold, index_text
from inventory_search.query.nodes import (
    DEFAULT_FIELD,
    ID_FIELD,
    TYPE_FIELD,
    BooleanClause,
    BooleanQuery,
    MatchAllQuery,
    Occur,
    PhraseQuery,
    PrefixQuery,
    Query,
    TermQuery,
    WildcardQuery,
)
from inventory_search.query.normalizer import (
    QueryBuilder,
    looks_like_structured_syntax,
    normalize_type,
)
from inventory_search.query.parser import QueryParseError, parse_query

__all__ = [
    "DEFAULT_FIELD",
    "ID_FIELD",
    "TOKENIZER",
    "TYPE_FIELD",
    "BooleanClause",
    "BooleanQuery",
    "MatchAllQuery",
    "Occur",
    "PhraseQuery",
    "PrefixQuery",
    "Query",
    "QueryBuilder",
    "QueryParseError",
    "TermQuery",
    "WildcardQuery",
    "analyze",
    "fold",
    "index_text",
    "looks_like_structured_syntax",
    "normalize_type",
    "parse_query",
]
