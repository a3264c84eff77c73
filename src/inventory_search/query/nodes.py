"""Immutable query tree consumed by the search index."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_FIELD = "content"
TYPE_FIELD = "type"
ID_FIELD = "id"


class Occur(str, Enum):
    """How a boolean clause participates in matching."""

    MUST = "must"
    SHOULD = "should"
    MUST_NOT = "must_not"


@dataclass(frozen=True)
class MatchAllQuery:
    """Matches every document."""

    def __str__(self) -> str:
        return "*:*"


@dataclass(frozen=True)
class TermQuery:
    """Exact token in a field."""

    field: str
    term: str

    def __str__(self) -> str:
        return f"{self.field}:{self.term}"


@dataclass(frozen=True)
class PrefixQuery:
    """Tokens starting with a prefix."""

    field: str
    prefix: str

    def __str__(self) -> str:
        return f"{self.field}:{self.prefix}*"


@dataclass(frozen=True)
class WildcardQuery:
    """Glob-style pattern using * and ?, expanded against the term dictionary."""

    field: str
    pattern: str

    def __str__(self) -> str:
        return f"{self.field}:{self.pattern}"


@dataclass(frozen=True)
class PhraseQuery:
    """Adjacent tokens in order."""

    field: str
    terms: tuple[str, ...]

    def __str__(self) -> str:
        return f'{self.field}:"{" ".join(self.terms)}"'


@dataclass(frozen=True)
class BooleanClause:
    """One sub-query of a BooleanQuery."""

    query: "Query"
    occur: Occur


@dataclass(frozen=True)
class BooleanQuery:
    """Combination of clauses.

    With at least one MUST clause, SHOULD clauses are optional. Without MUST
    clauses at least one SHOULD clause has to match. A query made only of
    MUST_NOT clauses matches nothing.
    """

    clauses: tuple[BooleanClause, ...] = ()

    def __str__(self) -> str:
        parts: list[str] = []
        for clause in self.clauses:
            rendered = str(clause.query)
            if isinstance(clause.query, BooleanQuery):
                rendered = f"({rendered})"
            if clause.occur is Occur.MUST:
                rendered = f"+{rendered}"
            elif clause.occur is Occur.MUST_NOT:
                rendered = f"-{rendered}"
            parts.append(rendered)
        return " ".join(parts)


Query = (
    MatchAllQuery
    | TermQuery
    | PrefixQuery
    | WildcardQuery
    | PhraseQuery
    | BooleanQuery
)


def must(*queries: Query) -> BooleanQuery:
    """Build a conjunction of the given queries."""
    return BooleanQuery(tuple(BooleanClause(q, Occur.MUST) for q in queries))
