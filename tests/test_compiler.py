"""FTS5 MATCH compilation tests."""

from inventory_search.query import (
    BooleanClause,
    BooleanQuery,
    MatchAllQuery,
    Occur,
    PhraseQuery,
    PrefixQuery,
    TermQuery,
    WildcardQuery,
)
from inventory_search.query.nodes import must
from inventory_search.search.compiler import compile_match


def no_terms(field: str, pattern: str) -> list[str]:
    return []


def test_match_all_uses_scope_column() -> None:
    assert compile_match(MatchAllQuery(), no_terms) == 'scope : "document"'


def test_term_and_phrase() -> None:
    assert compile_match(TermQuery("type", "city"), no_terms) == 'type : "city"'
    assert (
        compile_match(PhraseQuery("content", ("main", "street")), no_terms)
        == 'content : "main street"'
    )


def test_prefix() -> None:
    assert compile_match(PrefixQuery("content", "vie"), no_terms) == 'content : "vie"*'


def test_unknown_field_matches_nothing() -> None:
    assert compile_match(TermQuery("name", "vienna"), no_terms) is None


def test_unanalyzable_term_matches_nothing() -> None:
    assert compile_match(TermQuery("content", "--"), no_terms) is None


def test_required_clauses_are_conjoined() -> None:
    query = must(PrefixQuery("content", "vie"), TermQuery("type", "city"))
    assert compile_match(query, no_terms) == '(content : "vie"*) AND (type : "city")'


def test_required_clause_without_match_fails_whole_query() -> None:
    query = must(TermQuery("content", "vienna"), TermQuery("name", "x"))
    assert compile_match(query, no_terms) is None


def test_optional_clauses_are_disjoined() -> None:
    query = BooleanQuery(
        (
            BooleanClause(TermQuery("content", "vienna"), Occur.SHOULD),
            BooleanClause(TermQuery("name", "x"), Occur.SHOULD),
            BooleanClause(TermQuery("content", "graz"), Occur.SHOULD),
        )
    )
    assert compile_match(query, no_terms) == '(content : "vienna") OR (content : "graz")'


def test_prohibited_clause_uses_not() -> None:
    query = BooleanQuery(
        (
            BooleanClause(TermQuery("content", "at"), Occur.MUST),
            BooleanClause(TermQuery("content", "graz"), Occur.MUST_NOT),
        )
    )
    assert compile_match(query, no_terms) == '((content : "at")) NOT (content : "graz")'


def test_only_prohibited_clauses_match_nothing() -> None:
    query = BooleanQuery((BooleanClause(TermQuery("content", "graz"), Occur.MUST_NOT),))
    assert compile_match(query, no_terms) is None


def test_wildcard_expands_through_term_dictionary() -> None:
    seen: list[tuple[str, str]] = []

    def expand(field: str, pattern: str) -> list[str]:
        seen.append((field, pattern))
        return ["vienna", "vierna"]

    compiled = compile_match(WildcardQuery("content", "vi*na"), expand)
    assert compiled == '(content : "vienna" OR content : "vierna")'
    assert seen == [("content", "vi*na")]


def test_wildcard_without_terms_matches_nothing() -> None:
    assert compile_match(WildcardQuery("content", "*zzz"), no_terms) is None
