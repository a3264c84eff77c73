"""Structured query grammar tests."""

import pytest

from inventory_search.query import (
    BooleanQuery,
    MatchAllQuery,
    Occur,
    PhraseQuery,
    PrefixQuery,
    QueryParseError,
    TermQuery,
    WildcardQuery,
    parse_query,
)


def test_single_term() -> None:
    assert parse_query("Vienna") == TermQuery("content", "vienna")


def test_field_term() -> None:
    assert parse_query("type:Site") == TermQuery("type", "site")


def test_match_all() -> None:
    assert parse_query("*:*") == MatchAllQuery()


def test_trailing_star_is_prefix() -> None:
    assert parse_query("Vie*") == PrefixQuery("content", "vie")


def test_leading_star_is_wildcard() -> None:
    assert parse_query("*enna") == WildcardQuery("content", "*enna")


def test_inner_wildcards() -> None:
    assert parse_query("v?e*na") == WildcardQuery("content", "v?e*na")


def test_quoted_phrase() -> None:
    assert parse_query('"Main  Street"') == PhraseQuery("content", ("main", "street"))


def test_punctuated_term_becomes_phrase() -> None:
    assert parse_query("SC-2024-001") == PhraseQuery("content", ("sc", "2024", "001"))


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("vienna graz", "+content:vienna +content:graz"),
        ("vienna AND graz", "+content:vienna +content:graz"),
        ("vienna && graz", "+content:vienna +content:graz"),
        ("vienna OR graz", "content:vienna content:graz"),
        ("vienna || graz", "content:vienna content:graz"),
        ("vienna -graz", "+content:vienna -content:graz"),
        ("vienna NOT graz", "+content:vienna -content:graz"),
        ("vienna !graz", "+content:vienna -content:graz"),
        ("+vienna graz", "+content:vienna +content:graz"),
        ("a OR b AND c", "content:a +content:b +content:c"),
        ("type:(site OR city)", "type:site type:city"),
        ("type:city (vienna OR graz)", "+type:city +(content:vienna content:graz)"),
    ],
)
def test_boolean_operators(text: str, expected: str) -> None:
    assert str(parse_query(text)) == expected


def test_lone_negation_keeps_prohibited_clause() -> None:
    query = parse_query("-graz")
    assert isinstance(query, BooleanQuery)
    assert [c.occur for c in query.clauses] == [Occur.MUST_NOT]


def test_boost_and_fuzzy_suffixes_are_ignored() -> None:
    assert str(parse_query("vienna^2 graz~1")) == "+content:vienna +content:graz"


def test_escaped_colon_stays_in_term() -> None:
    assert parse_query(r"10\:30") == PhraseQuery("content", ("10", "30"))


def test_unanalyzable_term_is_dropped() -> None:
    assert str(parse_query("vienna @@")) == "content:vienna"


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        '"unterminated',
        "(vienna",
        "vienna)",
        "AND vienna",
        "type:",
        "[a TO b]",
        "vienna\\",
    ],
)
def test_invalid_queries_raise(text: str) -> None:
    with pytest.raises(QueryParseError):
        parse_query(text)


def test_parse_error_carries_position() -> None:
    with pytest.raises(QueryParseError) as excinfo:
        parse_query("vienna)")
    assert excinfo.value.position == 6
    assert excinfo.value.query == "vienna)"
