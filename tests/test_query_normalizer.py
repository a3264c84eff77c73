"""Search-box input normalization tests."""

import pytest

from inventory_search.query import (
    MatchAllQuery,
    PrefixQuery,
    QueryBuilder,
    QueryParseError,
    analyze,
    fold,
    looks_like_structured_syntax,
    normalize_type,
)


@pytest.mark.parametrize(
    "text",
    [
        "type:site",
        '"main street"',
        "vienna AND graz",
        "vienna or graz",
        "vie*",
        "*enna",
        "  vie*  ",
    ],
)
def test_detects_structured_syntax(text: str) -> None:
    assert looks_like_structured_syntax(text) is True


@pytest.mark.parametrize(
    "text",
    [None, "", "   ", "vienna", "vienna graz", "android", "sc-2024-001", "a*b"],
)
def test_plain_text_is_not_structured(text: str | None) -> None:
    assert looks_like_structured_syntax(text) is False


def test_normalize_type() -> None:
    assert normalize_type(" ServiceContract ") == "servicecontract"
    assert normalize_type("   ") is None
    assert normalize_type(None) is None


def test_blank_input_matches_everything() -> None:
    builder = QueryBuilder()
    assert builder.build(None) == MatchAllQuery()
    assert builder.build("   ") == MatchAllQuery()


def test_single_word_becomes_prefix_query() -> None:
    assert QueryBuilder().build("Vienna") == PrefixQuery("content", "vienna")


def test_free_text_requires_every_token() -> None:
    query = QueryBuilder().build("Leoben control")
    assert str(query) == "+content:leoben* +content:control*"


def test_free_text_splits_on_punctuation() -> None:
    query = QueryBuilder().build("SC-2024")
    assert str(query) == "+content:sc* +content:2024*"


def test_type_filter_is_added_to_free_text() -> None:
    query = QueryBuilder().build("vienna", type_filter="  City ")
    assert str(query) == "+content:vienna* +type:city"


def test_blank_query_with_type_filter() -> None:
    query = QueryBuilder().build("", type_filter="City")
    assert str(query) == "+*:* +type:city"


def test_structured_input_is_parsed() -> None:
    query = QueryBuilder().build("type:site zone*")
    assert str(query) == "+type:site +content:zone*"


def test_structured_flag_forces_parsing() -> None:
    query = QueryBuilder().build("vienna graz", structured=True)
    assert str(query) == "+content:vienna +content:graz"


def test_structured_flag_false_treats_syntax_as_text() -> None:
    query = QueryBuilder().build("type:site", structured=False)
    assert str(query) == "+content:type* +content:site*"


def test_invalid_structured_input_raises() -> None:
    with pytest.raises(QueryParseError):
        QueryBuilder().build('"unterminated')


def test_fold_is_locale_independent() -> None:
    assert fold("İSTANBUL") == "istanbul"
    assert fold("ΟΔΟΣ") == "οδοσ"
    assert fold("οδος") == "οδοσ"
    assert fold("Straße") == "strasse"


def test_analyze_keeps_dotted_capital_i_in_one_token() -> None:
    assert analyze("İstanbul ΟΔΟΣ") == ["istanbul", "οδοσ"]
    assert analyze("I\u0307zmir") == ["izmir"]


def test_free_text_prefixes_are_folded() -> None:
    assert QueryBuilder().build("İst") == PrefixQuery("content", "ist")
