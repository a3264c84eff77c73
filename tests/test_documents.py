"""Document building and hit mapping tests."""

import pytest

from inventory_search.search.documents import (
    SNIPPET_LIMIT,
    build_document,
    build_snippet,
    to_hit,
    token_with_prefix,
)


def test_content_starts_with_type_key() -> None:
    doc = build_document("serviceContract", "c1", "SC-1", None, "  ", "Approved")
    assert doc.type == "servicecontract"
    assert doc.type_display == "serviceContract"
    assert doc.content == "servicecontract SC-1 Approved"
    assert doc.display_text == "SC-1"
    assert doc.snippet == "Approved"


def test_display_falls_back_to_type_and_id() -> None:
    doc = build_document("site", "s9", None, " ")
    assert doc.display_text == "site s9"
    assert doc.snippet == ""


def test_blank_id_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_document("site", "  ", "Name")


def test_snippet_strips_display_case_insensitively() -> None:
    snippet = build_snippet("city VIENNA   AT\n capital", "city", "Vienna")
    assert snippet == "AT capital"


def test_long_snippet_is_truncated() -> None:
    doc = build_document("site", "s1", "Name", "word " * 100)
    assert len(doc.snippet) <= SNIPPET_LIMIT
    assert doc.snippet.endswith("…")
    assert "  " not in doc.snippet


def test_short_snippet_is_not_truncated() -> None:
    doc = build_document("site", "s1", "Name", "x" * 150)
    assert doc.snippet == "x" * 150


def test_hit_omits_empty_snippet() -> None:
    hit = to_hit(build_document("country", "AT", "Austria"))
    assert hit.id == "AT"
    assert hit.type == "country"
    assert hit.text == "Austria"
    assert hit.snippet is None


def test_hit_uses_display_type() -> None:
    hit = to_hit(build_document("serviceContract", "c1", "SC-1", "Approved"))
    assert hit.type == "serviceContract"
    assert hit.snippet == "Approved"


@pytest.mark.parametrize(
    ("prefix", "value", "expected"),
    [
        ("status", "In Progress", "statusinprogress"),
        ("zone", "A-1", "zonea1"),
        ("ha", "true", "hatrue"),
        ("zone", " - ", ""),
        ("zone", None, ""),
    ],
)
def test_token_with_prefix(prefix: str, value: str | None, expected: str) -> None:
    assert token_with_prefix(prefix, value) == expected
