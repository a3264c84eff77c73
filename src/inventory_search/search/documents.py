"""Build indexed documents and search hits from flat field lists."""

import re

from inventory_search.search.schemas import IndexedDocument, SearchHit

SNIPPET_LIMIT = 160

_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^0-9A-Za-z]+")


def normalize_whitespace(value: str | None) -> str:
    """Collapse whitespace runs into single spaces and trim."""
    if value is None:
        return ""
    return _WHITESPACE.sub(" ", value).strip()


def first_non_blank(*values: str | None) -> str:
    """Return the first value that is not blank, trimmed."""
    for value in values:
        if value is not None and value.strip():
            return value.strip()
    return ""


def token_with_prefix(prefix: str, value: str | None) -> str:
    """Build a synthetic search token such as ``statusactive``.

    Args:
        prefix: Token prefix (e.g. "status", "zone").
        value: Raw value; non-alphanumeric characters are removed.

    Returns:
        Prefixed lower-case token, or an empty string when nothing is left.
    """
    if value is None:
        return ""
    normalized = _NON_ALNUM.sub("", value).lower()
    if not normalized:
        return ""
    return prefix + normalized


def determine_display(doc_type: str, doc_id: str, fields: tuple[str | None, ...]) -> str:
    display = first_non_blank(*fields)
    if not display:
        display = f"{doc_type} {doc_id}".strip()
    if not display:
        display = doc_id
    return display


def _strip_leading(value: str, token: str | None) -> str:
    normalized_token = normalize_whitespace(token)
    if not value or not normalized_token:
        return value
    if value[: len(normalized_token)].lower() == normalized_token.lower():
        return value[len(normalized_token) :].strip()
    return value


def build_snippet(content: str, type_key: str, display_text: str) -> str:
    """Derive the hit snippet from aggregated document content.

    The leading type key and display text are removed so the snippet only
    shows context the result list does not already contain. Results longer
    than ``SNIPPET_LIMIT`` are cut and end with an ellipsis.

    Args:
        content: Aggregated content as stored in the index.
        type_key: Lower-cased type key that prefixes the content.
        display_text: Display text of the document.

    Returns:
        Snippet text, empty when nothing remains.
    """
    snippet = normalize_whitespace(content)
    snippet = _strip_leading(snippet, type_key)
    snippet = _strip_leading(snippet, display_text)
    if len(snippet) > SNIPPET_LIMIT:
        snippet = snippet[: SNIPPET_LIMIT - 1].strip() + "…"
    return snippet


def build_document(doc_type: str, doc_id: str, *fields: str | None) -> IndexedDocument:
    """Aggregate one row's fields into an indexable document.

    Args:
        doc_type: Entity tag, e.g. "serviceContract".
        doc_id: Row identifier.
        *fields: Searchable field values; None and blank values are skipped.

    Returns:
        Document ready to upsert.

    Raises:
        ValueError: If the id is blank.
    """
    safe_id = (doc_id or "").strip()
    if not safe_id:
        raise ValueError(f"Cannot index {doc_type or 'document'} without an id")

    type_display = (doc_type or "").strip()
    type_key = type_display.lower()
    parts = [type_key] if type_key else []
    parts.extend(f.strip() for f in fields if f is not None and f.strip())
    content = " ".join(parts)

    display_text = determine_display(type_display, safe_id, fields)
    return IndexedDocument(
        id=safe_id,
        type=type_key,
        type_display=type_display,
        content=content,
        display_text=display_text,
        snippet=build_snippet(content, type_key, display_text),
    )


def to_hit(document: IndexedDocument) -> SearchHit:
    """Map a stored document to its search hit."""
    return SearchHit(
        id=document.id,
        type=first_non_blank(document.type_display, document.type),
        text=first_non_blank(document.display_text, document.content, document.id),
        snippet=document.snippet or None,
    )
