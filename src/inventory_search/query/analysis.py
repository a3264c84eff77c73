"""Tokenization shared by the index and the query parser.

Every FTS5 column is written with text that already went through
``analyze``, so the SQLite tokenizer only splits on the single spaces
between pre-folded tokens. Index terms, query terms and suggest prefixes
therefore all use the same case fold, independent of the process locale.
"""

import re
import unicodedata

TOKENIZER = "unicode61 remove_diacritics 0"

_TOKEN_PATTERN = re.compile(r"[^\W_]+")

# Full case folding turns U+0130 into "i" plus a combining dot, which the
# token pattern would split.
_DOTTED_CAPITAL_I = "İ"


def fold(text: str) -> str:
    """Locale-independent case fold (NFC, then Unicode full case folding).

    ``İ`` folds to ``i`` and final sigma folds to ``σ``.
    """
    text = unicodedata.normalize("NFC", text).replace(_DOTTED_CAPITAL_I, "I")
    return text.casefold()


def analyze(text: str | None) -> list[str]:
    """Split text into case-folded index tokens.

    Args:
        text: Raw text, may be None.

    Returns:
        Tokens in input order, empty when nothing indexable remains.
    """
    if not text:
        return []
    return _TOKEN_PATTERN.findall(fold(text))


def index_text(text: str | None) -> str:
    """Analyzed form of ``text`` as written to the FTS5 columns."""
    return " ".join(analyze(text))
