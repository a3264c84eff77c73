"""Parser for the structured query grammar.

Understands the subset of the classic Lucene syntax operators type into the
search box: ``field:value``, ``field:(group)``, quoted phrases, ``AND`` /
``OR`` / ``NOT`` (and ``&&`` / ``||`` / ``!``), ``+`` / ``-`` modifiers,
parentheses, trailing ``*`` prefixes, leading or inner ``*`` / ``?``
wildcards and ``*:*``. The default operator is AND.

Boosts (``^2``) and slop or fuzzy suffixes (``~1``) are accepted and
ignored. Range syntax is rejected.
"""

from dataclasses import dataclass
from enum import Enum

from inventory_search.query.analysis import analyze, fold
from inventory_search.query.nodes import (
    DEFAULT_FIELD,
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

_TERM_BREAKS = frozenset('()":^~[]{}')


class QueryParseError(ValueError):
    """Raised when input cannot be turned into a structured query."""

    def __init__(self, message: str, query: str, position: int | None = None) -> None:
        """Initialize parse error.

        Args:
            message: Error description.
            query: The input that failed to parse.
            position: Character offset of the problem, if known.
        """
        super().__init__(message)
        self.query = query
        self.position = position


class _Kind(Enum):
    TERM = "term"
    PHRASE = "phrase"
    COLON = "colon"
    LPAREN = "opening parenthesis"
    RPAREN = "closing parenthesis"
    AND = "AND"
    OR = "OR"
    NOT = "NOT"
    PLUS = "+"
    MINUS = "-"


@dataclass(frozen=True)
class _Token:
    kind: _Kind
    position: int
    text: str = ""
    wildcard: bool = False


_SINGLE_CHAR = {
    "(": _Kind.LPAREN,
    ")": _Kind.RPAREN,
    ":": _Kind.COLON,
    "+": _Kind.PLUS,
    "-": _Kind.MINUS,
    "!": _Kind.NOT,
}

_KEYWORDS = {"AND": _Kind.AND, "OR": _Kind.OR, "NOT": _Kind.NOT}


def _lex(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch.isspace():
            i += 1
            continue
        if ch in _SINGLE_CHAR:
            tokens.append(_Token(_SINGLE_CHAR[ch], i, ch))
            i += 1
            continue
        if source.startswith("&&", i):
            tokens.append(_Token(_Kind.AND, i, "&&"))
            i += 2
            continue
        if source.startswith("||", i):
            tokens.append(_Token(_Kind.OR, i, "||"))
            i += 2
            continue
        if ch == '"':
            i = _lex_phrase(source, i, tokens)
            continue
        if ch in "^~":
            i += 1
            while i < n and (source[i].isdigit() or source[i] == "."):
                i += 1
            continue
        if ch in "[]{}":
            raise QueryParseError("Range queries are not supported", source, i)
        i = _lex_term(source, i, tokens)
    return tokens


def _lex_phrase(source: str, start: int, tokens: list[_Token]) -> int:
    chars: list[str] = []
    i = start + 1
    while i < len(source):
        ch = source[i]
        if ch == "\\" and i + 1 < len(source):
            chars.append(source[i + 1])
            i += 2
            continue
        if ch == '"':
            tokens.append(_Token(_Kind.PHRASE, start, "".join(chars)))
            return i + 1
        chars.append(ch)
        i += 1
    raise QueryParseError("Unterminated quoted phrase", source, start)


def _lex_term(source: str, start: int, tokens: list[_Token]) -> int:
    chars: list[str] = []
    wildcard = False
    i = start
    while i < len(source):
        ch = source[i]
        if ch == "\\":
            if i + 1 >= len(source):
                raise QueryParseError("Dangling escape character", source, i)
            chars.append(source[i + 1])
            i += 2
            continue
        if ch.isspace() or ch in _TERM_BREAKS:
            break
        if ch in "*?":
            wildcard = True
        chars.append(ch)
        i += 1

    text = "".join(chars)
    kind = _KEYWORDS.get(text) if not wildcard else None
    tokens.append(_Token(kind or _Kind.TERM, start, text, wildcard))
    return i


class _Parser:
    """Recursive-descent parser over the token stream."""

    def __init__(self, source: str, default_field: str) -> None:
        self._source = source
        self._tokens = _lex(source)
        self._pos = 0
        self._default_field = default_field

    def parse(self) -> Query:
        query = self._parse_query(self._default_field)
        leftover = self._peek()
        if leftover is not None:
            raise self._error(f"Unexpected {leftover.kind.value}", leftover)
        return query

    def _peek(self) -> _Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> _Token:
        token = self._peek()
        if token is None:
            raise QueryParseError(
                "Query ends unexpectedly", self._source, len(self._source)
            )
        self._pos += 1
        return token

    def _error(self, message: str, token: _Token) -> QueryParseError:
        return QueryParseError(
            f"{message} at position {token.position}", self._source, token.position
        )

    def _parse_query(self, field: str) -> Query:
        clauses: list[list] = []
        seen = 0
        while (token := self._peek()) is not None and token.kind is not _Kind.RPAREN:
            conj: _Kind | None = None
            if token.kind in (_Kind.AND, _Kind.OR):
                if seen == 0:
                    raise self._error(f"Unexpected {token.kind.value}", token)
                conj = token.kind
                self._next()

            modifier: _Kind | None = None
            token = self._peek()
            if token is not None and token.kind in (_Kind.PLUS, _Kind.MINUS, _Kind.NOT):
                modifier = token.kind
                self._next()

            _add_clause(clauses, conj, modifier, self._parse_clause(field))
            seen += 1

        if len(clauses) == 1 and clauses[0][0] is not Occur.MUST_NOT:
            return clauses[0][1]
        return BooleanQuery(tuple(BooleanClause(q, occur) for occur, q in clauses))

    def _parse_clause(self, field: str) -> Query | None:
        token = self._next()
        following = self._peek()
        if token.kind is _Kind.TERM and following is not None and following.kind is _Kind.COLON:
            self._next()
            field = token.text
            token = self._next()

        if token.kind is _Kind.LPAREN:
            inner = self._parse_query(field)
            closing = self._peek()
            if closing is None or closing.kind is not _Kind.RPAREN:
                raise self._error("Missing closing parenthesis", token)
            self._next()
            return inner
        if token.kind is _Kind.PHRASE:
            return _phrase(field, token.text)
        if token.kind is _Kind.TERM:
            return _term(field, token)
        raise self._error(f"Unexpected {token.kind.value}", token)


def _add_clause(
    clauses: list[list],
    conj: _Kind | None,
    modifier: _Kind | None,
    query: Query | None,
) -> None:
    # Mirrors the classic QueryParser rules for the AND default operator:
    # an explicit conjunction can retroactively change the previous clause.
    if clauses and conj is _Kind.AND and clauses[-1][0] is not Occur.MUST_NOT:
        clauses[-1][0] = Occur.MUST
    if clauses and conj is _Kind.OR and clauses[-1][0] is not Occur.MUST_NOT:
        clauses[-1][0] = Occur.SHOULD

    if query is None:
        return

    prohibited = modifier in (_Kind.MINUS, _Kind.NOT)
    if prohibited:
        occur = Occur.MUST_NOT
    elif conj is _Kind.OR:
        occur = Occur.SHOULD
    else:
        occur = Occur.MUST
    clauses.append([occur, query])


def _term(field: str, token: _Token) -> Query | None:
    text = token.text
    if token.wildcard:
        if text == "*":
            return MatchAllQuery()
        lowered = fold(text)
        body = lowered[:-1]
        if lowered.endswith("*") and "*" not in body and "?" not in body:
            return PrefixQuery(field, body)
        return WildcardQuery(field, lowered)
    return _phrase(field, text)


def _phrase(field: str, text: str) -> Query | None:
    terms = analyze(text)
    if not terms:
        return None
    if len(terms) == 1:
        return TermQuery(field, terms[0])
    return PhraseQuery(field, tuple(terms))


def parse_query(text: str, default_field: str = DEFAULT_FIELD) -> Query:
    """Parse structured query syntax into a query tree.

    Args:
        text: Query string in the structured grammar.
        default_field: Field for clauses without an explicit ``field:``.

    Returns:
        Parsed query tree.

    Raises:
        QueryParseError: If the input is not valid query syntax.
    """
    if text is None or not text.strip():
        raise QueryParseError("Query is empty", text or "")
    return _Parser(text.strip(), default_field).parse()
