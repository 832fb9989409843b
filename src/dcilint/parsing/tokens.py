"""Token stream adapter.

The checker never sees source text. A host lexer hands over an ordered list of
tokens, each tagged with a closed ``TokenKind``, and ``TokenStream`` adds the
queries the builder needs:

- matching bracket links for ``{}``, ``()`` and ``[]``
- forward/backward search by kind, optionally bounded to the current statement
- a bounded lookbehind iterator with an explicit stop predicate
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """Lexical category of a token."""

    OPEN_TAG = "open_tag"
    DOC_COMMENT_OPEN = "doc_comment_open"
    DOC_COMMENT_TAG = "doc_comment_tag"
    DOC_COMMENT_CLOSE = "doc_comment_close"
    COMMENT = "comment"
    WHITESPACE = "whitespace"
    CLASS = "class"
    FINAL = "final"
    MODIFIER = "modifier"  # abstract, static, readonly, ...
    FUNCTION = "function"
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    VARIABLE = "variable"
    IDENTIFIER = "identifier"
    OBJECT_OPERATOR = "object_operator"
    OPEN_CURLY = "open_curly"
    CLOSE_CURLY = "close_curly"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"
    OPEN_SQUARE = "open_square"
    CLOSE_SQUARE = "close_square"
    ASSIGNMENT = "assignment"
    SEMICOLON = "semicolon"
    RETURN = "return"
    AT = "at"
    STRING_LITERAL = "string_literal"
    OTHER = "other"


VISIBILITY_KINDS: frozenset[TokenKind] = frozenset(
    {TokenKind.PUBLIC, TokenKind.PROTECTED, TokenKind.PRIVATE}
)

# Tokens skipped when walking back from a declaration to its doc comment
COMMENT_KINDS: frozenset[TokenKind] = frozenset(
    {
        TokenKind.DOC_COMMENT_OPEN,
        TokenKind.DOC_COMMENT_TAG,
        TokenKind.DOC_COMMENT_CLOSE,
        TokenKind.COMMENT,
        TokenKind.WHITESPACE,
    }
)

# A local search never crosses these
STATEMENT_END_KINDS: frozenset[TokenKind] = frozenset(
    {TokenKind.SEMICOLON, TokenKind.OPEN_CURLY, TokenKind.CLOSE_CURLY}
)

_BRACKET_PAIRS: dict[TokenKind, TokenKind] = {
    TokenKind.OPEN_CURLY: TokenKind.CLOSE_CURLY,
    TokenKind.OPEN_PAREN: TokenKind.CLOSE_PAREN,
    TokenKind.OPEN_SQUARE: TokenKind.CLOSE_SQUARE,
}
_CLOSERS: frozenset[TokenKind] = frozenset(_BRACKET_PAIRS.values())


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexical token. Lines and columns are 1-based."""

    kind: TokenKind
    text: str
    line: int = 1
    column: int = 1


def _as_kinds(kinds: TokenKind | Collection[TokenKind]) -> Collection[TokenKind]:
    if isinstance(kinds, TokenKind):
        return (kinds,)
    return kinds


class TokenStream:
    """Ordered, indexable tokens with bracket links and search helpers.

    Positions are list indices. Unbalanced brackets are left unmatched
    (``match`` returns None) so malformed input never aborts a scan.
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens: list[Token] = list(tokens)
        self._matches: dict[int, int] = {}
        self._link_brackets()

    def _link_brackets(self) -> None:
        stack: list[int] = []
        for pos, token in enumerate(self._tokens):
            if token.kind in _BRACKET_PAIRS:
                stack.append(pos)
            elif token.kind in _CLOSERS:
                # Pop until the matching opener; skipped openers stay unmatched
                for depth in range(len(stack) - 1, -1, -1):
                    opener = stack[depth]
                    if _BRACKET_PAIRS[self._tokens[opener].kind] is token.kind:
                        del stack[depth:]
                        self._matches[opener] = pos
                        self._matches[pos] = opener
                        break

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, pos: int) -> Token:
        return self._tokens[pos]

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def get(self, pos: int) -> Token | None:
        """Token at pos, or None when out of range."""
        if 0 <= pos < len(self._tokens):
            return self._tokens[pos]
        return None

    def match(self, pos: int) -> int | None:
        """Position of the bracket matching the one at pos."""
        return self._matches.get(pos)

    def find_next(
        self,
        kinds: TokenKind | Collection[TokenKind],
        start: int,
        end: int | None = None,
        *,
        local: bool = False,
        text: str | None = None,
    ) -> int | None:
        """First position >= start (and < end) holding one of kinds.

        With local=True the search stops at the end of the current statement.
        A statement-ending token that is itself searched for is still found.
        """
        wanted = _as_kinds(kinds)
        stop = len(self._tokens) if end is None else min(end, len(self._tokens))
        for pos in range(max(start, 0), stop):
            token = self._tokens[pos]
            if token.kind in wanted and (text is None or token.text == text):
                return pos
            if local and token.kind in STATEMENT_END_KINDS:
                return None
        return None

    def find_previous(
        self,
        kinds: TokenKind | Collection[TokenKind],
        start: int,
        end: int | None = None,
        *,
        local: bool = False,
        text: str | None = None,
    ) -> int | None:
        """Last position <= start (and >= end) holding one of kinds."""
        wanted = _as_kinds(kinds)
        lower = 0 if end is None else max(end, 0)
        for pos in range(min(start, len(self._tokens) - 1), lower - 1, -1):
            token = self._tokens[pos]
            if token.kind in wanted and (text is None or token.text == text):
                return pos
            if local and token.kind in STATEMENT_END_KINDS:
                return None
        return None

    def next_significant(self, pos: int) -> int | None:
        """First position after pos that is not a comment or whitespace."""
        for nxt in range(pos + 1, len(self._tokens)):
            if self._tokens[nxt].kind not in COMMENT_KINDS:
                return nxt
        return None

    def previous_significant(self, pos: int) -> int | None:
        """Last position before pos that is not a comment or whitespace."""
        for prev in range(min(pos, len(self._tokens)) - 1, -1, -1):
            if self._tokens[prev].kind not in COMMENT_KINDS:
                return prev
        return None

    def lookbehind(
        self, pos: int, stop: Callable[[Token], bool]
    ) -> Iterator[tuple[int, Token]]:
        """Yield (position, token) walking backwards from pos - 1.

        Iteration ends before the first token for which stop() is true, or at
        the start of the stream.
        """
        for prev in range(min(pos, len(self._tokens)) - 1, -1, -1):
            token = self._tokens[prev]
            if stop(token):
                return
            yield prev, token
