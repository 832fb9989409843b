"""Tests for parsing/tokens.py module.

Covers:
- Bracket matching, including unbalanced input
- find_next / find_previous with local statement bounds
- Significant-token navigation
- lookbehind stop predicate
"""

from __future__ import annotations

import pytest

from dcilint.parsing.tokens import Token, TokenKind, TokenStream

K = TokenKind


def stream_of(*kinds: TokenKind) -> TokenStream:
    return TokenStream([Token(kind, kind.value) for kind in kinds])


class TestMatching:
    """Bracket matching."""

    def test_nested_pairs(self) -> None:
        """Nested brackets link both ways."""
        stream = stream_of(K.OPEN_CURLY, K.OPEN_PAREN, K.CLOSE_PAREN, K.OPEN_SQUARE, K.CLOSE_SQUARE, K.CLOSE_CURLY)

        assert stream.match(0) == 5
        assert stream.match(5) == 0
        assert stream.match(1) == 2
        assert stream.match(3) == 4

    def test_unbalanced_opener_left_unmatched(self) -> None:
        """An unclosed opener has no match."""
        stream = stream_of(K.OPEN_CURLY, K.OPEN_PAREN, K.CLOSE_CURLY)

        assert stream.match(0) == 2
        assert stream.match(1) is None

    def test_stray_closer_ignored(self) -> None:
        """A closer without an opener has no match."""
        stream = stream_of(K.CLOSE_PAREN, K.OPEN_CURLY, K.CLOSE_CURLY)

        assert stream.match(0) is None
        assert stream.match(1) == 2

    def test_non_bracket(self) -> None:
        """Non-bracket tokens have no match."""
        assert stream_of(K.SEMICOLON).match(0) is None


class TestFind:
    """Forward and backward searches."""

    @pytest.fixture
    def stream(self) -> TokenStream:
        # private $x ; public function f ( ) { }
        return stream_of(
            K.PRIVATE,
            K.VARIABLE,
            K.SEMICOLON,
            K.PUBLIC,
            K.FUNCTION,
            K.IDENTIFIER,
            K.OPEN_PAREN,
            K.CLOSE_PAREN,
            K.OPEN_CURLY,
            K.CLOSE_CURLY,
        )

    def test_find_next_is_inclusive(self, stream: TokenStream) -> None:
        """The start position itself can match."""
        assert stream.find_next(K.PRIVATE, 0) == 0

    def test_find_next_crosses_statements(self, stream: TokenStream) -> None:
        """Unbounded search crosses statement ends."""
        assert stream.find_next(K.FUNCTION, 0) == 4

    def test_local_search_stops_at_statement_end(self, stream: TokenStream) -> None:
        """Local search stops at the end of the statement."""
        assert stream.find_next(K.FUNCTION, 0, local=True) is None
        assert stream.find_next(K.FUNCTION, 3, local=True) == 4

    def test_local_search_finds_wanted_terminator(self, stream: TokenStream) -> None:
        """A wanted terminator is still found by a local search."""
        assert stream.find_next({K.OPEN_CURLY, K.SEMICOLON}, 3, local=True) == 8

    def test_end_bound(self, stream: TokenStream) -> None:
        """Search stops at the end bound."""
        assert stream.find_next(K.OPEN_CURLY, 0, end=8) is None

    def test_text_filter(self) -> None:
        """Search can require exact token text."""
        stream = TokenStream([Token(K.VARIABLE, "$a"), Token(K.VARIABLE, "$this")])

        assert stream.find_next(K.VARIABLE, 0, text="$this") == 1

    def test_find_previous(self, stream: TokenStream) -> None:
        """Backward search honors local bounds too."""
        assert stream.find_previous(K.PUBLIC, 7) == 3
        assert stream.find_previous(K.PRIVATE, 7, local=True) is None


class TestNavigation:
    """Stepping through the stream."""

    def test_get_out_of_range(self) -> None:
        """Out-of-range positions give None."""
        stream = stream_of(K.SEMICOLON)

        assert stream.get(1) is None
        assert stream.get(-1) is None

    def test_significant_skips_comments(self) -> None:
        """Significant-token steps skip comments."""
        stream = stream_of(K.RETURN, K.COMMENT, K.DOC_COMMENT_OPEN, K.DOC_COMMENT_CLOSE, K.VARIABLE)

        assert stream.next_significant(0) == 4
        assert stream.previous_significant(4) == 0
        assert stream.previous_significant(0) is None

    def test_lookbehind_stops_before_predicate(self) -> None:
        """Lookbehind stops before the first matching token."""
        stream = stream_of(K.SEMICOLON, K.FINAL, K.MODIFIER, K.PUBLIC, K.FUNCTION)

        walked = list(stream.lookbehind(4, lambda t: t.kind is K.SEMICOLON))

        assert [pos for pos, _ in walked] == [3, 2, 1]

    def test_lookbehind_to_stream_start(self) -> None:
        """Lookbehind runs to the stream start when nothing matches."""
        stream = stream_of(K.FINAL, K.CLASS)

        assert [t.kind for _, t in stream.lookbehind(1, lambda t: False)] == [K.FINAL]

    def test_sequence_protocol(self) -> None:
        """The stream supports len and iteration."""
        stream = stream_of(K.OPEN_TAG, K.SEMICOLON)

        assert len(stream) == 2
        assert [t.kind for t in stream] == [K.OPEN_TAG, K.SEMICOLON]
