"""PHP host lexer: tree-sitter-php syntax tree -> TokenStream.

Walks the tree in source order and emits one token per leaf, with a few
subtrees kept atomic:

- ``variable_name`` becomes a single VARIABLE token (``$this``)
- string, heredoc and nowdoc literals become a single STRING_LITERAL token
- ``*_modifier`` nodes become one token classified by their keyword
- doc comments are split into open / tag / close tokens so tags can be
  found and walked back over like any other token
"""

from __future__ import annotations

import importlib
import re
from typing import Any

import tree_sitter

from dcilint.core.errors import ParseError
from dcilint.core.logging import get_logger
from dcilint.parsing.tokens import Token, TokenKind, TokenStream

log = get_logger(__name__)

_GRAMMAR_MODULE = "tree_sitter_php"
_LANGUAGE_FUNC = "language_php"

_ATOMIC_STRING_TYPES: frozenset[str] = frozenset(
    {"string", "encapsed_string", "heredoc", "nowdoc", "shell_command_expression"}
)

_PUNCTUATION: dict[str, TokenKind] = {
    "{": TokenKind.OPEN_CURLY,
    "}": TokenKind.CLOSE_CURLY,
    "(": TokenKind.OPEN_PAREN,
    ")": TokenKind.CLOSE_PAREN,
    "[": TokenKind.OPEN_SQUARE,
    "]": TokenKind.CLOSE_SQUARE,
    ";": TokenKind.SEMICOLON,
    "->": TokenKind.OBJECT_OPERATOR,
    "?->": TokenKind.OBJECT_OPERATOR,
    "@": TokenKind.AT,
}

_ASSIGNMENT_OPERATORS: frozenset[str] = frozenset(
    {"=", "+=", "-=", "*=", "/=", ".=", "%=", "**=", "??=", "&=", "|=", "^=", "<<=", ">>="}
)

_KEYWORDS: dict[str, TokenKind] = {
    "class": TokenKind.CLASS,
    "function": TokenKind.FUNCTION,
    "return": TokenKind.RETURN,
    "final": TokenKind.FINAL,
    "public": TokenKind.PUBLIC,
    "protected": TokenKind.PROTECTED,
    "private": TokenKind.PRIVATE,
    "abstract": TokenKind.MODIFIER,
    "static": TokenKind.MODIFIER,
    "readonly": TokenKind.MODIFIER,
    "var": TokenKind.MODIFIER,
}

# "@tag" inside a doc comment, but not the "@" of an e-mail address
_DOC_TAG_RE = re.compile(r"(?<![\w@])@[A-Za-z_][\w-]*")


def _position_at(text: str, offset: int, line: int, column: int) -> tuple[int, int]:
    """Line/column of text[offset] given that text starts at (line, column)."""
    before = text[:offset]
    newlines = before.count("\n")
    if newlines == 0:
        return line, column + offset
    return line + newlines, offset - before.rfind("\n")


def _comment_tokens(text: str, line: int, column: int) -> list[Token]:
    if not text.startswith("/**"):
        return [Token(TokenKind.COMMENT, text, line, column)]

    tokens = [Token(TokenKind.DOC_COMMENT_OPEN, "/**", line, column)]
    for match in _DOC_TAG_RE.finditer(text):
        tag_line, tag_column = _position_at(text, match.start(), line, column)
        tokens.append(Token(TokenKind.DOC_COMMENT_TAG, match.group(0), tag_line, tag_column))
    close_line, close_column = _position_at(text, max(len(text) - 2, 0), line, column)
    tokens.append(Token(TokenKind.DOC_COMMENT_CLOSE, "*/", close_line, close_column))
    return tokens


def _classify_leaf(node: Any, text: str) -> TokenKind:
    if node.is_named:
        if node.type == "name":
            return TokenKind.IDENTIFIER
        if node.type == "php_tag":
            return TokenKind.OPEN_TAG
        return TokenKind.OTHER
    if text in _PUNCTUATION:
        return _PUNCTUATION[text]
    if text in _ASSIGNMENT_OPERATORS:
        return TokenKind.ASSIGNMENT
    return _KEYWORDS.get(text.lower(), TokenKind.OTHER)


class PhpTokenizer:
    """Turns PHP source into a TokenStream.

    The grammar is loaded on first use; a missing tree-sitter-php
    installation raises ParseError rather than ImportError.
    """

    def __init__(self) -> None:
        self._parser: tree_sitter.Parser | None = None

    def _get_parser(self) -> tree_sitter.Parser:
        if self._parser is not None:
            return self._parser
        try:
            mod = importlib.import_module(_GRAMMAR_MODULE)
            language = tree_sitter.Language(getattr(mod, _LANGUAGE_FUNC)())
        except (ImportError, AttributeError) as err:
            raise ParseError.grammar_unavailable("php", str(err)) from err
        self._parser = tree_sitter.Parser(language)
        return self._parser

    def tokenize(self, source: bytes | str) -> TokenStream:
        """Parse source and flatten it into tokens in source order."""
        content = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._get_parser().parse(content)
        if tree.root_node.has_error:
            log.debug("php_parse_errors", size=len(content))
        return TokenStream(self._flatten(tree.root_node, content))

    def _flatten(self, root: Any, content: bytes) -> list[Token]:
        tokens: list[Token] = []
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_missing or node.start_byte == node.end_byte:
                continue

            text = content[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
            line = node.start_point[0] + 1
            column = node.start_point[1] + 1

            if node.type == "comment":
                tokens.extend(_comment_tokens(text, line, column))
            elif node.type == "variable_name":
                tokens.append(Token(TokenKind.VARIABLE, text, line, column))
            elif node.type in _ATOMIC_STRING_TYPES:
                tokens.append(Token(TokenKind.STRING_LITERAL, text, line, column))
            elif node.type.endswith("_modifier"):
                keyword = text.split("(")[0].strip().lower()
                tokens.append(Token(_KEYWORDS.get(keyword, TokenKind.MODIFIER), text, line, column))
            elif node.child_count == 0:
                tokens.append(Token(_classify_leaf(node, text), text, line, column))
            else:
                stack.extend(reversed(node.children))
        return tokens
