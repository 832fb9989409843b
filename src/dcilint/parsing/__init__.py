"""Parsing module - token stream adapter and host lexers."""

from dcilint.parsing.php import PhpTokenizer
from dcilint.parsing.tokens import Token, TokenKind, TokenStream

__all__ = [
    "PhpTokenizer",
    "Token",
    "TokenKind",
    "TokenStream",
]
