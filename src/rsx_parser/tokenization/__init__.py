"""Tokenization layer for rsx parsing.

This module turns host-language source text into a token tree and provides
the cursor primitive every grammar rule is written against.

Key Components:
    RsxTokenizer: Lexes source text into a TokenStream
    Token: A single token tree (identifier, punctuation, literal or group)
    TokenStream: Random-access sequence of tokens with an end position
    TokenCursor: Fork/commit cursor providing all backtracking
    PUNCTUATION: Static set of punctuation lexemes
"""

from .cursor import TokenCursor
from .punctuation import BINARY_OPERATORS, PUNCTUATION, UNARY_OPERATORS
from .tokenizer import (
    Delimiter,
    LiteralKind,
    RsxTokenizer,
    Spacing,
    Token,
    TokenPosition,
    TokenStream,
    TokenType,
    render_tokens,
    tokenize,
)

__all__ = [
    "BINARY_OPERATORS",
    "Delimiter",
    "LiteralKind",
    "PUNCTUATION",
    "RsxTokenizer",
    "Spacing",
    "Token",
    "TokenCursor",
    "TokenPosition",
    "TokenStream",
    "TokenType",
    "UNARY_OPERATORS",
    "render_tokens",
    "tokenize",
]
