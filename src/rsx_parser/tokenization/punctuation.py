"""Static table of punctuation lexemes recognized over the token stream.

The tokenizer emits one ``PUNCT`` token per character; operators spanning
several characters are recognized at parse time from this table, requiring
every character but the last to be joint with its successor.
"""

from typing import FrozenSet

# Characters the tokenizer emits as punctuation
PUNCT_CHARS: FrozenSet[str] = frozenset("=<>!~+-*/%^&|@.,;:#$?'")

# Lexemes the grammar may ask for
PUNCTUATION: FrozenSet[str] = frozenset({
    "::", "->", "=>", "..=", "...", "..",
    "==", "!=", "<=", ">=", "&&", "||", "<<", ">>",
    "+=", "-=", "*=", "/=", "%=", "^=", "&=", "|=", "<<=", ">>=",
    "-", ":", "=", "<", ">", "/", ".", "!", "?", "&", "*",
    "+", "%", "^", "|",
})

# Binary operators accepted inside a captured host expression, longest first
# so that the scanner never splits a multi-character operator.
BINARY_OPERATORS = (
    "..=", "<<", ">>", "..", "==", "!=", "<=", ">=", "&&", "||",
    "+", "-", "*", "/", "%", "^", "&", "|", "<", ">",
)

# Prefix operators accepted in front of an operand
UNARY_OPERATORS = ("-", "!", "*", "&")


def is_lexeme(text: str) -> bool:
    """Check whether ``text`` is a known punctuation lexeme."""
    return text in PUNCTUATION
