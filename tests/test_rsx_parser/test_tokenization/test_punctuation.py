"""Tests for the punctuation lexeme table."""

from rsx_parser.tokenization.punctuation import (
    BINARY_OPERATORS,
    PUNCT_CHARS,
    PUNCTUATION,
    UNARY_OPERATORS,
    is_lexeme,
)


def test_known_lexemes():
    assert is_lexeme("-")
    assert is_lexeme("::")
    assert is_lexeme("..=")


def test_unknown_lexeme():
    assert not is_lexeme("<>")
    assert not is_lexeme(":::")


def test_lexemes_are_built_from_punct_chars():
    for lexeme in PUNCTUATION:
        assert all(char in PUNCT_CHARS for char in lexeme)


def test_operators_are_lexemes():
    assert all(is_lexeme(op) for op in BINARY_OPERATORS + UNARY_OPERATORS)


def test_binary_operators_longest_first():
    for index, operator in enumerate(BINARY_OPERATORS):
        for later in BINARY_OPERATORS[index + 1:]:
            assert not later.startswith(operator) or len(later) <= len(operator)
