"""Tests for the fork/commit token cursor."""

import pytest

from rsx_parser.shared import RsxSyntaxError
from rsx_parser.tokenization import Delimiter, TokenCursor, tokenize


def cursor_for(source: str) -> TokenCursor:
    return TokenCursor.from_stream(tokenize(source))


class TestFork:
    """Speculative copies and commits."""

    def test_fork_is_independent(self):
        cursor = cursor_for("a b c")
        fork = cursor.fork()

        fork.next_token()
        fork.next_token()

        assert cursor.index == 0
        assert fork.index == 2

    def test_advance_to_commits_fork(self):
        cursor = cursor_for("a b c")
        fork = cursor.fork()
        fork.next_token()

        cursor.advance_to(fork)

        assert cursor.index == 1
        assert cursor.peek().value == "b"

    def test_tokens_until_fork(self):
        cursor = cursor_for("a b c")
        fork = cursor.fork()
        fork.next_token()
        fork.next_token()

        assert [t.value for t in cursor.tokens_until(fork)] == ["a", "b"]

    def test_advance_to_foreign_fork_rejected(self):
        cursor = cursor_for("a b")
        other = cursor_for("a b")

        with pytest.raises(ValueError, match="not created from this cursor"):
            cursor.advance_to(other.fork())

    def test_advance_to_stale_fork_rejected(self):
        cursor = cursor_for("a b")
        stale = cursor.fork()
        cursor.next_token()

        with pytest.raises(ValueError, match="behind"):
            cursor.advance_to(stale)


class TestPrimitives:
    """Token-level parsing primitives."""

    def test_multi_character_lexeme_requires_joint_spacing(self):
        joined = cursor_for("::x")
        spaced = cursor_for(": :x")

        assert joined.peek_punct("::")
        assert not spaced.peek_punct("::")
        assert spaced.peek_punct(":")

    def test_single_character_lexeme_ignores_spacing(self):
        cursor = cursor_for("::x")
        assert cursor.peek_punct(":")

    def test_parse_punct_failure_does_not_advance(self):
        cursor = cursor_for("a")

        with pytest.raises(RsxSyntaxError, match="expected `>`"):
            cursor.parse_punct(">")

        assert cursor.index == 0

    def test_parse_punct_consumes_every_character(self):
        cursor = cursor_for("::x")

        tokens = cursor.parse_punct("::")

        assert len(tokens) == 2
        assert cursor.peek().value == "x"

    def test_unknown_lexeme_rejected(self):
        with pytest.raises(ValueError, match="Unknown punctuation lexeme"):
            cursor_for("<>").peek_punct("<>")

    def test_parse_ident_accepts_keywords(self):
        assert cursor_for("type").parse_ident().value == "type"

    def test_parse_group_reports_expected_delimiter(self):
        cursor = cursor_for("(x)")

        with pytest.raises(RsxSyntaxError, match="expected curly braces"):
            cursor.parse_group(Delimiter.BRACE)

        assert cursor.parse_group(Delimiter.PARENTHESIS).is_group()

    def test_next_token_at_end_of_input(self):
        cursor = cursor_for("")

        with pytest.raises(RsxSyntaxError, match="unexpected end of input"):
            cursor.next_token()

    def test_error_at_end_uses_stream_end(self):
        stream = tokenize("a")
        cursor = TokenCursor.from_stream(stream)
        cursor.next_token()

        error = cursor.error("boom")

        assert error.position == stream.end_position
