"""Tests for the source tokenizer."""

import pytest

from rsx_parser.shared import RsxSyntaxError
from rsx_parser.tokenization import (
    Delimiter,
    LiteralKind,
    RsxTokenizer,
    Spacing,
    Token,
    TokenPosition,
    TokenStream,
    TokenType,
    tokenize,
)


def values(stream):
    return [token.value for token in stream]


class TestTokenPosition:
    """Tests for TokenPosition."""

    def test_token_position_creation(self):
        pos = TokenPosition(line=5, column=10, offset=50)
        assert (pos.line, pos.column, pos.offset) == (5, 10, 50)

    def test_token_position_validation(self):
        with pytest.raises(ValueError, match="Line number must be >= 1"):
            TokenPosition(line=0, column=1, offset=0)
        with pytest.raises(ValueError, match="Column number must be >= 1"):
            TokenPosition(line=1, column=0, offset=0)
        with pytest.raises(ValueError, match="Offset must be >= 0"):
            TokenPosition(line=1, column=1, offset=-1)


class TestToken:
    """Tests for Token validation."""

    def test_group_requires_delimiter(self):
        with pytest.raises(ValueError, match="Group tokens require a delimiter"):
            Token(TokenType.GROUP, "{", TokenPosition(1, 1, 0))

    def test_punct_is_single_character(self):
        with pytest.raises(ValueError, match="exactly one character"):
            Token(TokenType.PUNCT, "::", TokenPosition(1, 1, 0))


class TestRsxTokenizer:
    """Tests for RsxTokenizer."""

    def test_markup_tokens(self):
        stream = tokenize("<foo></foo>")

        assert values(stream) == ["<", "foo", ">", "<", "/", "foo", ">"]
        assert [t.type for t in stream][:2] == [TokenType.PUNCT, TokenType.IDENT]

    def test_punct_spacing(self):
        stream = tokenize("some::path : x")

        assert stream[1].spacing is Spacing.JOINT
        assert stream[2].spacing is Spacing.ALONE
        assert stream[4].spacing is Spacing.ALONE

    def test_positions_track_lines(self):
        stream = tokenize("<a>\n  <b/>")

        assert stream[3].position == TokenPosition(2, 3, 6)
        assert stream.end_position == TokenPosition(2, 7, 10)

    def test_groups_own_their_tokens(self):
        stream = tokenize("{hello}")

        assert len(stream) == 1
        group = stream[0]
        assert group.is_group(Delimiter.BRACE)
        assert values(group.stream) == ["hello"]
        assert group.end_position == TokenPosition(1, 7, 6)
        assert group.to_source() == "{hello}"

    def test_nested_groups(self):
        stream = tokenize("f([a], {b})")

        call = stream[1]
        assert call.is_group(Delimiter.PARENTHESIS)
        assert call.stream[0].is_group(Delimiter.BRACKET)
        assert call.stream[2].is_group(Delimiter.BRACE)

    def test_string_literals(self):
        stream = tokenize(r'"moo" "a\"b\n" r#"x"y"# b"bytes"')

        assert [t.literal_kind for t in stream] == [
            LiteralKind.STRING,
            LiteralKind.STRING,
            LiteralKind.RAW_STRING,
            LiteralKind.BYTE_STRING,
        ]
        assert stream[0].string_value() == "moo"
        assert stream[1].string_value() == 'a"b\n'
        assert stream[2].string_value() == 'x"y'
        assert stream[3].string_value() is None

    def test_unicode_escape(self):
        assert tokenize(r'"\u{48}i"')[0].string_value() == "Hi"
        assert tokenize(r'"\u{1F6_00}"')[0].string_value() == "\U0001F600"

    def test_hex_and_continuation_escapes(self):
        stream = tokenize('"\\x41\\\n    b" b"\\xff" b\'\\x80\'')

        assert stream[0].string_value() == "Ab"
        assert stream[1].literal_kind is LiteralKind.BYTE_STRING
        assert stream[2].literal_kind is LiteralKind.BYTE

    def test_invalid_escape_position(self):
        with pytest.raises(RsxSyntaxError) as info:
            tokenize('<a>\n"ok \\q"')

        assert info.value.message == "invalid escape"
        assert info.value.position == TokenPosition(2, 5, 8)

    @pytest.mark.parametrize("source,kind", [
        ("42", LiteralKind.INTEGER),
        ("1_000", LiteralKind.INTEGER),
        ("10u8", LiteralKind.INTEGER),
        ("0xff", LiteralKind.INTEGER),
        ("1.5", LiteralKind.FLOAT),
        ("1e3", LiteralKind.FLOAT),
        ("2f32", LiteralKind.FLOAT),
    ])
    def test_numeric_literals(self, source, kind):
        stream = tokenize(source)

        assert len(stream) == 1
        assert stream[0].literal_kind is kind
        assert stream[0].value == source

    def test_range_is_not_a_float(self):
        assert values(tokenize("1..2")) == ["1", ".", ".", "2"]

    def test_char_literal_and_lifetime(self):
        stream = tokenize("'a' 'b")

        assert stream[0].literal_kind is LiteralKind.CHAR
        assert stream[0].value == "'a'"
        assert stream[1].is_punct("'") and stream[1].is_joint
        assert stream[2].value == "b"

    def test_raw_identifier(self):
        stream = tokenize("r#type")

        assert stream[0].type is TokenType.IDENT
        assert stream[0].value == "r#type"

    def test_comments_are_discarded(self):
        source = "a // line\n/* block /* nested */ */ b"
        assert values(tokenize(source)) == ["a", "b"]

    def test_keywords_are_identifiers(self):
        stream = tokenize("type self Self crate super")
        assert all(t.is_ident for t in stream)

    @pytest.mark.parametrize("source,message", [
        ('"open', "unterminated string literal"),
        ("r#\"open", "unterminated raw string literal"),
        ("/* open", "unterminated block comment"),
        ("a)", "unexpected closing delimiter `)`"),
        ("(a]", "unexpected closing delimiter `]`"),
        ("{a", "unclosed delimiter"),
        ("a ` b", "unexpected character `"),
        (r'"\q"', "invalid escape"),
        (r'"\x4"', "invalid escape"),
        (r'"\x80"', "invalid escape"),
        (r'"\u{110000}"', "invalid escape"),
        (r'"\u{D800}"', "invalid escape"),
        (r'"\u{}"', "invalid escape"),
        (r'b"\u{41}"', "invalid escape"),
        (r"'\q'", "invalid escape"),
        ('"\\', "unterminated string literal"),
    ])
    def test_lexical_errors(self, source, message):
        with pytest.raises(RsxSyntaxError) as info:
            RsxTokenizer().tokenize(source)

        assert info.value.message.startswith(message)
        assert info.value.position is not None

    def test_tokenize_passes_streams_through(self):
        stream = tokenize("<a/>")
        assert tokenize(stream) is stream

    def test_render_glues_joint_punctuation(self):
        assert tokenize("a::b").to_source() == "a :: b"


class TestTokenStream:
    """Tests for TokenStream construction."""

    def test_from_tokens_uses_last_token_position(self):
        tokens = list(tokenize("<a/>"))
        stream = TokenStream.from_tokens(tokens)

        assert stream.tokens == tuple(tokens)
        assert stream.end_position == tokens[-1].position

    def test_from_empty_tokens(self):
        stream = TokenStream.from_tokens([])

        assert len(stream) == 0
        assert stream.end_position == TokenPosition(1, 1, 0)
