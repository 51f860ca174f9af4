"""Tokenizer turning host-language source text into a token tree.

The produced stream has the shape of a compiler token tree: identifiers,
single-character punctuation with joint/alone spacing, literals, and
delimited groups that own their inner tokens. Whitespace and comments are
discarded here and nowhere else.
"""

import re
import sys
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from rsx_parser.shared.errors import RsxSyntaxError
from rsx_parser.shared.logging import get_logger
from rsx_parser.tokenization.punctuation import PUNCT_CHARS

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF_")
_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    "'": "'",
    '"': '"',
}
_HEX_ESCAPE = re.compile(r"x([0-9a-fA-F]{2})")
_UNICODE_ESCAPE = re.compile(r"u\{([0-9a-fA-F][0-9a-fA-F_]{0,7})\}")
_MAX_ASCII = 0x7F
_SURROGATES = range(0xD800, 0xE000)


class TokenType(Enum):
    """Kinds of token trees produced by the tokenizer."""

    IDENT = auto()      # Identifier or keyword
    PUNCT = auto()      # Single punctuation character
    LITERAL = auto()    # String, char, byte or numeric literal
    GROUP = auto()      # Delimited group owning a nested stream


class Spacing(Enum):
    """Whether a punctuation token is immediately followed by another one."""

    ALONE = auto()
    JOINT = auto()


class Delimiter(Enum):
    """Group delimiters."""

    PARENTHESIS = ("(", ")")
    BRACKET = ("[", "]")
    BRACE = ("{", "}")

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]


_OPENERS = {d.open: d for d in Delimiter}
_CLOSERS = {d.close: d for d in Delimiter}


class LiteralKind(Enum):
    """Literal token flavours."""

    STRING = auto()
    RAW_STRING = auto()
    BYTE_STRING = auto()
    RAW_BYTE_STRING = auto()
    CHAR = auto()
    BYTE = auto()
    INTEGER = auto()
    FLOAT = auto()


_STRING_KINDS = (LiteralKind.STRING, LiteralKind.RAW_STRING)


@dataclass(frozen=True)
class TokenPosition:
    """Position information for tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass(frozen=True)
class Token:
    """A single token tree with its source position.

    Groups carry their delimiter, their inner ``stream`` and the position of
    the closing delimiter in ``end_position``.
    """

    type: TokenType
    value: str
    position: TokenPosition
    spacing: Spacing = Spacing.ALONE
    literal_kind: Optional[LiteralKind] = None
    delimiter: Optional[Delimiter] = None
    stream: Tuple["Token", ...] = ()
    end_position: Optional[TokenPosition] = None

    def __post_init__(self) -> None:
        """Validate token values."""
        if self.type is TokenType.GROUP and self.delimiter is None:
            raise ValueError("Group tokens require a delimiter")
        if self.type is TokenType.LITERAL and self.literal_kind is None:
            raise ValueError("Literal tokens require a literal kind")
        if self.type is TokenType.PUNCT and len(self.value) != 1:
            raise ValueError("Punctuation tokens hold exactly one character")
        if self.type is not TokenType.GROUP and self.stream:
            raise ValueError("Only group tokens may own a stream")

    @property
    def is_ident(self) -> bool:
        return self.type is TokenType.IDENT

    @property
    def is_literal(self) -> bool:
        return self.type is TokenType.LITERAL

    @property
    def is_joint(self) -> bool:
        return self.type is TokenType.PUNCT and self.spacing is Spacing.JOINT

    def is_punct(self, char: Optional[str] = None) -> bool:
        """Check for a punctuation token, optionally a specific character."""
        if self.type is not TokenType.PUNCT:
            return False
        return char is None or self.value == char

    def is_group(self, delimiter: Optional[Delimiter] = None) -> bool:
        """Check for a group token, optionally with a specific delimiter."""
        if self.type is not TokenType.GROUP:
            return False
        return delimiter is None or self.delimiter is delimiter

    def string_value(self) -> Optional[str]:
        """Decoded content of a string literal, ``None`` for anything else."""
        if self.literal_kind not in _STRING_KINDS:
            return None
        return decode_string_literal(self.value)

    def to_source(self) -> str:
        """Render the token back to source text."""
        if self.type is TokenType.GROUP:
            assert self.delimiter is not None
            inner = render_tokens(self.stream)
            return f"{self.delimiter.open}{inner}{self.delimiter.close}"
        return self.value


@dataclass(frozen=True)
class TokenStream:
    """Pre-materialized, random-access sequence of token trees."""

    tokens: Tuple[Token, ...]
    end_position: TokenPosition

    @classmethod
    def from_tokens(cls, tokens: Sequence[Token]) -> "TokenStream":
        """Wrap a token sequence, deriving the end position from its last token."""
        tokens = tuple(tokens)
        if not tokens:
            return cls((), TokenPosition(1, 1, 0))
        last = tokens[-1]
        return cls(tokens, last.end_position or last.position)

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    def to_source(self) -> str:
        return render_tokens(self.tokens)


def render_tokens(tokens: Sequence[Token]) -> str:
    """Render tokens as source text, gluing joint punctuation."""
    parts: List[str] = []
    for index, token in enumerate(tokens):
        parts.append(token.to_source())
        if index < len(tokens) - 1 and not token.is_joint:
            parts.append(" ")
    return "".join(parts)


def _match_escape(
    text: str,
    index: int,
    byte: bool = False,
    continuation: bool = True
) -> Optional[Tuple[int, str]]:
    """Match the escape sequence whose backslash sits at ``text[index]``.

    Args:
        text: Literal source text
        index: Offset of the backslash
        byte: Byte literals allow ``\\x`` up to ``FF`` but no ``\\u{...}``
        continuation: Whether a backslash-newline line continuation is allowed

    Returns:
        The offset just past the escape and its decoded value, or ``None``
        when the sequence is not a valid escape
    """
    escape = text[index + 1:index + 2]
    if escape in _SIMPLE_ESCAPES:
        return index + 2, _SIMPLE_ESCAPES[escape]
    if escape == "x":
        match = _HEX_ESCAPE.match(text, index + 1)
        if match is None:
            return None
        value = int(match.group(1), 16)
        if value > _MAX_ASCII and not byte:
            return None
        return match.end(), chr(value)
    if escape == "u" and not byte:
        match = _UNICODE_ESCAPE.match(text, index + 1)
        if match is None:
            return None
        value = int(match.group(1).replace("_", ""), 16)
        if value > sys.maxunicode or value in _SURROGATES:
            return None
        return match.end(), chr(value)
    if escape == "\n" and continuation:
        # Line continuation swallows the newline and leading whitespace
        end = index + 2
        while end < len(text) and text[end].isspace():
            end += 1
        return end, ""
    return None


def decode_string_literal(text: str) -> str:
    """Decode the source text of a (raw) string literal into its value.

    Raises:
        ValueError: On an invalid escape, which the tokenizer never produces
    """
    byte = text.startswith("b")
    if byte:
        text = text[1:]
    if text.startswith("r"):
        hashes = len(text) - len(text[1:].lstrip("#")) - 1
        return text[2 + hashes:len(text) - 1 - hashes]

    body = text[1:-1]
    out: List[str] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char != "\\":
            out.append(char)
            index += 1
            continue
        matched = _match_escape(body, index, byte=byte)
        if matched is None:
            raise ValueError(f"Invalid escape in {text!r}")
        index, value = matched
        out.append(value)
    return "".join(out)


class RsxTokenizer:
    """Lexes source text into a :class:`TokenStream`.

    The tokenizer is fail-fast: malformed literals, stray characters and
    unbalanced delimiters raise :class:`RsxSyntaxError` immediately.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "rsx_tokenizer")
        self._reset_state("")

    def _reset_state(self, source: str) -> None:
        self._source = source
        self._offset = 0
        self._line = 1
        self._column = 1

    def tokenize(self, source: str) -> TokenStream:
        """Tokenize ``source`` into a token tree.

        Raises:
            RsxSyntaxError: On any lexical error
        """
        self._reset_state(source)
        stack: List[Tuple[Delimiter, TokenPosition, List[Token]]] = []
        current: List[Token] = []

        while True:
            self._skip_trivia()
            if self._offset >= len(source):
                break
            char = source[self._offset]
            start = self._position()

            if char in _OPENERS:
                self._advance(1)
                stack.append((_OPENERS[char], start, current))
                current = []
            elif char in _CLOSERS:
                if not stack or stack[-1][0] is not _CLOSERS[char]:
                    raise RsxSyntaxError(
                        f"unexpected closing delimiter `{char}`", start
                    )
                delimiter, open_position, parent = stack.pop()
                self._advance(1)
                parent.append(Token(
                    type=TokenType.GROUP,
                    value=delimiter.open,
                    position=open_position,
                    delimiter=delimiter,
                    stream=tuple(current),
                    end_position=start,
                ))
                current = parent
            else:
                current.extend(self._lex_token(char, start))

        if stack:
            raise RsxSyntaxError("unclosed delimiter", stack[-1][1])

        stream = TokenStream(tuple(current), self._position())
        self.logger.debug(
            "Tokenization completed",
            extra={"token_count": len(stream), "character_count": len(source)}
        )
        return stream

    def _lex_token(self, char: str, start: TokenPosition) -> List[Token]:
        source = self._source
        nxt = source[self._offset + 1:self._offset + 2]

        if char == '"':
            return [self._lex_string(start, LiteralKind.STRING, prefix=0)]
        if char == "r" and (nxt == '"' or nxt == "#"):
            if nxt == "#" and self._is_ident_start(self._peek(2)):
                return [self._lex_ident(start, raw=True)]
            if self._looks_like_raw_string(1):
                return [self._lex_raw_string(start, LiteralKind.RAW_STRING, prefix=1)]
        if char == "b":
            if nxt == '"':
                return [self._lex_string(start, LiteralKind.BYTE_STRING, prefix=1)]
            if nxt == "'":
                return [self._lex_char(start, LiteralKind.BYTE, prefix=1)]
            if nxt == "r" and self._looks_like_raw_string(2):
                return [self._lex_raw_string(start, LiteralKind.RAW_BYTE_STRING, prefix=2)]
        if self._is_ident_start(char):
            return [self._lex_ident(start, raw=False)]
        if char.isdigit():
            return [self._lex_number(start)]
        if char == "'":
            return self._lex_quote(start)
        if char in PUNCT_CHARS:
            self._advance(1)
            return [self._punct(char, start)]
        raise RsxSyntaxError(f"unexpected character `{char}`", start)

    def _punct(self, char: str, start: TokenPosition) -> Token:
        spacing = Spacing.JOINT if self._peek(0) in PUNCT_CHARS else Spacing.ALONE
        return Token(TokenType.PUNCT, char, start, spacing=spacing)

    def _lex_ident(self, start: TokenPosition, raw: bool) -> Token:
        begin = self._offset
        self._advance(2 if raw else 1)
        while self._is_ident_continue(self._peek(0)):
            self._advance(1)
        return Token(TokenType.IDENT, self._source[begin:self._offset], start)

    def _lex_number(self, start: TokenPosition) -> Token:
        begin = self._offset
        kind = LiteralKind.INTEGER
        if self._source.startswith(("0x", "0o", "0b"), begin):
            self._advance(2)
            while self._peek(0) in _HEX_DIGITS:
                self._advance(1)
        else:
            self._consume_digits()
            if self._peek(0) == "." and self._peek(1).isdigit():
                kind = LiteralKind.FLOAT
                self._advance(1)
                self._consume_digits()
            if self._peek(0) in ("e", "E"):
                sign = 1 if self._peek(1) in ("+", "-") else 0
                if self._peek(1 + sign).isdigit():
                    kind = LiteralKind.FLOAT
                    self._advance(1 + sign)
                    self._consume_digits()
            if self._peek(0) == "f":
                kind = LiteralKind.FLOAT
        while self._is_ident_continue(self._peek(0)):
            self._advance(1)
        return Token(
            TokenType.LITERAL, self._source[begin:self._offset], start,
            literal_kind=kind,
        )

    def _lex_quote(self, start: TokenPosition) -> List[Token]:
        if self._peek(1) == "\\" or (self._peek(1) and self._peek(2) == "'"):
            return [self._lex_char(start, LiteralKind.CHAR, prefix=0)]
        if self._is_ident_start(self._peek(1)):
            # Lifetime: a joint quote glued to the following identifier
            self._advance(1)
            return [Token(TokenType.PUNCT, "'", start, spacing=Spacing.JOINT)]
        raise RsxSyntaxError("unterminated character literal", start)

    def _lex_char(self, start: TokenPosition, kind: LiteralKind, prefix: int) -> Token:
        begin = self._offset
        self._advance(prefix + 1)
        while True:
            char = self._peek(0)
            if not char or char == "\n" or (char == "\\" and not self._peek(1)):
                raise RsxSyntaxError("unterminated character literal", start)
            if char == "\\":
                self._lex_escape(byte=kind is LiteralKind.BYTE, continuation=False)
                continue
            self._advance(1)
            if char == "'":
                break
        return Token(
            TokenType.LITERAL, self._source[begin:self._offset], start,
            literal_kind=kind,
        )

    def _lex_string(self, start: TokenPosition, kind: LiteralKind, prefix: int) -> Token:
        begin = self._offset
        self._advance(prefix + 1)
        while True:
            char = self._peek(0)
            if not char or (char == "\\" and not self._peek(1)):
                raise RsxSyntaxError("unterminated string literal", start)
            if char == "\\":
                self._lex_escape(byte=kind is LiteralKind.BYTE_STRING, continuation=True)
                continue
            self._advance(1)
            if char == '"':
                break
        return Token(
            TokenType.LITERAL, self._source[begin:self._offset], start,
            literal_kind=kind,
        )

    def _lex_escape(self, byte: bool, continuation: bool) -> None:
        matched = _match_escape(
            self._source, self._offset, byte=byte, continuation=continuation
        )
        if matched is None:
            raise RsxSyntaxError("invalid escape", self._position())
        self._advance(matched[0] - self._offset)

    def _lex_raw_string(self, start: TokenPosition, kind: LiteralKind, prefix: int) -> Token:
        begin = self._offset
        self._advance(prefix)
        hashes = 0
        while self._peek(0) == "#":
            hashes += 1
            self._advance(1)
        self._advance(1)  # opening quote
        terminator = '"' + "#" * hashes
        end = self._source.find(terminator, self._offset)
        if end < 0:
            raise RsxSyntaxError("unterminated raw string literal", start)
        self._advance(end + len(terminator) - self._offset)
        return Token(
            TokenType.LITERAL, self._source[begin:self._offset], start,
            literal_kind=kind,
        )

    def _looks_like_raw_string(self, offset: int) -> bool:
        while self._peek(offset) == "#":
            offset += 1
        return self._peek(offset) == '"'

    def _consume_digits(self) -> None:
        while self._peek(0).isdigit() or self._peek(0) == "_":
            self._advance(1)

    def _skip_trivia(self) -> None:
        source = self._source
        while self._offset < len(source):
            char = source[self._offset]
            if char.isspace():
                self._advance(1)
            elif source.startswith("//", self._offset):
                end = source.find("\n", self._offset)
                self._advance((len(source) if end < 0 else end) - self._offset)
            elif source.startswith("/*", self._offset):
                self._skip_block_comment()
            else:
                break

    def _skip_block_comment(self) -> None:
        start = self._position()
        depth = 0
        while self._offset < len(self._source):
            if self._source.startswith("/*", self._offset):
                depth += 1
                self._advance(2)
            elif self._source.startswith("*/", self._offset):
                depth -= 1
                self._advance(2)
                if depth == 0:
                    return
            else:
                self._advance(1)
        raise RsxSyntaxError("unterminated block comment", start)

    def _peek(self, ahead: int) -> str:
        index = self._offset + ahead
        return self._source[index:index + 1]

    def _advance(self, count: int) -> None:
        for char in self._source[self._offset:self._offset + count]:
            if char == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
        self._offset = min(self._offset + count, len(self._source))

    def _position(self) -> TokenPosition:
        return TokenPosition(self._line, self._column, self._offset)

    @staticmethod
    def _is_ident_start(char: str) -> bool:
        return bool(char) and (char == "_" or char.isalpha())

    @staticmethod
    def _is_ident_continue(char: str) -> bool:
        return bool(char) and (char == "_" or char.isalnum())


def tokenize(
    source: Union[str, TokenStream],
    correlation_id: Optional[str] = None
) -> TokenStream:
    """Tokenize source text; an existing stream is returned unchanged."""
    if isinstance(source, TokenStream):
        return source
    return RsxTokenizer(correlation_id=correlation_id).tokenize(source)
