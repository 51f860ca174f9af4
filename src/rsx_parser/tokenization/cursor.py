"""Position-tracked cursor over a token stream with fork/commit backtracking.

Every grammar rule is attempted against a cursor and must leave it untouched
when it fails. Rules that need to look further ahead than a single token work
on a :meth:`TokenCursor.fork` and, once they succeed, commit the progress
with :meth:`TokenCursor.advance_to`. A discarded fork leaves no trace.
"""

from typing import Optional, Sequence, Tuple

from rsx_parser.shared.errors import RsxSyntaxError
from rsx_parser.tokenization.punctuation import PUNCT_CHARS, is_lexeme
from rsx_parser.tokenization.tokenizer import (
    Delimiter,
    Token,
    TokenPosition,
    TokenStream,
)

_GROUP_EXPECTATIONS = {
    None: "expected group",
    Delimiter.BRACE: "expected curly braces",
    Delimiter.PARENTHESIS: "expected parentheses",
    Delimiter.BRACKET: "expected square brackets",
}


class TokenCursor:
    """Index into one level of a pre-materialized token tuple."""

    __slots__ = ("_tokens", "_index", "_end_position")

    def __init__(
        self,
        tokens: Sequence[Token],
        end_position: TokenPosition,
        index: int = 0
    ) -> None:
        self._tokens: Tuple[Token, ...] = tuple(tokens)
        self._end_position = end_position
        self._index = index

    @classmethod
    def from_stream(cls, stream: TokenStream) -> "TokenCursor":
        return cls(stream.tokens, stream.end_position)

    @property
    def index(self) -> int:
        return self._index

    @property
    def position(self) -> TokenPosition:
        """Position of the next token, or the stream end when exhausted."""
        if self._index < len(self._tokens):
            return self._tokens[self._index].position
        return self._end_position

    def fork(self) -> "TokenCursor":
        """Independent snapshot sharing the same tokens."""
        return TokenCursor(self._tokens, self._end_position, self._index)

    def advance_to(self, fork: "TokenCursor") -> None:
        """Commit a fork by moving this cursor to the fork's position."""
        if fork._tokens is not self._tokens:
            raise ValueError("Fork was not created from this cursor")
        if fork._index < self._index:
            raise ValueError("Fork is behind the cursor it commits to")
        self._index = fork._index

    def tokens_until(self, fork: "TokenCursor") -> Tuple[Token, ...]:
        """Tokens between this cursor and a fork that has moved ahead of it."""
        return self._tokens[self._index:fork._index]

    def is_empty(self) -> bool:
        return self._index >= len(self._tokens)

    def remaining(self) -> int:
        return max(len(self._tokens) - self._index, 0)

    def peek(self, ahead: int = 0) -> Optional[Token]:
        index = self._index + ahead
        if index < len(self._tokens):
            return self._tokens[index]
        return None

    def error(self, message: str) -> RsxSyntaxError:
        """Build a syntax error located at the current position."""
        return RsxSyntaxError(message, self.position)

    def next_token(self) -> Token:
        """Consume any single token tree."""
        token = self.peek()
        if token is None:
            raise self.error("unexpected end of input, expected token tree")
        self._index += 1
        return token

    def peek_ident(self, ahead: int = 0) -> bool:
        """Check for an identifier; reserved keywords count as identifiers."""
        token = self.peek(ahead)
        return token is not None and token.is_ident

    def parse_ident(self) -> Token:
        if not self.peek_ident():
            raise self.error("expected identifier")
        return self.next_token()

    def peek_keyword(self, keyword: str) -> bool:
        token = self.peek()
        return token is not None and token.is_ident and token.value == keyword

    def peek_punct(self, lexeme: str, ahead: int = 0) -> bool:
        """Check for a punctuation lexeme.

        Every character but the last must be joint with its successor, so
        ``: :`` never reads as ``::`` while ``::`` still satisfies a ``:``
        peek on its first character.
        """
        if len(lexeme) > 1 and not is_lexeme(lexeme):
            raise ValueError(f"Unknown punctuation lexeme {lexeme!r}")
        if any(char not in PUNCT_CHARS for char in lexeme):
            raise ValueError(f"Not a punctuation lexeme {lexeme!r}")
        for offset, char in enumerate(lexeme):
            token = self.peek(ahead + offset)
            if token is None or not token.is_punct(char):
                return False
            if offset < len(lexeme) - 1 and not token.is_joint:
                return False
        return True

    def parse_punct(self, lexeme: str) -> Tuple[Token, ...]:
        if not self.peek_punct(lexeme):
            raise self.error(f"expected `{lexeme}`")
        start = self._index
        self._index += len(lexeme)
        return self._tokens[start:self._index]

    def parse_optional_punct(self, lexeme: str) -> Optional[Tuple[Token, ...]]:
        if self.peek_punct(lexeme):
            return self.parse_punct(lexeme)
        return None

    def peek_literal(self) -> bool:
        token = self.peek()
        return token is not None and token.is_literal

    def parse_literal(self) -> Token:
        if not self.peek_literal():
            raise self.error("expected literal")
        return self.next_token()

    def peek_group(self, delimiter: Optional[Delimiter] = None) -> bool:
        token = self.peek()
        return token is not None and token.is_group(delimiter)

    def parse_group(self, delimiter: Optional[Delimiter] = None) -> Token:
        if not self.peek_group(delimiter):
            raise self.error(_GROUP_EXPECTATIONS[delimiter])
        return self.next_token()

    def __repr__(self) -> str:
        return f"TokenCursor(index={self._index}, remaining={self.remaining()})"
