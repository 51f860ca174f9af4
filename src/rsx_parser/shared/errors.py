"""Syntax error type raised by the tokenizer and every grammar rule."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from rsx_parser.tokenization.tokenizer import TokenPosition


class RsxSyntaxError(Exception):
    """A fail-fast syntax error carrying a message and a source position.

    The first error raised anywhere in a parse aborts the whole parse; no
    partial tree is ever returned alongside it.
    """

    def __init__(
        self,
        message: str,
        position: Optional["TokenPosition"] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return (
            f"{self.message} at line {self.position.line}, "
            f"column {self.position.column}"
        )

    def __repr__(self) -> str:
        return f"RsxSyntaxError({self.message!r}, {self.position!r})"
