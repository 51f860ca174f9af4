"""Public parsing API."""

from .parser import RsxParser, parse, parse_tokens

__all__ = ["RsxParser", "parse", "parse_tokens"]
