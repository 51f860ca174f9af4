"""Core parser API for rsx markup.

Two entry points accept the two host representations of the input: source
text, which is tokenized first, and an already-tokenized stream. Both drive
the tree builder to completion over the whole input and either return the
top-level nodes or raise the first syntax error encountered.
"""

import time
from typing import Any, Dict, List, Optional, Sequence, Union

from rsx_parser.shared import ParserConfig, RsxSyntaxError, get_logger
from rsx_parser.tokenization import RsxTokenizer, Token, TokenStream
from rsx_parser.tree import Node, RsxTreeBuilder, iter_nodes

TokenInput = Union[TokenStream, Sequence[Token]]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for source preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion


def parse(source: str, config: Optional[ParserConfig] = None) -> List[Node]:
    """Parse rsx markup from source text.

    Args:
        source: Markup embedded in host-language source text
        config: Parser configuration (defaults to a nested tree)

    Returns:
        Top-level nodes in document order

    Raises:
        RsxSyntaxError: On the first lexical or syntax error

    Examples:
        >>> nodes = parse('<div foo={bar}><div>"hello"</div><world /></div>')
        >>> nodes[0].attributes[0].name_as_string()
        'foo'
        >>> nodes[0].children[0].children[0].value_as_string()
        'hello'
        >>> nodes[0].children[1].name_as_string()
        'world'
    """
    return RsxParser(config).parse(source)


def parse_tokens(tokens: TokenInput, config: Optional[ParserConfig] = None) -> List[Node]:
    """Parse rsx markup from an already-tokenized stream.

    Args:
        tokens: A TokenStream or any sequence of tokens
        config: Parser configuration (defaults to a nested tree)

    Returns:
        Top-level nodes in document order

    Raises:
        RsxSyntaxError: On the first syntax error
    """
    return RsxParser(config).parse_tokens(tokens)


class RsxParser:
    """Reusable parser holding a configuration and usage statistics.

    Each call builds a fresh tree builder, so parses never share mutable
    state; only the immutable configuration is reused.

    Examples:
        >>> parser = RsxParser(ParserConfig.flat())
        >>> len(parser.parse('<a><b /></a>'))
        2
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "rsx_parser")

        self._parse_count = 0
        self._failed_parses = 0
        self._total_nodes = 0
        self._total_processing_time = 0.0

    def parse(self, source: str) -> List[Node]:
        """Tokenize and parse source text."""
        if not isinstance(source, str):
            raise TypeError(f"Expected source text, got {type(source).__name__}")

        self.logger.info(
            "Starting source parse operation",
            extra={
                "content_length": len(source),
                "preview": (
                    source[:PREVIEW_LENGTH] + "..."
                    if len(source) > PREVIEW_LENGTH else source
                ),
            }
        )
        start_time = time.time()
        try:
            stream = RsxTokenizer(correlation_id=self.correlation_id).tokenize(source)
        except RsxSyntaxError as e:
            self._record_failure(start_time, e)
            raise
        return self._build(stream, start_time)

    def parse_tokens(self, tokens: TokenInput) -> List[Node]:
        """Parse an already-tokenized stream."""
        if not isinstance(tokens, TokenStream):
            tokens = TokenStream.from_tokens(tokens)

        self.logger.info(
            "Starting token parse operation",
            extra={"token_count": len(tokens)}
        )
        return self._build(tokens, time.time())

    def _build(self, stream: TokenStream, start_time: float) -> List[Node]:
        self.logger.debug(
            "Building tree",
            extra={"token_count": len(stream), "flatten": self.config.flatten}
        )
        try:
            nodes = RsxTreeBuilder(self.config, self.correlation_id).build(stream)
        except RsxSyntaxError as e:
            self._record_failure(start_time, e)
            raise

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        node_count = sum(1 for _ in iter_nodes(nodes))
        self._parse_count += 1
        self._total_nodes += node_count
        self._total_processing_time += processing_time

        self.logger.info(
            "Parse completed",
            extra={
                "top_level_count": len(nodes),
                "node_count": node_count,
                "processing_time_ms": processing_time,
            }
        )
        return nodes

    def _record_failure(self, start_time: float, error: RsxSyntaxError) -> None:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._parse_count += 1
        self._failed_parses += 1
        self._total_processing_time += processing_time

        position = error.position
        self.logger.error(
            "Parse failed",
            extra={
                "error": error.message,
                "line": position.line if position else None,
                "column": position.column if position else None,
                "processing_time_ms": processing_time,
            },
            exc_info=False
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        successful = self._parse_count - self._failed_parses
        return {
            "total_parses": self._parse_count,
            "successful_parses": successful,
            "failed_parses": self._failed_parses,
            "success_rate": (
                successful / self._parse_count if self._parse_count > 0 else 0.0
            ),
            "total_nodes": self._total_nodes,
            "total_processing_time_ms": self._total_processing_time,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._failed_parses = 0
        self._total_nodes = 0
        self._total_processing_time = 0.0

        self.logger.info("Parser statistics reset")
