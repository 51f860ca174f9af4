"""Recursive-descent tree builder for rsx markup.

The builder turns a token stream into a list of :class:`Node` values. Every
node is produced by an ordered alternation (text, then block, then element)
tried against the same unmoved cursor, and elements recurse into the same
alternation for their children. When flattening is enabled, each level moves
its node's children out beside it, so the document comes back as a single
pre-order list.
"""

from typing import Callable, List, Optional, Sequence, TypeVar

from rsx_parser.shared import ParserConfig, RsxSyntaxError, get_logger
from rsx_parser.tokenization import TokenCursor, TokenStream
from rsx_parser.tree.expressions import block_expr, literal
from rsx_parser.tree.node import Node, NodeType
from rsx_parser.tree.tags import Tag, tag_close, tag_open

T = TypeVar("T")


class RsxTreeBuilder:
    """Builds a node tree from a token stream.

    A builder keeps per-parse state (the nesting depth), so each parse should
    use its own instance. The configuration itself is immutable and may be
    shared.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "tree_builder")
        self._depth = 0

    def build(self, stream: TokenStream) -> List[Node]:
        """Parse the whole stream into top-level nodes.

        Raises:
            RsxSyntaxError: On the first syntax error; no partial tree is kept
        """
        self._depth = 0
        return self.parse(TokenCursor.from_stream(stream))

    def parse(self, cursor: TokenCursor) -> List[Node]:
        nodes: List[Node] = []
        while not cursor.is_empty():
            nodes.extend(self.node(cursor))
        return nodes

    def node(self, cursor: TokenCursor) -> List[Node]:
        """Parse one node; with flattening, its children follow it in the list."""
        node = _first_success(cursor, (self.text, self.block, self.element))

        nodes = [node]
        if self.config.flatten:
            nodes.extend(node.children)
            node.children = []
        return nodes

    def text(self, cursor: TokenCursor) -> Node:
        return Node(NodeType.TEXT, value=literal(cursor))

    def block(self, cursor: TokenCursor) -> Node:
        return Node(NodeType.BLOCK, value=block_expr(cursor))

    def element(self, cursor: TokenCursor) -> Node:
        fork = cursor.fork()
        if _speculate(tag_close, cursor) is not None:
            raise fork.error("close tag has no corresponding open tag")

        tag = tag_open(fork)
        children: List[Node] = []
        if not tag.selfclosing:
            self._depth += 1
            try:
                if self.config.max_depth is not None and self._depth > self.config.max_depth:
                    raise cursor.error("maximum nesting depth exceeded")
                while self._has_children(tag, fork):
                    children.extend(self.node(fork))
            finally:
                self._depth -= 1
            tag_close(fork)
        cursor.advance_to(fork)

        self.logger.debug(
            "Element parsed",
            extra={
                "element": str(tag.name),
                "attribute_count": len(tag.attributes),
                "child_count": len(children),
                "selfclosing": tag.selfclosing,
            }
        )
        return Node(
            NodeType.ELEMENT,
            name=tag.name,
            attributes=tag.attributes,
            children=children,
        )

    def _has_children(self, tag: Tag, cursor: TokenCursor) -> bool:
        # an empty input at this point means the tag wasn't closed
        if cursor.is_empty():
            raise cursor.error("open tag has no corresponding close tag")

        closed = _speculate(tag_close, cursor)
        if closed is None:
            return True
        if closed == tag.name:
            return False
        raise cursor.error("close tag has no corresponding open tag")


def _speculate(rule: Callable[[TokenCursor], T], cursor: TokenCursor) -> Optional[T]:
    """Run ``rule`` on a throwaway fork, returning ``None`` if it fails."""
    try:
        return rule(cursor.fork())
    except RsxSyntaxError:
        return None


def _first_success(
    cursor: TokenCursor,
    rules: Sequence[Callable[[TokenCursor], Node]]
) -> Node:
    """Try ``rules`` in order; the last rule's error is the one surfaced."""
    for rule in rules[:-1]:
        try:
            return rule(cursor)
        except RsxSyntaxError:
            continue
    return rules[-1](cursor)
