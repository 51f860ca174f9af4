"""Tag grammar: open tags, close tags and attribute lists."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from rsx_parser.shared.errors import RsxSyntaxError
from rsx_parser.tokenization import Delimiter, TokenCursor
from rsx_parser.tree.expressions import block_expr, expression
from rsx_parser.tree.names import node_name
from rsx_parser.tree.node import Node, NodeName, NodeType, OpaqueExpr


@dataclass
class Tag:
    """A parsed open tag."""

    name: NodeName
    attributes: List[Node] = field(default_factory=list)
    selfclosing: bool = False


def tag_open(cursor: TokenCursor) -> Tag:
    """Parse ``<name attrs... >`` or ``<name attrs... />``.

    Everything between the name and the first ``/``? ``>`` is collected as
    the raw attribute span and parsed on its own afterwards. A bare ``>``
    inside an attribute value therefore ends the tag early; wrap such values
    in braces.
    """
    fork = cursor.fork()
    fork.parse_punct("<")
    name = node_name(fork)

    span_start = fork.fork()
    while True:
        probe = fork.fork()
        try:
            selfclosing = tag_open_end(probe)
        except RsxSyntaxError:
            fork.next_token()
            continue
        span = TokenCursor(span_start.tokens_until(fork), fork.position)
        fork.advance_to(probe)
        break

    tag = Tag(name=name, attributes=attributes(span), selfclosing=selfclosing)
    cursor.advance_to(fork)
    return tag


def tag_open_end(cursor: TokenCursor) -> bool:
    """Parse ``>`` or ``/>``; returns whether the tag is self-closing."""
    fork = cursor.fork()
    selfclosing = fork.parse_optional_punct("/") is not None
    fork.parse_punct(">")
    cursor.advance_to(fork)
    return selfclosing


def tag_close(cursor: TokenCursor) -> NodeName:
    """Parse ``</name>`` and return the closed name."""
    fork = cursor.fork()
    fork.parse_punct("<")
    fork.parse_punct("/")
    name = node_name(fork)
    fork.parse_punct(">")
    cursor.advance_to(fork)
    return name


def attributes(cursor: TokenCursor) -> List[Node]:
    """Parse an attribute span to exhaustion.

    Raises:
        RsxSyntaxError: "unexpected token" when the span holds anything that
            is not an attribute
    """
    nodes: List[Node] = []
    while not cursor.is_empty():
        try:
            name, value = attribute(cursor)
        except RsxSyntaxError:
            break
        nodes.append(Node(NodeType.ATTRIBUTE, name=name, value=value))

    if not cursor.is_empty():
        raise cursor.error("unexpected token")
    return nodes


def attribute(cursor: TokenCursor) -> Tuple[NodeName, Optional[OpaqueExpr]]:
    """Parse ``name``, ``name=value`` or ``name={block}``."""
    fork = cursor.fork()
    key = node_name(fork)
    value: Optional[OpaqueExpr] = None
    if fork.parse_optional_punct("=") is not None:
        if fork.peek_group(Delimiter.BRACE):
            value = block_expr(fork)
        else:
            value = expression(fork)
    cursor.advance_to(fork)
    return key, value
