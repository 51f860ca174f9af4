"""Node data model produced by the tree builder.

A parsed document is a list of :class:`Node` values. Nodes own their
attribute and child lists outright; there are no parent links and no sharing
between containers, so a tree is always acyclic.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from rsx_parser.tokenization import Delimiter, Token, TokenPosition, render_tokens


class NodeType(Enum):
    """Discriminator for the four kinds of node."""

    TEXT = auto()
    BLOCK = auto()
    ELEMENT = auto()
    ATTRIBUTE = auto()


class NodeNameKind(Enum):
    """Node name flavours, valued by the separator joining their segments."""

    PATH = "::"
    DASH = "-"
    COLON = ":"


@dataclass(frozen=True)
class NodeName:
    """Name of an element or attribute.

    ``PATH`` names may start with a leading ``::``. ``DASH`` and ``COLON``
    names always have at least two segments and may end with a separator
    that had no identifier after it.
    """

    kind: NodeNameKind
    segments: Tuple[str, ...]
    leading_separator: bool = False
    trailing_separator: bool = False

    def __post_init__(self) -> None:
        """Validate the name shape."""
        if not self.segments or not all(self.segments):
            raise ValueError("Node name segments cannot be empty")
        if self.kind is not NodeNameKind.PATH:
            if len(self.segments) < 2:
                raise ValueError(
                    f"{self.kind.name.lower()} names require at least two segments"
                )
            if self.leading_separator:
                raise ValueError("Only path names may have a leading separator")
        elif self.trailing_separator:
            raise ValueError("Path names cannot have a trailing separator")

    @classmethod
    def path(cls, *segments: str, leading: bool = False) -> "NodeName":
        return cls(NodeNameKind.PATH, tuple(segments), leading_separator=leading)

    @classmethod
    def dash(cls, *segments: str) -> "NodeName":
        return cls(NodeNameKind.DASH, tuple(segments))

    @classmethod
    def colon(cls, *segments: str) -> "NodeName":
        return cls(NodeNameKind.COLON, tuple(segments))

    @property
    def separator(self) -> str:
        return self.kind.value

    def __str__(self) -> str:
        text = self.separator.join(self.segments)
        if self.leading_separator:
            text = self.separator + text
        if self.trailing_separator:
            text += self.separator
        return text


class ExprKind(Enum):
    """Outer shape of a captured host expression."""

    LITERAL = auto()    # A single literal token
    BLOCK = auto()      # A brace-delimited group
    EXPR = auto()       # Any other expression


@dataclass(frozen=True)
class OpaqueExpr:
    """Uninterpreted fragment of host-language tokens.

    Only the outer shape is known; the contents are never inspected.
    """

    kind: ExprKind
    tokens: Tuple[Token, ...]

    def __post_init__(self) -> None:
        """Validate the captured shape."""
        if not self.tokens:
            raise ValueError("Expression cannot be empty")
        if self.kind is ExprKind.BLOCK and not (
            len(self.tokens) == 1 and self.tokens[0].is_group(Delimiter.BRACE)
        ):
            raise ValueError("Block expressions must be a single brace group")

    @property
    def position(self) -> TokenPosition:
        return self.tokens[0].position

    @property
    def literal(self) -> Optional[Token]:
        """The literal token of a literal expression."""
        if self.kind is ExprKind.LITERAL:
            return self.tokens[-1]
        return None

    @property
    def block_tokens(self) -> Tuple[Token, ...]:
        """Tokens inside the braces of a block expression."""
        if self.kind is not ExprKind.BLOCK:
            return ()
        return self.tokens[0].stream

    def as_path(self) -> Optional[str]:
        """Path text when the expression is a bare path, e.g. ``a::b``."""
        if self.kind is not ExprKind.EXPR:
            return None
        for token in self.tokens:
            if not (token.is_ident or token.is_punct(":")):
                return None
        return "".join(token.value for token in self.tokens)

    def string_value(self) -> Optional[str]:
        literal = self.literal
        if literal is None or len(self.tokens) != 1:
            return None
        return literal.string_value()

    def to_source(self) -> str:
        return render_tokens(self.tokens)

    def __str__(self) -> str:
        return self.to_source()


@dataclass
class Node:
    """A parsed markup node.

    ============  =======  ================  ===========  ============
    node_type     name     value             attributes   children
    ============  =======  ================  ===========  ============
    TEXT          None     literal           empty        empty
    BLOCK         None     brace group       empty        empty
    ATTRIBUTE     set      optional          empty        empty
    ELEMENT       set      None              attributes   child nodes
    ============  =======  ================  ===========  ============
    """

    node_type: NodeType
    name: Optional[NodeName] = None
    value: Optional[OpaqueExpr] = None
    attributes: List["Node"] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate per-type invariants."""
        node_type = self.node_type
        if node_type in (NodeType.TEXT, NodeType.BLOCK):
            if self.name is not None:
                raise ValueError(f"{node_type.name.title()} nodes have no name")
            if self.value is None:
                raise ValueError(f"{node_type.name.title()} nodes require a value")
        elif self.name is None:
            raise ValueError(f"{node_type.name.title()} nodes require a name")

        if node_type is NodeType.TEXT and self.value.kind is not ExprKind.LITERAL:
            raise ValueError("Text nodes require a literal value")
        if node_type is NodeType.BLOCK and self.value.kind is not ExprKind.BLOCK:
            raise ValueError("Block nodes require a block value")
        if node_type is NodeType.ELEMENT:
            if self.value is not None:
                raise ValueError("Element nodes have no value")
            if any(a.node_type is not NodeType.ATTRIBUTE for a in self.attributes):
                raise ValueError("Element attributes must be attribute nodes")
        else:
            if self.attributes or self.children:
                raise ValueError(
                    f"{node_type.name.title()} nodes have no attributes or children"
                )

    @property
    def is_element(self) -> bool:
        return self.node_type is NodeType.ELEMENT

    def name_as_string(self) -> Optional[str]:
        """Name rendered verbatim, ``None`` for text and block nodes."""
        if self.name is None:
            return None
        return str(self.name)

    def value_as_string(self) -> Optional[str]:
        """String content of a string literal value, or the text of a path.

        Any other value, or no value at all, yields ``None``.
        """
        if self.value is None:
            return None
        if self.value.kind is ExprKind.LITERAL:
            return self.value.string_value()
        return self.value.as_path()

    def get_attribute(self, name: str) -> Optional["Node"]:
        """First attribute whose rendered name equals ``name``."""
        for attribute in self.attributes:
            if attribute.name_as_string() == name:
                return attribute
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary representation."""
        result: Dict[str, Any] = {"node_type": self.node_type.name.lower()}
        if self.name is not None:
            result["name"] = str(self.name)
            result["name_kind"] = self.name.kind.name.lower()
        if self.value is not None:
            result["value"] = self.value.to_source()
        if self.attributes:
            result["attributes"] = [a.to_dict() for a in self.attributes]
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result


def iter_nodes(nodes: Iterable[Node]) -> Iterator[Node]:
    """Yield every node in document order; attributes are not visited."""
    for node in nodes:
        yield node
        yield from iter_nodes(node.children)
