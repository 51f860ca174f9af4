"""Tree building for rsx markup.

Key Components:
    RsxTreeBuilder: Recursive-descent builder producing Node lists
    Node: A text, block, element or attribute node
    NodeName: Path, dash-joined or colon-joined node name
    OpaqueExpr: Uninterpreted host-language fragment held by a node
"""

from .builder import RsxTreeBuilder
from .names import node_name
from .node import (
    ExprKind,
    Node,
    NodeName,
    NodeNameKind,
    NodeType,
    OpaqueExpr,
    iter_nodes,
)
from .tags import Tag, tag_close, tag_open

__all__ = [
    "ExprKind",
    "Node",
    "NodeName",
    "NodeNameKind",
    "NodeType",
    "OpaqueExpr",
    "RsxTreeBuilder",
    "Tag",
    "iter_nodes",
    "node_name",
    "tag_close",
    "tag_open",
]
