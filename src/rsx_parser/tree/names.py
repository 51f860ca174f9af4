"""Node-name grammar.

Three alternative micro-grammars are tried in a fixed priority:

1. dash-joined identifiers (``data-foo``), at least two segments;
2. colon-joined identifiers (``on:click``), at least two segments;
3. a ``::`` separated path (``div``, ``some::path``, ``::a::b``).

Reserved keywords are accepted as identifiers in every form.
"""

from typing import Callable, List

from rsx_parser.shared.errors import RsxSyntaxError
from rsx_parser.tokenization import TokenCursor
from rsx_parser.tree.node import NodeName, NodeNameKind

NameRule = Callable[[TokenCursor], NodeName]


def node_name(cursor: TokenCursor) -> NodeName:
    """Parse a node name, committing only on success.

    Raises:
        RsxSyntaxError: "invalid node name" when no form matches
    """
    for rule in _NAME_RULES:
        try:
            return rule(cursor)
        except RsxSyntaxError:
            continue
    raise cursor.error("invalid node name")


def dash_name(cursor: TokenCursor) -> NodeName:
    return _punctuated_name(cursor, NodeNameKind.DASH)


def colon_name(cursor: TokenCursor) -> NodeName:
    return _punctuated_name(cursor, NodeNameKind.COLON)


def _punctuated_name(cursor: TokenCursor, kind: NodeNameKind) -> NodeName:
    fork = cursor.fork()
    separator = kind.value
    segments: List[str] = []
    trailing = False

    while fork.peek_ident():
        segments.append(fork.parse_ident().value)
        trailing = False
        if not fork.peek_punct(separator):
            break
        fork.parse_punct(separator)
        trailing = True

    if len(segments) < 2:
        raise fork.error("expected punctuated node name")

    cursor.advance_to(fork)
    return NodeName(kind, tuple(segments), trailing_separator=trailing)


def path_name(cursor: TokenCursor) -> NodeName:
    """Parse a ``::`` separated path of identifiers, keywords included."""
    fork = cursor.fork()
    leading = fork.parse_optional_punct("::") is not None
    segments: List[str] = []
    trailing = False

    while fork.peek_ident():
        segments.append(fork.parse_ident().value)
        trailing = False
        if not fork.peek_punct("::"):
            break
        fork.parse_punct("::")
        trailing = True

    if not segments:
        raise fork.error("expected path")
    if trailing:
        raise fork.error("expected path segment")

    cursor.advance_to(fork)
    return NodeName(NodeNameKind.PATH, tuple(segments), leading_separator=leading)


_NAME_RULES = (dash_name, colon_name, path_name)
