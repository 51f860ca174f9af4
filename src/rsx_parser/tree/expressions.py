"""Opaque capture of host-language expressions.

Values embedded in markup are never interpreted. These rules only find where
an expression starts and ends so that its tokens can be carried along
verbatim in an :class:`OpaqueExpr`. The recognized shapes are literals,
brace blocks, and a small operand/operator grammar: paths, calls, macro
invocations, field and method chains, ``?``, ``as`` casts, and prefix and
binary operators. Anything more elaborate belongs inside a brace block; that
includes turbofish paths (``Vec::<T>::new()``), closures (``|x| x``), ``if``
and ``match``.
"""

from typing import Optional, Sequence

from rsx_parser.tokenization import (
    BINARY_OPERATORS,
    UNARY_OPERATORS,
    Delimiter,
    LiteralKind,
    Token,
    TokenCursor,
)
from rsx_parser.tree.node import ExprKind, OpaqueExpr

_BOOLEAN_LITERALS = frozenset({"true", "false"})
_NUMERIC_KINDS = (LiteralKind.INTEGER, LiteralKind.FLOAT)


def literal(cursor: TokenCursor) -> OpaqueExpr:
    """Parse a single literal: a literal token, ``true``/``false``, or ``-N``."""
    token = cursor.peek()
    if token is None:
        raise cursor.error("unexpected end of input, expected literal")
    if cursor.peek_literal():
        return OpaqueExpr(ExprKind.LITERAL, (cursor.parse_literal(),))
    if token.is_ident and token.value in _BOOLEAN_LITERALS:
        cursor.next_token()
        return OpaqueExpr(ExprKind.LITERAL, (token,))
    following = cursor.peek(1)
    if (
        token.is_punct("-")
        and following is not None
        and following.literal_kind in _NUMERIC_KINDS
    ):
        cursor.next_token()
        cursor.next_token()
        return OpaqueExpr(ExprKind.LITERAL, (token, following))
    raise cursor.error("expected literal")


def block_expr(cursor: TokenCursor) -> OpaqueExpr:
    """Parse a single brace-delimited group, keeping its contents opaque."""
    group = cursor.parse_group(Delimiter.BRACE)
    return OpaqueExpr(ExprKind.BLOCK, (group,))


def expression(cursor: TokenCursor) -> OpaqueExpr:
    """Capture one expression: unary operands joined by binary operators."""
    fork = cursor.fork()
    _unary(fork)
    while True:
        operator = _binary_operator(fork)
        if operator is None:
            break
        fork.parse_punct(operator)
        _unary(fork)

    tokens = cursor.tokens_until(fork)
    cursor.advance_to(fork)
    return OpaqueExpr(_classify(tokens), tokens)


def _classify(tokens: Sequence[Token]) -> ExprKind:
    first = tokens[0]
    if len(tokens) == 1:
        if first.is_literal or (first.is_ident and first.value in _BOOLEAN_LITERALS):
            return ExprKind.LITERAL
        if first.is_group(Delimiter.BRACE):
            return ExprKind.BLOCK
    if (
        len(tokens) == 2
        and first.is_punct("-")
        and tokens[1].literal_kind in _NUMERIC_KINDS
    ):
        return ExprKind.LITERAL
    return ExprKind.EXPR


def _binary_operator(cursor: TokenCursor) -> Optional[str]:
    for operator in BINARY_OPERATORS:
        if cursor.peek_punct(operator):
            return operator
    return None


def _unary(cursor: TokenCursor) -> None:
    while any(cursor.peek_punct(op) for op in UNARY_OPERATORS):
        prefix = cursor.next_token()
        if prefix.is_punct("&") and cursor.peek_keyword("mut"):
            cursor.next_token()
    _operand(cursor)
    _postfix(cursor)


def _operand(cursor: TokenCursor) -> None:
    token = cursor.peek()
    if token is None:
        raise cursor.error("unexpected end of input, expected an expression")
    if token.is_literal or token.is_group():
        cursor.next_token()
    elif token.is_ident or cursor.peek_punct("::"):
        _path(cursor)
        following = cursor.peek(1)
        if cursor.peek_punct("!") and following is not None and following.is_group():
            cursor.next_token()
            cursor.next_token()
    else:
        raise cursor.error("expected an expression")


def _path(cursor: TokenCursor) -> None:
    cursor.parse_optional_punct("::")
    cursor.parse_ident()
    while cursor.peek_punct("::") and cursor.peek_ident(2):
        cursor.parse_punct("::")
        cursor.parse_ident()


def _postfix(cursor: TokenCursor) -> None:
    while True:
        following = cursor.peek(1)
        if cursor.peek_group(Delimiter.PARENTHESIS) or cursor.peek_group(Delimiter.BRACKET):
            cursor.next_token()
        elif cursor.peek_punct("?"):
            cursor.next_token()
        elif (
            cursor.peek_punct(".")
            and not cursor.peek_punct("..")
            and following is not None
            and (following.is_ident or following.literal_kind is LiteralKind.INTEGER)
        ):
            cursor.next_token()
            cursor.next_token()
        elif cursor.peek_keyword("as") and cursor.peek_ident(1):
            cursor.next_token()
            _path(cursor)
        else:
            break
