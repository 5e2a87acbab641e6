"""Rustic front end — Lark grammar recognition plus AST construction.

Binary chains are built left-associatively: the expression accumulated so
far is wrapped in a SubExpr and becomes the `left` of the next Binary, so
`a + b + c` yields Binary(SubExpr(Binary(SubExpr(a), +, b)), +, c).
Downstream passes and the renderer rely on this shape.
"""

from __future__ import annotations

import logging
from pathlib import Path

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedEOF, UnexpectedInput, UnexpectedToken

from .ast import (
    Assign,
    Binary,
    Expression,
    Identifier,
    Input,
    Integer,
    Operator,
    Program,
    Statement,
    SubExpr,
    Type,
    Value,
    ValueExpr,
)
from .errors import ParseError

logger = logging.getLogger(__name__)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

_PARSER = Lark(
    _GRAMMAR_PATH.read_text(),
    parser="lalr",
    start="program",
    propagate_positions=True,
    maybe_placeholders=False,
)

U8_MAX: int = 255
_INT_SUFFIX: str = "u8"

_TYPES: dict[str, Type] = {t.value: t for t in Type}
_OPERATORS: dict[str, Operator] = {op.value: op for op in Operator}


def parse(source: str) -> Program:
    """Parse rustic source code into a Program AST."""
    try:
        tree = _PARSER.parse(source)
    except UnexpectedEOF as e:
        raise ParseError("unexpected end of input", 0, 0) from e
    except UnexpectedToken as e:
        # LALR reports end of input as a $END token
        if e.token.type == "$END":
            raise ParseError("unexpected end of input", 0, 0) from e
        raise ParseError(_describe(e), e.line, e.column) from e
    except UnexpectedInput as e:
        raise ParseError(_describe(e), e.line, e.column) from e
    program = _build_program(tree)
    logger.debug(
        "parsed fn %s: %d inputs, %d statements",
        program.name,
        len(program.inputs),
        len(program.statements),
    )
    return program


def _describe(e: UnexpectedInput) -> str:
    token = getattr(e, "token", None)
    if token is not None:
        return "unexpected token '" + str(token) + "'"
    char = getattr(e, "char", None)
    if char is not None:
        return "unexpected character '" + char + "'"
    return "invalid syntax"


def _pos(node: Tree | Token) -> tuple[int, int]:
    if isinstance(node, Token):
        return (node.line or 0, node.column or 0)
    meta = node.meta
    if meta.empty:
        return (0, 0)
    return (meta.line, meta.column)


# ============================================================
# DECLARATIONS
# ============================================================


def _build_program(tree: Tree) -> Program:
    header = tree.children[0]
    name_tok = header.children[0]
    inputs = [_build_input(c) for c in header.children[1:]]
    statements = [_build_statement(c) for c in tree.children[1:]]
    return Program(name=str(name_tok), inputs=inputs, statements=statements)


def _build_input(tree: Tree) -> Input:
    name_tok, type_tok = tree.children
    typ = _TYPES.get(str(type_tok))
    if typ is None:
        line, col = _pos(type_tok)
        raise ParseError("unknown type '" + str(type_tok) + "'", line, col)
    return Input(name=str(name_tok), typ=typ)


def _build_statement(tree: Tree) -> Statement:
    name_tok, expr_tree = tree.children
    return Assign(variable=str(name_tok), expression=_build_expression(expr_tree))


# ============================================================
# EXPRESSIONS
# ============================================================


def _build_expression(tree: Tree) -> Expression:
    return _build_addition(tree.children[0])


def _build_addition(tree: Tree) -> Expression:
    children = tree.children
    expr = _build_multiplication(children[0])
    i = 1
    while i < len(children):
        op = _build_operator(children[i])
        right = _build_multiplication(children[i + 1])
        expr = Binary(left=SubExpr(expr), op=op, right=right)
        i += 2
    return expr


def _build_multiplication(tree: Tree) -> Expression:
    children = tree.children
    expr: Expression = ValueExpr(_build_value(children[0]))
    i = 1
    while i < len(children):
        op = _build_operator(children[i])
        right = ValueExpr(_build_value(children[i + 1]))
        expr = Binary(left=SubExpr(expr), op=op, right=right)
        i += 2
    return expr


def _build_value(tree: Tree) -> Value:
    kind = tree.data
    if kind == "integer":
        return _build_integer(tree.children[0])
    if kind == "ident":
        return Identifier(str(tree.children[0]))
    if kind == "paren":
        return SubExpr(_build_expression(tree.children[0]))
    line, col = _pos(tree)
    raise ParseError("unexpected value '" + str(kind) + "'", line, col)


def _build_integer(tok: Token) -> Integer:
    text = str(tok)
    line, col = _pos(tok)
    digits = text[: -len(_INT_SUFFIX)]
    if not text.endswith(_INT_SUFFIX) or not digits.isdigit():
        raise ParseError("invalid integer literal '" + text + "'", line, col)
    value = int(digits)
    if value > U8_MAX:
        raise ParseError("integer literal out of range for u8 '" + text + "'", line, col)
    return Integer(value)


def _build_operator(tok: Token) -> Operator:
    op = _OPERATORS.get(str(tok))
    if op is None:
        line, col = _pos(tok)
        raise ParseError("unknown operator '" + str(tok) + "'", line, col)
    return op
