"""Rustic AST — node definitions for the u8 arithmetic subset."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .visitor import Visitor


# ============================================================
# ENUMERATIONS
# ============================================================


class Type(Enum):
    """Parameter types. Only unsigned 8-bit integers exist."""

    U8 = "u8"


class Operator(Enum):
    """Binary operators, valued by their surface symbol."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    def accept(self, visitor: Visitor) -> Operator:
        return visitor.visit_operator(self)


# ============================================================
# VALUES
# ============================================================


class Value:
    """Base for operand nodes."""

    def accept(self, visitor: Visitor) -> Value:
        return visitor.visit_value(self)


@dataclass
class Integer(Value):
    """`42u8` — always in [0, 255]."""

    value: int


@dataclass
class Identifier(Value):
    name: str


@dataclass
class SubExpr(Value):
    """A boxed expression: source parentheses or a left-chain wrapper."""

    expr: Expression


# ============================================================
# EXPRESSIONS
# ============================================================


class Expression:
    """Base for expression nodes."""

    def accept(self, visitor: Visitor) -> Expression:
        return visitor.visit_expression(self)


@dataclass
class ValueExpr(Expression):
    value: Value


@dataclass
class Binary(Expression):
    """left op right.

    `left` is a Value so that left-nested chains are carried as SubExpr
    wrappers; `right` is a full Expression.
    """

    left: Value
    op: Operator
    right: Expression


# ============================================================
# STATEMENTS
# ============================================================


class Statement:
    """Base for statement nodes."""

    def accept(self, visitor: Visitor) -> Statement:
        return visitor.visit_statement(self)


@dataclass
class Assign(Statement):
    """let variable = expression;"""

    variable: str
    expression: Expression


# ============================================================
# PROGRAM
# ============================================================


@dataclass
class Input:
    """Function parameter `name: u8`."""

    name: str
    typ: Type = Type.U8

    def accept(self, visitor: Visitor) -> Input:
        return visitor.visit_input(self)


@dataclass
class Program:
    """fn name(inputs) { statements }"""

    name: str
    inputs: list[Input] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)

    def accept(self, visitor: Visitor) -> Program:
        return visitor.visit_program(self)


def is_constant(expr: Expression) -> bool:
    """True if expr is exactly ValueExpr(Integer)."""
    return isinstance(expr, ValueExpr) and isinstance(expr.value, Integer)


# ============================================================
# SERIALIZATION
# ============================================================


def to_dict(node: object) -> object:
    """Convert a node (or list of nodes) into JSON-compatible data."""
    if isinstance(node, list):
        return [to_dict(n) for n in node]
    if isinstance(node, Enum):
        return node.value
    if isinstance(node, Program):
        return {
            "_type": "Program",
            "name": node.name,
            "inputs": to_dict(node.inputs),
            "statements": to_dict(node.statements),
        }
    if isinstance(node, Input):
        return {"_type": "Input", "name": node.name, "type": node.typ.value}
    if isinstance(node, Assign):
        return {
            "_type": "Assign",
            "variable": node.variable,
            "expression": to_dict(node.expression),
        }
    if isinstance(node, Binary):
        return {
            "_type": "Binary",
            "left": to_dict(node.left),
            "op": node.op.value,
            "right": to_dict(node.right),
        }
    if isinstance(node, ValueExpr):
        return {"_type": "ValueExpr", "value": to_dict(node.value)}
    if isinstance(node, SubExpr):
        return {"_type": "SubExpr", "expr": to_dict(node.expr)}
    if isinstance(node, Integer):
        return {"_type": "Integer", "value": node.value}
    if isinstance(node, Identifier):
        return {"_type": "Identifier", "name": node.name}
    raise TypeError("cannot serialize " + type(node).__name__)
