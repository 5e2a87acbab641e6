"""Constant propagation and folding over u8 arithmetic.

Statements are processed in program order. Each right-hand side is folded
bottom-up; when it reduces to a single integer the variable is recorded as
a known constant, and later uses of that variable are replaced by the
value. Requires a scope-checked program: with every name assigned exactly
once, a recorded constant never goes stale.

Values:
- Identifier with a known constant  -> Integer
- SubExpr whose inner folds fully   -> Integer (the wrapper is dropped)
- Binary with two integer operands  -> ValueExpr(Integer)

Arithmetic that leaves the u8 range, divides by zero, or divides
inexactly raises a FoldError instead of producing a result.
"""

from __future__ import annotations

import logging

from .ast import (
    Assign,
    Binary,
    Expression,
    Identifier,
    Integer,
    Operator,
    Program,
    Statement,
    SubExpr,
    Value,
    ValueExpr,
    is_constant,
)
from .errors import (
    ArithmeticOverflow,
    ArithmeticUnderflow,
    DivisionByZero,
    InexactDivision,
)
from .visitor import Visitor

logger = logging.getLogger(__name__)

U8_MAX: int = 255


def fold_binary(left: int, op: Operator, right: int) -> int:
    """Evaluate `left op right` with u8 semantics."""
    if op == Operator.ADD:
        result = left + right
        if result > U8_MAX:
            raise ArithmeticOverflow(left, op.value, right)
        return result
    if op == Operator.SUBTRACT:
        if left < right:
            raise ArithmeticUnderflow(left, op.value, right)
        return left - right
    if op == Operator.MULTIPLY:
        result = left * right
        if result > U8_MAX:
            raise ArithmeticOverflow(left, op.value, right)
        return result
    if op == Operator.DIVIDE:
        if right == 0:
            raise DivisionByZero(left, right)
        if left % right != 0:
            raise InexactDivision(left, right)
        return left // right
    raise ValueError("unknown operator " + repr(op))


class ConstantPropagation(Visitor):
    def __init__(self) -> None:
        self.constants: dict[str, int] = {}

    def visit_program(self, program: Program) -> Program:
        self.constants = {}
        logger.debug("constant propagation of fn %s", program.name)
        # Inputs carry no known value; only statements are visited.
        program.statements = [stmt.accept(self) for stmt in program.statements]
        return program

    def visit_statement(self, statement: Statement) -> Statement:
        if isinstance(statement, Assign):
            statement.expression = statement.expression.accept(self)
            expr = statement.expression
            if is_constant(expr):
                value = expr.value.value
                self.constants[statement.variable] = value
                logger.debug("recorded %s = %d", statement.variable, value)
        return statement

    def visit_expression(self, expression: Expression) -> Expression:
        if isinstance(expression, ValueExpr):
            expression.value = expression.value.accept(self)
            return expression
        if isinstance(expression, Binary):
            expression.left = expression.left.accept(self)
            expression.right = expression.right.accept(self)
            left = expression.left
            right = expression.right
            if isinstance(left, Integer) and is_constant(right):
                result = fold_binary(left.value, expression.op, right.value.value)
                logger.debug(
                    "folded %d %s %d -> %d",
                    left.value,
                    expression.op.value,
                    right.value.value,
                    result,
                )
                return ValueExpr(Integer(result))
        return expression

    def visit_value(self, value: Value) -> Value:
        if isinstance(value, Identifier):
            if value.name in self.constants:
                logger.debug("substituted %s", value.name)
                return Integer(self.constants[value.name])
            return value
        if isinstance(value, SubExpr):
            value.expr = value.expr.accept(self)
            if is_constant(value.expr):
                return value.expr.value
        return value


def propagate_constants(program: Program) -> Program:
    """Fold constants in a scope-checked program."""
    return program.accept(ConstantPropagation())
