"""Scope checker.

Rejects any program that defines a name twice (parameters included) or
uses a name before its definition. The tree itself is left untouched.
Passing this check puts the program in single-assignment form, which
constant propagation depends on.
"""

from __future__ import annotations

import logging

from .ast import (
    Assign,
    Binary,
    Expression,
    Identifier,
    Input,
    Program,
    Statement,
    SubExpr,
    Value,
    ValueExpr,
)
from .errors import RedefinedInput, RedefinedVariable, UndefinedVariable
from .visitor import Visitor

logger = logging.getLogger(__name__)


class ScopeChecker(Visitor):
    def __init__(self) -> None:
        self.defined: set[str] = set()

    def visit_program(self, program: Program) -> Program:
        self.defined = set()
        logger.debug("scope check of fn %s", program.name)
        for inp in program.inputs:
            inp.accept(self)
        for stmt in program.statements:
            stmt.accept(self)
        return program

    def visit_input(self, inp: Input) -> Input:
        if inp.name in self.defined:
            raise RedefinedInput(inp.name)
        self.defined.add(inp.name)
        return inp

    def visit_statement(self, statement: Statement) -> Statement:
        if isinstance(statement, Assign):
            if statement.variable in self.defined:
                raise RedefinedVariable(statement.variable)
            self.defined.add(statement.variable)
            statement.expression.accept(self)
        return statement

    def visit_expression(self, expression: Expression) -> Expression:
        if isinstance(expression, Binary):
            expression.left.accept(self)
            expression.right.accept(self)
        elif isinstance(expression, ValueExpr):
            expression.value.accept(self)
        return expression

    def visit_value(self, value: Value) -> Value:
        if isinstance(value, Identifier):
            if value.name not in self.defined:
                raise UndefinedVariable(value.name)
        elif isinstance(value, SubExpr):
            value.expr.accept(self)
        return value


def check_scope(program: Program) -> Program:
    """Run the scope checker over program, raising on the first violation."""
    return program.accept(ScopeChecker())
