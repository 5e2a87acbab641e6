"""Rewrite framework shared by all passes.

Every node kind has an `accept(visitor)` method that dispatches to the
matching `visit_*` operation below. An operation returns the node that
should occupy the visited slot: the same object when nothing changed, or a
replacement. Callers store the result back into the parent field.

Dispatch only. A pass that needs to reach children calls `accept` on each
child itself, so every pass decides its own traversal order.
"""

from __future__ import annotations

from .ast import Expression, Input, Operator, Program, Statement, Value


class Visitor:
    """Base pass. Each operation defaults to leaving its node untouched."""

    def visit_program(self, program: Program) -> Program:
        return program

    def visit_input(self, inp: Input) -> Input:
        return inp

    def visit_statement(self, statement: Statement) -> Statement:
        return statement

    def visit_expression(self, expression: Expression) -> Expression:
        return expression

    def visit_value(self, value: Value) -> Value:
        return value

    def visit_operator(self, operator: Operator) -> Operator:
        return operator
