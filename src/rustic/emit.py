"""Rustic emitter — converts a Program back into source text.

Parentheses are never inserted or minimized: every SubExpr renders as
`(...)`, including the wrapper the parser puts around the left operand of
each chain step. `a + b + c` therefore prints as `((a) + b) + c`. The output
is valid input, but it parses to a more deeply wrapped tree.
"""

from __future__ import annotations

from .ast import (
    Assign,
    Binary,
    Expression,
    Identifier,
    Input,
    Integer,
    Program,
    Statement,
    SubExpr,
    Value,
    ValueExpr,
)


def to_source(program: Program) -> str:
    """Render a `Program` as rustic source text."""
    return _Emitter().emit_program(program)


class _Emitter:
    _INDENT: str = "    "

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._indent_level: int = 0

    # ── Public ──────────────────────────────────────────────

    def emit_program(self, program: Program) -> str:
        self._lines = []
        self._indent_level = 0
        params = ", ".join(self._render_input(i) for i in program.inputs)
        self._emit_line("fn " + program.name + "(" + params + ") {")
        self._indent_level += 1
        for stmt in program.statements:
            self._emit_stmt(stmt)
        self._indent_level -= 1
        self._emit_line("}")
        return "\n".join(self._lines) + "\n"

    # ── Lines ───────────────────────────────────────────────

    def _emit_line(self, line: str) -> None:
        self._lines.append(self._INDENT * self._indent_level + line)

    def _emit_stmt(self, stmt: Statement) -> None:
        if isinstance(stmt, Assign):
            self._emit_line(
                "let " + stmt.variable + " = " + self._render_expr(stmt.expression) + ";"
            )
            return
        raise TypeError("unhandled statement type")

    # ── Rendering ───────────────────────────────────────────

    def _render_input(self, inp: Input) -> str:
        return inp.name + ": " + inp.typ.value

    def _render_expr(self, expr: Expression) -> str:
        if isinstance(expr, ValueExpr):
            return self._render_value(expr.value)
        if isinstance(expr, Binary):
            left = self._render_value(expr.left)
            return left + " " + expr.op.value + " " + self._render_expr(expr.right)
        raise TypeError("unhandled expression type")

    def _render_value(self, value: Value) -> str:
        if isinstance(value, Integer):
            return str(value.value) + "u8"
        if isinstance(value, Identifier):
            return value.name
        if isinstance(value, SubExpr):
            return "(" + self._render_expr(value.expr) + ")"
        raise TypeError("unhandled value type")
