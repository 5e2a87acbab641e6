"""Rustic error hierarchy.

Every failure is fatal: the first error raised ends the pipeline and the
driver reports it as a single `Error: <message>` line.
"""

from __future__ import annotations


class RusticError(Exception):
    """Base error for parsing and analysis."""

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg: str = msg


class ParseError(RusticError):
    """Source text does not match the grammar, or a literal is out of range."""

    def __init__(self, msg: str, line: int, col: int):
        super().__init__(msg)
        self.line: int = line
        self.col: int = col

    def __str__(self) -> str:
        return self.msg + " at line " + str(self.line) + " col " + str(self.col)


# ============================================================
# SCOPE
# ============================================================


class ScopeError(RusticError):
    """Definition-before-use or single-assignment violation."""

    def __init__(self, msg: str, name: str):
        super().__init__(msg)
        self.name: str = name


class RedefinedInput(ScopeError):
    def __init__(self, name: str):
        super().__init__(f"Redefinition of input variable '{name}'.", name)


class RedefinedVariable(ScopeError):
    def __init__(self, name: str):
        super().__init__(f"Redefinition of variable '{name}'.", name)


class UndefinedVariable(ScopeError):
    def __init__(self, name: str):
        super().__init__(f"Use of undefined variable '{name}'.", name)


# ============================================================
# CONSTANT FOLDING
# ============================================================


class FoldError(RusticError):
    """Constant arithmetic that has no u8 result."""

    def __init__(self, reason: str, left: int, op: str, right: int):
        super().__init__(
            f"Constant evaluation resulted in {reason}: {left} {op} {right}"
        )
        self.left: int = left
        self.op: str = op
        self.right: int = right


class ArithmeticOverflow(FoldError):
    def __init__(self, left: int, op: str, right: int):
        super().__init__("value greater than 255", left, op, right)


class ArithmeticUnderflow(FoldError):
    def __init__(self, left: int, op: str, right: int):
        super().__init__("negative value", left, op, right)


class DivisionByZero(FoldError):
    def __init__(self, left: int, right: int):
        super().__init__("division by zero", left, "/", right)


class InexactDivision(FoldError):
    def __init__(self, left: int, right: int):
        super().__init__("non-integer division", left, "/", right)
