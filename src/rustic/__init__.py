"""Rustic parser and analyzer — public API."""

from __future__ import annotations

from .ast import Program
from .constprop import propagate_constants
from .emit import to_source
from .errors import ParseError as ParseError, RusticError as RusticError
from .parse import parse as parse_source
from .scope import check_scope

__version__ = "0.1.0"


def parse(source: str) -> Program:
    """Parse rustic source code into a Program AST."""
    return parse_source(source)


def check(program: Program) -> Program:
    """Check definitions and single assignment. Raises ScopeError."""
    return check_scope(program)


def propagate(program: Program) -> Program:
    """Fold constants in a checked program. Raises FoldError."""
    return propagate_constants(program)


def emit(program: Program) -> str:
    """Render a Program back into rustic source text."""
    return to_source(program)


def compile_source(source: str, constprop: bool = False) -> str:
    """Parse, check, optionally fold, and render source."""
    program = check(parse(source))
    if constprop:
        program = propagate(program)
    return emit(program)
