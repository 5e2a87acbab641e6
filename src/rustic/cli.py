"""Rustic CLI — check, optionally fold, and re-render a source file."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from . import __version__, check, emit, parse, propagate
from .ast import Program, to_dict
from .errors import RusticError

PHASES: list[str] = [
    "parse",
    "scope",
    "constprop",
]

USAGE: str = """\
rustic [OPTIONS] FILE

Check a rustic program for undefined and redefined variables and print it.

Options:
  --constprop        Enable constant propagation
  --stop-at PHASE    Stop after phase: parse, scope, constprop; print the AST as JSON
  -o, --output FILE  Write output to FILE instead of stdout
  -v, --verbose      Log pass activity to stderr
  -V, --version      Print the version and exit
  -h, --help         Show this help message
"""


class UsageError(Exception):
    pass


@dataclass
class Options:
    input_file: str = ""
    output_file: str | None = None
    constprop: bool = False
    stop_at: str | None = None
    verbose: bool = False


def parse_args(args: list[str]) -> Options | None:
    """Parse command-line arguments. Returns None when help or the version was printed."""
    opts = Options()
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return None
        elif arg == "--version" or arg == "-V":
            print("rustic " + __version__)
            return None
        elif arg == "--constprop":
            opts.constprop = True
            i += 1
        elif arg == "--stop-at":
            if i + 1 >= len(args):
                raise UsageError("--stop-at requires an argument")
            opts.stop_at = args[i + 1]
            i += 2
        elif arg == "-o" or arg == "--output":
            if i + 1 >= len(args):
                raise UsageError(arg + " requires an argument")
            opts.output_file = args[i + 1]
            i += 2
        elif arg == "-v" or arg == "--verbose":
            opts.verbose = True
            i += 1
        elif arg.startswith("-"):
            raise UsageError("unknown flag '" + arg + "'")
        elif opts.input_file == "":
            opts.input_file = arg
            i += 1
        else:
            raise UsageError("unexpected argument '" + arg + "'")
    if opts.input_file == "":
        raise UsageError("missing file argument")
    if opts.stop_at is not None:
        if opts.stop_at not in PHASES:
            raise UsageError("unknown phase '" + opts.stop_at + "'")
        if opts.stop_at == "constprop":
            opts.constprop = True
    return opts


# --- JSON serialization ---


def _json_escape(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _to_json(obj: object, indent: int, level: int) -> str:
    if obj is None:
        return "null"
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, int):
        return str(obj)
    if isinstance(obj, str):
        return '"' + _json_escape(obj) + '"'
    pad = " " * (indent * (level + 1))
    pad_close = " " * (indent * level)
    if isinstance(obj, list):
        if len(obj) == 0:
            return "[]"
        parts = [pad + _to_json(item, indent, level + 1) for item in obj]
        return "[\n" + ",\n".join(parts) + "\n" + pad_close + "]"
    if isinstance(obj, dict):
        if len(obj) == 0:
            return "{}"
        parts = [
            pad + '"' + _json_escape(str(k)) + '": ' + _to_json(v, indent, level + 1)
            for k, v in obj.items()
        ]
        return "{\n" + ",\n".join(parts) + "\n" + pad_close + "}"
    raise TypeError("cannot serialize " + type(obj).__name__)


def to_json(obj: object) -> str:
    """Serialize object to pretty-printed JSON."""
    return _to_json(obj, 2, 0)


# --- Pipeline ---


def run_pipeline(source: str, opts: Options) -> str:
    """Run parse, scope check and (optionally) constant propagation."""
    program: Program = parse(source)
    if opts.stop_at == "parse":
        return to_json(to_dict(program)) + "\n"
    program = check(program)
    if opts.stop_at == "scope":
        return to_json(to_dict(program)) + "\n"
    if opts.constprop:
        program = propagate(program)
    if opts.stop_at == "constprop":
        return to_json(to_dict(program)) + "\n"
    return emit(program)


def read_source(path: str) -> str:
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise RusticError("cannot open '" + path + "'") from e
    try:
        return raw.decode("utf-8")
    except ValueError as e:
        raise RusticError("invalid utf-8 in '" + path + "'") from e


def write_output(output: str, output_file: str | None) -> None:
    if output_file is None:
        sys.stdout.write(output)
        return
    try:
        with open(output_file, "w") as f:
            f.write(output)
    except OSError as e:
        raise RusticError("cannot write '" + output_file + "'") from e


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    try:
        opts = parse_args(args)
    except UsageError as e:
        print("rustic: " + str(e), file=sys.stderr)
        return 2
    if opts is None:
        return 0
    logging.basicConfig(
        level=logging.DEBUG if opts.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(name)s: %(message)s",
    )
    try:
        source = read_source(opts.input_file)
        output = run_pipeline(source, opts)
        write_output(output, opts.output_file)
    except RusticError as e:
        print("Error: " + str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
