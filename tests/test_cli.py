"""CLI tests for the rustic entry point.

Test cases live in cli/*.tests files. Format:

    === test name
    args: --constprop
    source code here
    (written to main.rs, whose path is appended to args)
    ---
    exit: 0
    stderr: Error: some message
    stdout-contains: let a = 2u8;
    stdout-empty: true
    stderr-empty: true
    ---

Input section:
    args:           CLI arguments (first line, required)
    source-bytes:   hex-encoded raw source bytes instead of text (e.g. "ff fe")
    remaining lines source file contents; when blank, no file is created
                    and nothing is appended to args

Assertion directives in the expected section:
    exit:             exact exit code
    stderr:           exact stderr content (trailing newline stripped)
    stderr-contains:  stderr must contain substring
    stderr-empty:     stderr must be empty
    stdout-contains:  stdout must contain substring
    stdout-empty:     stdout must be empty
    file-contains:    PATH TEXT, file PATH (relative to the run directory)
                      must exist and contain TEXT
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

CLI_DIR = Path(__file__).parent / "cli"
SRC_DIR = Path(__file__).parent.parent / "src"
SOURCE_NAME = "main.rs"


def parse_cli_test_file(path: Path) -> list[tuple[str, dict]]:
    """Parse a .tests file into (name, spec) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, dict]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                input_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            expected_lines: list[str] = []
            while i < len(lines) and not lines[i].startswith("---"):
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines) and lines[i] == "---":
                i += 1
            spec = _parse_spec(input_lines, expected_lines)
            result.append((test_name, spec))
        else:
            i += 1
    return result


def _parse_spec(input_lines: list[str], expected_lines: list[str]) -> dict:
    """Parse input + expected lines into a test spec dict."""
    spec: dict = {
        "args": [],
        "source": None,
        "source_bytes": None,
        "assertions": [],
    }
    body_start = 0
    if input_lines and input_lines[0].startswith("args:"):
        args_str = input_lines[0][5:].strip()
        spec["args"] = args_str.split() if args_str else []
        body_start = 1
    remaining = input_lines[body_start:]
    if remaining and remaining[0].startswith("source-bytes:"):
        hex_str = remaining[0][len("source-bytes:") :].strip()
        spec["source_bytes"] = bytes.fromhex(hex_str)
    else:
        source = "\n".join(remaining)
        if source.strip():
            spec["source"] = source

    for line in expected_lines:
        line = line.strip()
        if not line:
            continue
        if line.startswith("exit:"):
            spec["assertions"].append(("exit", int(line[5:].strip())))
        elif line.startswith("stderr:"):
            spec["assertions"].append(("stderr", line[7:].strip()))
        elif line.startswith("stderr-contains:"):
            spec["assertions"].append(("stderr-contains", line[16:].strip()))
        elif line.startswith("stderr-empty:"):
            spec["assertions"].append(("stderr-empty", None))
        elif line.startswith("stdout-contains:"):
            spec["assertions"].append(("stdout-contains", line[16:].strip()))
        elif line.startswith("stdout-empty:"):
            spec["assertions"].append(("stdout-empty", None))
        elif line.startswith("file-contains:"):
            path, _, text = line[14:].strip().partition(" ")
            spec["assertions"].append(("file-contains", (path, text.strip())))
    return spec


def discover_cli_tests() -> list[tuple[str, dict]]:
    """Find all CLI tests across .tests files."""
    results = []
    for test_file in sorted(CLI_DIR.glob("*.tests")):
        for name, spec in parse_cli_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", spec))
    return results


def run_cli(args: list[str], cwd: Path) -> subprocess.CompletedProcess[bytes]:
    """Run the rustic CLI in cwd."""
    env = dict(os.environ)
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    return subprocess.run(
        [sys.executable, "-m", "rustic", *args],
        capture_output=True,
        cwd=cwd,
        env=env,
    )


def check_assertions(
    result: subprocess.CompletedProcess[bytes], assertions: list[tuple], cwd: Path
) -> None:
    """Check all assertions against a CLI result."""
    for kind, value in assertions:
        if kind == "exit":
            assert result.returncode == value, (
                f"expected exit {value}, got {result.returncode}"
                f"\nstderr: {result.stderr.decode(errors='replace')}"
            )
        elif kind == "stderr":
            actual = result.stderr.decode(errors="replace").rstrip("\n")
            assert actual == value, f"expected stderr {value!r}, got {actual!r}"
        elif kind == "stderr-contains":
            actual = result.stderr.decode(errors="replace")
            assert value in actual, (
                f"expected stderr to contain {value!r}, got {actual!r}"
            )
        elif kind == "stderr-empty":
            assert result.stderr == b"", f"expected empty stderr, got {result.stderr!r}"
        elif kind == "stdout-contains":
            actual = result.stdout.decode(errors="replace")
            assert value in actual, (
                f"expected stdout to contain {value!r}, got {actual!r}"
            )
        elif kind == "stdout-empty":
            assert result.stdout == b"", (
                f"expected empty stdout, got {result.stdout[:200]!r}"
            )
        elif kind == "file-contains":
            path, text = value
            target = cwd / path
            assert target.exists(), f"expected {path} to be written"
            actual = target.read_text()
            assert text in actual, f"expected {path} to contain {text!r}, got {actual!r}"


def pytest_generate_tests(metafunc):
    """Parametrize test_cli over all .tests files."""
    if "cli_spec" in metafunc.fixturenames:
        tests = discover_cli_tests()
        params = [pytest.param(spec, id=test_id) for test_id, spec in tests]
        metafunc.parametrize("cli_spec", params)


def test_cli(cli_spec: dict, tmp_path: Path) -> None:
    """Run a single CLI test case from .tests file."""
    args = list(cli_spec["args"])
    if cli_spec["source_bytes"] is not None:
        (tmp_path / SOURCE_NAME).write_bytes(cli_spec["source_bytes"])
        args.append(SOURCE_NAME)
    elif cli_spec["source"] is not None:
        (tmp_path / SOURCE_NAME).write_text(cli_spec["source"])
        args.append(SOURCE_NAME)
    result = run_cli(args, tmp_path)
    check_assertions(result, cli_spec["assertions"], tmp_path)


def test_output_file(tmp_path: Path) -> None:
    """-o writes the rendered program to a file instead of stdout."""
    (tmp_path / SOURCE_NAME).write_text("fn main() { let a = 2u8 * 3u8; }\n")
    result = run_cli(["--constprop", "-o", "out.rs", SOURCE_NAME], tmp_path)
    assert result.returncode == 0, result.stderr
    assert result.stdout == b""
    assert (tmp_path / "out.rs").read_text() == "fn main() {\n    let a = 6u8;\n}\n"


def test_output_reparses(tmp_path: Path) -> None:
    """Rendered output is itself valid input and folds to the same constants."""
    source = "fn f(a: u8) {\n    let b = (1u8 + 2u8) * 3u8;\n    let c = a + b;\n}\n"
    (tmp_path / SOURCE_NAME).write_text(source)
    first = run_cli([SOURCE_NAME], tmp_path)
    assert first.returncode == 0, first.stderr
    assert b"let b = (((1u8) + 2u8)) * 3u8;" in first.stdout
    (tmp_path / "again.rs").write_bytes(first.stdout)
    folded = run_cli(["--constprop", "again.rs"], tmp_path)
    assert folded.returncode == 0, folded.stderr
    assert b"let b = 9u8;" in folded.stdout
    assert b"let c = ((a)) + 9u8;" in folded.stdout
