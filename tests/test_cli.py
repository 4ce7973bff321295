"""CLI tests for the garnet entry point.

Test cases live in cli/*.tests files. Format:

    === test name
    args: --to-proc --indent 4
    source code here
    (stdin for the formatter)
    ---
    exit: 0
    stdout: x = 1
    stderr-empty: true
    ---

Special directives in the input section:
    args:           CLI arguments (first line, required)
    stdin-bytes:    hex-encoded raw bytes instead of text (e.g. "ff fe")

Assertion directives in the expected section:
    exit:             exact exit code
    exit-not:         exit code must NOT equal this
    stdout:           exact stdout content (trailing newline added)
    stdout-contains:  stdout must contain substring
    stdout-empty:     stdout must be empty
    stderr:           exact stderr content (trailing newline added)
    stderr-contains:  stderr must contain substring
    stderr-empty:     stderr must be empty
"""

import subprocess
import sys
from pathlib import Path

import pytest

from garnet.cli import run_pipeline
from garnet.options import Options

CLI_DIR = Path(__file__).parent / "cli"
ROOT_DIR = Path(__file__).parent.parent


def parse_cli_test_file(path: Path) -> list[tuple[str, dict]]:
    """Parse a .tests file into (name, case) tuples."""
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
            result.append((test_name, _parse_case(input_lines, expected_lines)))
        else:
            i += 1
    return result


def _parse_case(input_lines: list[str], expected_lines: list[str]) -> dict:
    case: dict = {
        "args": [],
        "stdin": None,
        "stdin_bytes": None,
        "assertions": [],
    }
    body_start = 0
    if input_lines and input_lines[0].startswith("args:"):
        args_str = input_lines[0][5:].strip()
        case["args"] = args_str.split() if args_str else []
        body_start = 1
    remaining = input_lines[body_start:]
    if remaining and remaining[0].startswith("stdin-bytes:"):
        case["stdin_bytes"] = bytes.fromhex(remaining[0][len("stdin-bytes:") :].strip())
    else:
        case["stdin"] = "\n".join(remaining)
    for line in expected_lines:
        line = line.strip()
        if not line:
            continue
        key, _, value = line.partition(":")
        value = value.strip()
        if key in ("exit", "exit-not"):
            case["assertions"].append((key, int(value)))
        elif key in ("stdout-empty", "stderr-empty"):
            case["assertions"].append((key, None))
        elif key in ("stdout", "stdout-contains", "stderr", "stderr-contains"):
            case["assertions"].append((key, value))
        else:
            raise ValueError("unknown assertion: " + line)
    return case


def discover_cli_tests() -> list[tuple[str, dict]]:
    results = []
    for test_file in sorted(CLI_DIR.glob("*.tests")):
        for name, case in parse_cli_test_file(test_file):
            results.append((f"{test_file.stem}/{name}", case))
    return results


def run_cli(case: dict) -> subprocess.CompletedProcess[bytes]:
    """Run the garnet CLI from a test case."""
    cmd = [sys.executable, "-m", "garnet", *case["args"]]
    if case["stdin_bytes"] is not None:
        stdin_data = case["stdin_bytes"]
    elif case["stdin"] is not None:
        stdin_data = case["stdin"].encode()
    else:
        stdin_data = b""
    return subprocess.run(cmd, input=stdin_data, capture_output=True, cwd=ROOT_DIR)


def check_assertions(result: subprocess.CompletedProcess[bytes], assertions: list[tuple]) -> None:
    stdout = result.stdout.decode(errors="replace")
    stderr = result.stderr.decode(errors="replace")
    for kind, value in assertions:
        if kind == "exit":
            assert result.returncode == value, (
                f"expected exit {value}, got {result.returncode}\nstderr: {stderr}"
            )
        elif kind == "exit-not":
            assert result.returncode != value, f"expected exit != {value}"
        elif kind == "stdout":
            assert stdout.rstrip("\n") == value, f"expected stdout {value!r}, got {stdout!r}"
        elif kind == "stdout-contains":
            assert value in stdout, f"expected stdout to contain {value!r}, got {stdout!r}"
        elif kind == "stdout-empty":
            assert stdout == "", f"expected empty stdout, got {stdout[:200]!r}"
        elif kind == "stderr":
            assert stderr.rstrip("\n") == value, f"expected stderr {value!r}, got {stderr!r}"
        elif kind == "stderr-contains":
            assert value in stderr, f"expected stderr to contain {value!r}, got {stderr!r}"
        elif kind == "stderr-empty":
            assert stderr == "", f"expected empty stderr, got {stderr!r}"


def pytest_generate_tests(metafunc):
    """Parametrize test_cli over all .tests files."""
    if "cli_case" in metafunc.fixturenames:
        params = [pytest.param(case, id=test_id) for test_id, case in discover_cli_tests()]
        metafunc.parametrize("cli_case", params)


def test_cli(cli_case: dict) -> None:
    result = run_cli(cli_case)
    check_assertions(result, cli_case["assertions"])


# ── run_pipeline ──


def test_pipeline_formats() -> None:
    assert run_pipeline("x   =  1\n", Options(), None, False) == (0, "x = 1\n")


def test_pipeline_indent_width() -> None:
    source = "list.each do |x|\n  x.save\nend\n"
    code, output = run_pipeline(source, Options(indent_width=4), None, False)
    assert code == 0
    assert output == "list.each do |x|\n    x.save\nend\n"


def test_pipeline_pragma_enables_rewrite() -> None:
    source = "# garnet: to-proc\nlist.map { |i| i.to_s }\n"
    code, output = run_pipeline(source, Options(), None, False)
    assert code == 0
    assert output.endswith("list.map(&:to_s)\n")


def test_pipeline_check_quiet_when_formatted() -> None:
    assert run_pipeline("x = 1\n", Options(), None, True) == (0, "")


def test_pipeline_parse_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert run_pipeline("x = )\n", Options(), None, False) == (1, "")
    assert capsys.readouterr().err == "error:1:5: unexpected ')'\n"


def test_pipeline_stop_at_parse_ignores_skip() -> None:
    code, output = run_pipeline("# garnet: skip\nx = 1\n", Options(), "parse", False)
    assert code == 0
    assert output.startswith("{")
