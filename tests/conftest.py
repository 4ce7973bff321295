"""Pytest configuration for the Garnet test suite."""

import sys
from pathlib import Path

# Add the repository root to path for garnet imports
sys.path.insert(0, str(Path(__file__).parent.parent))

TESTS_DIR = Path(__file__).parent


def parse_tests(text: str) -> list[tuple[str, str, str]]:
    """Parse .tests content into (name, input, expected) tuples.

    Format:

        === test name
        input lines
        ---
        expected lines
        ---
    """
    lines = text.split("\n")
    result: list[tuple[str, str, str]] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        if line.startswith("=== "):
            test_name = line[4:].strip()
            i += 1
            input_lines: list[str] = []
            while i < len(lines) and lines[i] != "---":
                input_lines.append(lines[i])
                i += 1
            if i < len(lines):
                i += 1  # skip ---
            expected_lines: list[str] = []
            while i < len(lines) and lines[i] != "---":
                expected_lines.append(lines[i])
                i += 1
            if i < len(lines):
                i += 1  # skip ---
            result.append((test_name, "\n".join(input_lines), "\n".join(expected_lines)))
        else:
            i += 1
    return result


def discover_tests(subdir: str) -> list[tuple[str, str, str]]:
    """Collect (test_id, input, expected) across tests/<subdir>/*.tests."""
    results: list[tuple[str, str, str]] = []
    for test_file in sorted((TESTS_DIR / subdir).glob("*.tests")):
        for name, test_input, expected in parse_tests(test_file.read_text()):
            results.append((test_file.stem + "/" + name, test_input, expected))
    return results
