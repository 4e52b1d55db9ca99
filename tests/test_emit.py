"""Golden tests: JSON SAST in, C++ out."""

from pathlib import Path

import pytest

from coral.backend.cpp import emit_cpp
from coral.serialize import from_json

EMIT_DIR = Path(__file__).parent / "emit"


def parse_spec_file(path: Path) -> list[tuple[str, str, str]]:
    """Parse a .tests file into (name, input, expected) tuples."""
    lines = path.read_text().split("\n")
    result: list[tuple[str, str, str]] = []
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
            result.append((test_name, "\n".join(input_lines), "\n".join(expected_lines).strip()))
        else:
            i += 1
    return result


def discover_specs(test_dir: Path) -> list[tuple[str, str, str]]:
    """Glob *.tests in test_dir, return (test_id, input, expected) tuples."""
    results = []
    for test_file in sorted(test_dir.glob("*.tests")):
        for name, input_json, expected in parse_spec_file(test_file):
            results.append((f"{test_file.stem}/{name}", input_json, expected))
    return results


def pytest_generate_tests(metafunc):
    """Parametrize over the emit .tests files."""
    if "emit_input" in metafunc.fixturenames:
        params = [
            pytest.param(input_json, expected, id=test_id)
            for test_id, input_json, expected in discover_specs(EMIT_DIR)
        ]
        metafunc.parametrize("emit_input,emit_expected", params)


def test_emit(emit_input: str, emit_expected: str):
    output = emit_cpp(from_json(emit_input))
    if output.strip() != emit_expected:
        pytest.fail(f"--- expected ---\n{emit_expected}\n--- got ---\n{output}")


def test_specs_are_discovered():
    assert len(discover_specs(EMIT_DIR)) >= 9
