"""
Unit tests for the command-line entry point.
"""

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest

from docbridge.main import build_parser, main


# stands in for esbuild: drops simple ": type" annotations
STRIP_TYPES_COMMAND = [
    sys.executable,
    "-c",
    "import re, sys; sys.stdout.write(re.sub(r': \\w+', '', sys.stdin.read()))",
]


@pytest.fixture
def clean_env():
    """Run with no DOCBRIDGE_ variables set and restore root logging afterwards."""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    with patch.dict(os.environ, {}, clear=True):
        yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


def test_parser_arguments():
    """Test argument parsing."""
    args = build_parser().parse_args(["--transpile", "--output-dir", "out", "a.ts", "b.tsx"])

    assert args.transpile is True
    assert str(args.output_dir) == "out"
    assert [str(f) for f in args.files] == ["a.ts", "b.tsx"]


def test_annotated_source_to_stdout(tmp_path, capsys, clean_env):
    """Test a file is annotated onto stdout."""
    source = tmp_path / "shapes.ts"
    source.write_text("function area(r: number): number { return r * r; }\n")

    assert main([str(source), "--log-level", "WARNING"]) == 0

    out = capsys.readouterr().out
    assert "@param {number} r" in out
    assert "@return {number}" in out


def test_output_dir(tmp_path, clean_env):
    """Test results are written to the output directory."""
    source = tmp_path / "shapes.ts"
    source.write_text("function f(a: string): void {}\n")
    out_dir = tmp_path / "out"

    assert main([str(source), "--output-dir", str(out_dir), "--log-level", "WARNING"]) == 0

    assert "@param {string} a" in (out_dir / "shapes.ts").read_text()


def test_transpiled_output_gets_js_suffix(tmp_path, clean_env):
    """Test transpiled results are written as .js files with types stripped."""
    source = tmp_path / "shapes.ts"
    source.write_text("function f(a: string): void {}\n")
    out_dir = tmp_path / "out"
    os.environ["DOCBRIDGE_TRANSPILE_COMMAND"] = json.dumps(STRIP_TYPES_COMMAND)

    assert main([str(source), "--transpile", "--output-dir", str(out_dir), "--log-level", "WARNING"]) == 0

    result = (out_dir / "shapes.js").read_text()
    assert ": string" not in result
    assert ": void" not in result
    assert "function f(a) {}" in result
    assert "@param {string} a" in result
    assert not (out_dir / "shapes.ts").exists()


def test_directory_uses_include_patterns(tmp_path, clean_env):
    """Test a directory argument picks up only files the plugins include."""
    src = tmp_path / "src"
    (src / "nested").mkdir(parents=True)
    (src / "nested" / "a.ts").write_text("function f(a: number) {}\n")
    (src / "b.js").write_text("function g(b) {}\n")
    out_dir = tmp_path / "out"

    assert main([str(src), "--output-dir", str(out_dir), "--log-level", "WARNING"]) == 0

    assert "@param {number} a" in (out_dir / "nested" / "a.ts").read_text()
    assert not (out_dir / "b.js").exists()


def test_failed_file_sets_exit_code(tmp_path, capsys, clean_env):
    """Test a failing file is skipped and reported through the exit code."""
    bad = tmp_path / "bad.ts"
    bad.write_text("/**\n * @param a\n */\nfunction f(a: number, b: number) {}\n")
    good = tmp_path / "good.ts"
    good.write_text("function g(c: boolean) {}\n")

    assert main([str(bad), str(good), "--log-level", "CRITICAL"]) == 1

    out = capsys.readouterr().out
    assert "@param {boolean} c" in out
    assert "@param {number} a" not in out


def test_missing_file_sets_exit_code(tmp_path, clean_env):
    """Test unreadable files count as failures."""
    assert main([str(tmp_path / "missing.ts"), "--log-level", "CRITICAL"]) == 1
