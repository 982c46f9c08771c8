"""
Unit tests for transpiler handoff.
"""

import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from docbridge.models.error import TranspileError
from docbridge.services.transpiler import (
    DEFAULT_COMMAND,
    PassthroughTranspiler,
    SubprocessTranspiler,
    create_transpiler,
)


ECHO_COMMAND = [sys.executable, "-c", "import sys; sys.stdout.write(sys.stdin.read())"]


class TestCreateTranspiler:
    """Test transpiler construction from settings."""

    def test_no_command_runs_esbuild(self):
        """Test a missing command falls back to esbuild, never to TypeScript output."""
        transpiler = create_transpiler(None)

        assert isinstance(transpiler, SubprocessTranspiler)
        assert transpiler.build_command(jsx=False) == DEFAULT_COMMAND + ["--loader=ts"]

    def test_passthrough_hands_code_on(self):
        """Test the pass-through transpiler returns annotated TypeScript unchanged."""
        transpiler = PassthroughTranspiler()

        assert transpiler.transpile("let a: number;", jsx=True) == "let a: number;"

    def test_command_builds_subprocess_transpiler(self):
        """Test a command builds a subprocess transpiler."""
        transpiler = create_transpiler(["esbuild"])

        assert isinstance(transpiler, SubprocessTranspiler)
        assert transpiler.build_command(jsx=False) == ["esbuild", "--loader=ts"]


class TestSubprocessTranspiler:
    """Test running the external compiler."""

    def test_default_command(self):
        """Test the default command runs esbuild through npx."""
        transpiler = SubprocessTranspiler()

        assert transpiler.build_command(jsx=True) == DEFAULT_COMMAND + ["--loader=tsx"]

    def test_code_goes_through_stdin_and_stdout(self):
        """Test the compiler reads stdin and its stdout is returned."""
        transpiler = SubprocessTranspiler(ECHO_COMMAND)

        assert transpiler.transpile("/** @type {number} */\n") == "/** @type {number} */\n"

    def test_run_arguments(self):
        """Test subprocess.run receives the source and loader flag."""
        completed = MagicMock(stdout="var a;\n")
        with patch("docbridge.services.transpiler.subprocess.run", return_value=completed) as run:
            result = SubprocessTranspiler(["tsc-strip"], timeout_seconds=5).transpile("let a: T;", jsx=True)

        assert result == "var a;\n"
        args, kwargs = run.call_args
        assert args[0] == ["tsc-strip", "--loader=tsx"]
        assert kwargs["input"] == "let a: T;"
        assert kwargs["timeout"] == 5
        assert kwargs["check"] is True

    def test_failing_command_raises(self):
        """Test a non-zero exit becomes a TranspileError."""
        transpiler = SubprocessTranspiler(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"]
        )

        with pytest.raises(TranspileError) as exc_info:
            transpiler.transpile("let a;")

        assert "exit code 3" in str(exc_info.value)
        assert "boom" in str(exc_info.value)

    def test_missing_command_raises(self):
        """Test an unknown executable becomes a TranspileError."""
        transpiler = SubprocessTranspiler(["docbridge-no-such-compiler"])

        with pytest.raises(TranspileError, match="not found"):
            transpiler.transpile("let a;")

    def test_timeout_raises(self):
        """Test a hanging compiler becomes a TranspileError."""
        timeout = subprocess.TimeoutExpired(cmd=["esbuild"], timeout=1)
        with patch("docbridge.services.transpiler.subprocess.run", side_effect=timeout):
            with pytest.raises(TranspileError, match="timed out"):
                SubprocessTranspiler(["esbuild"], timeout_seconds=1).transpile("let a;")
