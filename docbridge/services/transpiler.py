"""
Handoff to the external type-stripping compiler.

The annotated source is still TypeScript; a ``Transpiler`` turns it into
plain JavaScript for the host's native parser. Comments must survive the
transpiler so the synthesized docs reach the documentation generator.
"""

import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from docbridge.models.error import TranspileError
from docbridge.utils.logging import get_logger

logger = get_logger(__name__, phase="transpile")

DEFAULT_COMMAND = ["npx", "--no-install", "esbuild"]


class Transpiler(ABC):
    """Base interface for type-stripping compilers."""

    @abstractmethod
    def transpile(self, code: str, jsx: bool = False) -> str:
        """
        Strip type syntax from annotated TypeScript.

        Args:
            code: Annotated TypeScript source
            jsx: True for TSX input

        Returns:
            JavaScript source

        Raises:
            TranspileError: If compilation fails
        """
        pass


class PassthroughTranspiler(Transpiler):
    """Returns the annotated source unchanged, for hosts that read TypeScript."""

    def transpile(self, code: str, jsx: bool = False) -> str:
        return code


class SubprocessTranspiler(Transpiler):
    """Runs an external compiler that reads source on stdin and writes to stdout."""

    def __init__(self, command: Optional[Sequence[str]] = None, timeout_seconds: float = 60.0):
        """
        Initialize the transpiler.

        Args:
            command: Base command line; ``--loader=ts``/``--loader=tsx`` is
                appended. Defaults to esbuild through npx.
            timeout_seconds: Time limit for a single compilation
        """
        self._command: List[str] = list(command) if command else list(DEFAULT_COMMAND)
        self._timeout_seconds = timeout_seconds

    def build_command(self, jsx: bool) -> List[str]:
        """Return the full command line for a compilation."""
        return self._command + ["--loader=tsx" if jsx else "--loader=ts"]

    def transpile(self, code: str, jsx: bool = False) -> str:
        command = self.build_command(jsx)
        logger.debug(f"Running transpiler: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                input=code,
                check=True,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError as e:
            raise TranspileError(f"Transpiler not found: {command[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise TranspileError(f"Transpiler timed out after {self._timeout_seconds}s") from e
        except subprocess.CalledProcessError as e:
            raise TranspileError(f"Transpiler failed with exit code {e.returncode}: {e.stderr}") from e

        return result.stdout


def create_transpiler(command: Optional[Sequence[str]]) -> Transpiler:
    """Return a subprocess transpiler for ``command``, esbuild through npx if None."""
    return SubprocessTranspiler(command)
