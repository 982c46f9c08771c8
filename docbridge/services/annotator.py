"""
Per-file annotation entry point.

``Annotator.annotate`` runs parse → select → rewrite for one file and
returns the annotated TypeScript; ``Annotator.process`` additionally hands
the result to the configured transpiler. Every call works on fresh state, so
a failure in one file never leaks into the next.
"""

import time
from pathlib import Path
from typing import Optional

from docbridge.config import Settings
from docbridge.services.transpiler import Transpiler, create_transpiler
from docbridge.synthesis.ledger import rewrite
from docbridge.synthesis.parser import is_typescript_file, parse_source
from docbridge.synthesis.selector import DeclarationSelector
from docbridge.utils.logging import LogContext, get_logger, log_file_annotated

logger = get_logger(__name__)


def annotate_source(file_path: str, code: str, settings: Settings) -> str:
    """
    Synthesize doc comments for one TypeScript file.

    Args:
        file_path: Path of the file; its extension selects the grammar
        code: File content
        settings: Explicit configuration; nothing is done when disabled

    Returns:
        Annotated TypeScript, or ``code`` unchanged for disabled settings and
        non-TypeScript files

    Raises:
        MismatchError: If documented and declared parameters disagree
        MalformedInputError: If a parameter property has no identifier
    """
    if not settings.enable or not is_typescript_file(file_path):
        return code

    started = time.perf_counter()

    with LogContext(logger, file_path=file_path, phase="select"):
        source = code.encode("utf8")
        tree = parse_source(file_path, source)
        ledger = DeclarationSelector(source).select(tree.root_node)
        annotated = rewrite(source, ledger)

    log_file_annotated(
        logger,
        file_path,
        targets=len(ledger.targets),
        edits=len(ledger.edits),
        duration_ms=(time.perf_counter() - started) * 1000,
    )
    return annotated


class Annotator:
    """Annotates and transpiles TypeScript files under one configuration."""

    def __init__(self, settings: Settings, transpiler: Optional[Transpiler] = None):
        """
        Initialize the annotator.

        Args:
            settings: Configuration read once at startup
            transpiler: Downstream compiler; built from
                ``settings.transpile_command`` if omitted
        """
        self.settings = settings
        self.transpiler = transpiler or create_transpiler(settings.transpile_command)

    def annotate(self, file_path: str, code: str) -> str:
        """Return annotated TypeScript for one file."""
        return annotate_source(file_path, code, self.settings)

    def process(self, file_path: str, code: str) -> str:
        """
        Annotate one file and strip its types.

        Raises:
            DocBridgeError: If annotation or transpilation fails
        """
        annotated = self.annotate(file_path, code)
        if not self.settings.enable or not is_typescript_file(file_path):
            return annotated
        return self.transpiler.transpile(annotated, jsx=Path(file_path).suffix == ".tsx")
