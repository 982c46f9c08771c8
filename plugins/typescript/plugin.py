"""
TypeScript Language Plugin for the documentation generator.

This plugin annotates TypeScript files with doc comments synthesized from
their type annotations, strips the types, and hands plain JavaScript to the
generator's own parser.
"""

import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from plugins.base import CodeParser, LanguagePlugin
from docbridge.config import Settings
from docbridge.models.error import ErrorRecord
from docbridge.services.annotator import Annotator
from docbridge.services.transpiler import Transpiler
from docbridge.synthesis.parser import is_typescript_file
from docbridge.utils.logging import get_logger, log_error_with_context

logger = get_logger(__name__, language="typescript")


class TypeScriptPlugin(LanguagePlugin):
    """TypeScript doc-comment synthesis plugin using tree-sitter."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        settings: Optional[Settings] = None,
        transpiler: Optional[Transpiler] = None
    ):
        """
        Initialize the TypeScript plugin.

        Args:
            config_path: Path to config.yaml file. If None, uses default location.
            settings: Runtime settings. If None, loaded from the environment.
            transpiler: Downstream compiler. If None, built from settings.
        """
        if config_path is None:
            config_path = Path(__file__).parent / "config.yaml"

        with open(config_path, 'r') as f:
            self._config = yaml.safe_load(f)

        self._annotator = Annotator(settings or Settings(), transpiler)
        self.errors: List[ErrorRecord] = []

        logger.info("TypeScript plugin initialized successfully")

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "typescript"

    @property
    def file_extensions(self) -> List[str]:
        """Return supported file extensions."""
        return self._config.get('file_extensions', ['.ts', '.tsx'])

    @property
    def include_patterns(self) -> List[str]:
        """Return the include patterns added to the generator configuration."""
        return self._config.get('include_patterns', [r'\.ts$', r'\.tsx$'])

    @property
    def enabled(self) -> bool:
        """Return whether the plugin is enabled."""
        return self._annotator.settings.enable

    def on_start(self, option: Optional[Dict[str, Any]]) -> None:
        """
        Apply start options; an ``enable`` entry overrides the configured flag.

        Args:
            option: Plugin options, or None
        """
        if not option or "enable" not in option:
            return

        settings = self._annotator.settings.model_copy(update={"enable": bool(option["enable"])})
        self._annotator = Annotator(settings, self._annotator.transpiler)
        logger.info(f"TypeScript plugin {'enabled' if settings.enable else 'disabled'} by start options")

    def on_handle_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Widen the generator's include patterns to cover TypeScript files.

        Patterns already present are not added twice.

        Args:
            config: Generator configuration, modified in place

        Returns:
            The same configuration object
        """
        if not self.enabled:
            return config

        includes = config.setdefault("includes", [])
        for pattern in self.include_patterns:
            if pattern not in includes:
                includes.append(pattern)
        return config

    def on_handle_code_parser(self, parser: CodeParser, file_path: str) -> CodeParser:
        """
        Wrap the generator's parser so TypeScript is annotated and stripped first.

        Args:
            parser: The host's native parser
            file_path: Path of the file about to be parsed

        Returns:
            ``parser`` itself when disabled, otherwise a wrapping parser that
            returns None for a file that fails to process
        """
        if not self.enabled:
            return parser

        def parse(code: str) -> Any:
            return self.parse(parser, file_path, code)

        return parse

    def parse(self, parser: CodeParser, file_path: str, code: str) -> Any:
        """
        Annotate, transpile and parse one file.

        Args:
            parser: The host's native parser
            file_path: Path of the file
            code: File content

        Returns:
            Whatever ``parser`` returns, or None if the file failed to process
        """
        if not is_typescript_file(file_path):
            return parser(code)

        try:
            plain_code = self._annotator.process(file_path, code)
        except Exception as e:
            self._record_failure(file_path, e)
            return None

        return parser(plain_code)

    def _record_failure(self, file_path: str, error: Exception) -> None:
        log_error_with_context(
            logger,
            f"Failed to process TypeScript file {file_path}: {error}",
            error,
            file_path=file_path,
            language=self.language_name,
        )
        self.errors.append(ErrorRecord(
            file_path=file_path,
            error_type=type(error).__name__,
            message=str(error),
            stack_trace="".join(traceback.format_exception(type(error), error, error.__traceback__)),
            timestamp=datetime.now(timezone.utc),
        ))
