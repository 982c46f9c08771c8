"""
Base interface for documentation-generator language plugins.

This module defines the abstract base class that all language plugins must
implement to hook into the documentation generator's lifecycle.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

CodeParser = Callable[[str], Any]


class LanguagePlugin(ABC):
    """Base interface for language plugins of the documentation generator."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language name (e.g., 'typescript')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> List[str]:
        """Return supported file extensions (e.g., ['.ts', '.tsx'])."""
        pass

    @abstractmethod
    def on_start(self, option: Optional[Dict[str, Any]]) -> None:
        """
        Receive the plugin's options once, when the generator starts.

        Args:
            option: Plugin options from the generator configuration, or None
        """
        pass

    @abstractmethod
    def on_handle_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Adjust the generator configuration.

        Args:
            config: Generator configuration, modified in place

        Returns:
            The same configuration object
        """
        pass

    @abstractmethod
    def on_handle_code_parser(self, parser: CodeParser, file_path: str) -> CodeParser:
        """
        Wrap the generator's parser for one file.

        Args:
            parser: The host's native parser
            file_path: Path of the file about to be parsed

        Returns:
            Parser to use for this file
        """
        pass
