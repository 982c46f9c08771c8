"""
Plugin Manager for documentation-generator language plugins.

This module maps file extensions to registered plugins and fans the
generator's lifecycle events (start, config, per-file parser) out to them.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from plugins.base import CodeParser, LanguagePlugin

logger = logging.getLogger(__name__)


class PluginManager:
    """Routes lifecycle events to language plugins by name and file extension."""

    def __init__(self):
        """Initialize the plugin manager."""
        self._plugins: Dict[str, LanguagePlugin] = {}
        self._extension_map: Dict[str, str] = {}

    def register_plugin(self, plugin: LanguagePlugin) -> None:
        """
        Register a language plugin.

        A plugin registered under an existing language name replaces the
        earlier one, as does a later claim on the same extension.

        Args:
            plugin: LanguagePlugin instance to register
        """
        language_name = plugin.language_name

        if language_name in self._plugins:
            logger.warning(f"Plugin for language '{language_name}' already registered, overwriting")

        self._plugins[language_name] = plugin

        for ext in plugin.file_extensions:
            if ext in self._extension_map and self._extension_map[ext] != language_name:
                logger.warning(
                    f"Extension '{ext}' already mapped to '{self._extension_map[ext]}', "
                    f"overwriting with '{language_name}'"
                )
            self._extension_map[ext] = language_name

        logger.info(
            f"Registered plugin for language '{language_name}' "
            f"with extensions: {plugin.file_extensions}"
        )

    def get_plugin_for_file(self, file_path: str) -> Optional[LanguagePlugin]:
        """
        Get the plugin responsible for a file, by extension.

        Args:
            file_path: Path to the file

        Returns:
            LanguagePlugin instance if found, None otherwise
        """
        ext = Path(file_path).suffix
        language = self._extension_map.get(ext)
        if language is None:
            logger.debug(f"No plugin for extension '{ext}' (file: {file_path})")
            return None
        return self._plugins.get(language)

    def start(self, options: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        """
        Deliver start options to every plugin.

        Args:
            options: Per-language option dictionaries keyed by language name
        """
        options = options or {}
        for language_name, plugin in self._plugins.items():
            plugin.on_start(options.get(language_name))

    def handle_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Let every plugin adjust the generator configuration, in registration order."""
        for plugin in self._plugins.values():
            config = plugin.on_handle_config(config)
        return config

    def wrap_parser(self, parser: CodeParser, file_path: str) -> CodeParser:
        """Return the parser the plugin for ``file_path`` wants used, or ``parser``."""
        plugin = self.get_plugin_for_file(file_path)
        if plugin is None:
            return parser
        return plugin.on_handle_code_parser(parser, file_path)
