"""
Language plugin architecture for the documentation generator.

This package provides the plugin system for language-specific source
preprocessing, including the base plugin interface and plugin manager.
"""

from plugins.base import LanguagePlugin
from plugins.manager import PluginManager

__all__ = ['LanguagePlugin', 'PluginManager']
