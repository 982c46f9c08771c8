"""
TypeScript language plugin.
"""

from plugins.typescript.plugin import TypeScriptPlugin

__all__ = ['TypeScriptPlugin']
