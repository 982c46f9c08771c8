"""Unit tests for PluginManager."""

import logging
from typing import Any, Dict, List, Optional

from plugins import PluginManager, LanguagePlugin


class MockPlugin(LanguagePlugin):
    """Mock plugin that records lifecycle calls."""

    def __init__(self, name: str, extensions: List[str]):
        self._name = name
        self._extensions = extensions
        self.start_options: Optional[Dict[str, Any]] = "unset"

    @property
    def language_name(self) -> str:
        return self._name

    @property
    def file_extensions(self) -> List[str]:
        return self._extensions

    def on_start(self, option: Optional[Dict[str, Any]]) -> None:
        self.start_options = option

    def on_handle_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        config.setdefault("includes", []).append(f"\\.{self._name}$")
        return config

    def on_handle_code_parser(self, parser, file_path: str):
        def wrapped(code: str):
            return parser(f"[{self._name}]{code}")
        return wrapped


def make_typescript_plugin() -> MockPlugin:
    return MockPlugin("typescript", [".ts", ".tsx"])


def make_flow_plugin() -> MockPlugin:
    return MockPlugin("flow", [".flow"])


class TestPluginManager:
    """Test cases for PluginManager."""

    def test_get_plugin_for_file(self):
        """Test getting plugin by file extension."""
        manager = PluginManager()
        manager.register_plugin(make_flow_plugin())
        manager.register_plugin(make_typescript_plugin())

        plugin = manager.get_plugin_for_file("src/app.ts")
        assert plugin is not None
        assert plugin.language_name == "typescript"

        plugin = manager.get_plugin_for_file("src/Component.tsx")
        assert plugin is not None
        assert plugin.language_name == "typescript"

        plugin = manager.get_plugin_for_file("src/types.flow")
        assert plugin.language_name == "flow"

        assert manager.get_plugin_for_file("src/script.js") is None

    def test_plugin_override(self):
        """Test that registering a language twice keeps the newest plugin."""
        manager = PluginManager()
        first = make_typescript_plugin()
        second = make_typescript_plugin()

        manager.register_plugin(first)
        manager.register_plugin(second)

        assert manager.get_plugin_for_file("a.ts") is second

    def test_extension_claimed_by_another_language(self, caplog):
        """Test a later plugin takes over a shared extension with a warning."""
        manager = PluginManager()
        manager.register_plugin(make_typescript_plugin())

        with caplog.at_level(logging.WARNING, logger="plugins.manager"):
            manager.register_plugin(MockPlugin("deno", [".ts"]))

        assert manager.get_plugin_for_file("a.ts").language_name == "deno"
        assert manager.get_plugin_for_file("a.tsx").language_name == "typescript"
        assert any("already mapped to 'typescript'" in r.getMessage() for r in caplog.records)


class TestLifecycleDispatch:
    """Test fan-out of generator lifecycle events."""

    def test_start_delivers_per_language_options(self):
        """Test each plugin receives its own options, or None."""
        manager = PluginManager()
        typescript = make_typescript_plugin()
        flow = make_flow_plugin()
        manager.register_plugin(typescript)
        manager.register_plugin(flow)

        manager.start({"typescript": {"enable": False}})

        assert typescript.start_options == {"enable": False}
        assert flow.start_options is None

    def test_start_without_options(self):
        """Test every plugin receives None when no options are given."""
        manager = PluginManager()
        typescript = make_typescript_plugin()
        manager.register_plugin(typescript)

        manager.start()

        assert typescript.start_options is None

    def test_handle_config_runs_every_plugin(self):
        """Test all plugins see the configuration in turn."""
        manager = PluginManager()
        manager.register_plugin(make_typescript_plugin())
        manager.register_plugin(make_flow_plugin())

        config = manager.handle_config({"includes": ["\\.js$"]})

        assert config["includes"] == ["\\.js$", "\\.typescript$", "\\.flow$"]

    def test_wrap_parser_dispatches_by_extension(self):
        """Test parsers are wrapped only for files a plugin handles."""
        manager = PluginManager()
        manager.register_plugin(make_typescript_plugin())

        def host_parser(code):
            return code

        assert manager.wrap_parser(host_parser, "a.js") is host_parser
        assert manager.wrap_parser(host_parser, "a.ts")("x") == "[typescript]x"
