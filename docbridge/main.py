"""
Command-line entry point.

The CLI plays the documentation generator's part: it registers the language
plugins, lets them widen the include patterns, and pushes every file through
the parser each plugin hands back.

Usage:
  ts-docbridge src/shapes.ts                 # annotated TypeScript to stdout
  ts-docbridge --transpile src/shapes.ts     # annotated JavaScript to stdout
  ts-docbridge --output-dir out src/         # one file per matching input
"""

import argparse
import re
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from docbridge import __version__
from docbridge.config import Settings
from docbridge.services.transpiler import PassthroughTranspiler, create_transpiler
from docbridge.synthesis.parser import is_typescript_file
from docbridge.utils.logging import get_logger, log_error_with_context, setup_logging
from plugins import PluginManager
from plugins.typescript import TypeScriptPlugin

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ts-docbridge",
        description="Synthesize JSDoc comments from TypeScript type annotations.",
    )
    parser.add_argument("--version", action="version", version=f"ts-docbridge {__version__}")
    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="TypeScript files, or directories searched for the plugins' include patterns",
    )
    parser.add_argument(
        "--transpile",
        action="store_true",
        help="strip types with esbuild, or DOCBRIDGE_TRANSPILE_COMMAND when set",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="write results here instead of stdout",
    )
    parser.add_argument("--log-level", default=None, help="override DOCBRIDGE_LOG_LEVEL")
    return parser


def build_plugin_manager(settings: Settings, transpile: bool) -> PluginManager:
    """Register and start the language plugins for one run."""
    if transpile:
        transpiler = create_transpiler(settings.transpile_command)
    else:
        transpiler = PassthroughTranspiler()

    manager = PluginManager()
    manager.register_plugin(TypeScriptPlugin(settings=settings, transpiler=transpiler))
    manager.start()
    return manager


def _source_files(paths: List[Path], includes: List[str]) -> Iterator[Tuple[Path, Path]]:
    """Yield (file, output-relative path); directories are searched recursively."""
    patterns = [re.compile(pattern) for pattern in includes]
    for path in paths:
        if not path.is_dir():
            yield path, Path(path.name)
            continue
        for candidate in sorted(path.rglob("*")):
            if candidate.is_file() and any(p.search(candidate.as_posix()) for p in patterns):
                yield candidate, candidate.relative_to(path)


def _emit(code: str) -> str:
    return code


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = Settings()
    setup_logging(args.log_level or settings.log_level)

    manager = build_plugin_manager(settings, args.transpile)
    config = manager.handle_config({"includes": []})

    failures = 0
    for path, relative in _source_files(args.files, config["includes"]):
        try:
            code = path.read_text(encoding="utf8")
        except OSError as e:
            log_error_with_context(logger, f"Failed to read {path}", e, file_path=str(path))
            failures += 1
            continue

        result = manager.wrap_parser(_emit, str(path))(code)
        if result is None:
            # logged and recorded by the plugin; the remaining files still run
            failures += 1
            continue

        if args.output_dir is None:
            sys.stdout.write(result)
            continue

        target = args.output_dir / relative
        if args.transpile and settings.enable and is_typescript_file(str(path)):
            target = target.with_suffix(".js")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(result, encoding="utf8")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
