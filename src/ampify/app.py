from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ampify.controllers.build_controller import BuildController
from ampify.core.managers.config_manager import config_manager
from ampify.core.utils.configure_logging import configure_logger
from ampify.core.utils.path_utils import PathUtils
from ampify.errors import AmpifyError
from ampify.model import BuildSettings

logger = logging.getLogger(__name__)

build_help_text = """
  ampify build [--root DIR] [--source P] [--stylesheet P] [--output P] [--set KEY=VALUE]...
      Converts the source page into its AMP variant and writes it to the output path.
  ampify shim [--output P]
      Prints (or writes) the browser script that promotes preload links to stylesheets.
""".strip()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ampify", description="Build the AMP variant of a static page.",
                                     epilog=build_help_text, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level.")
    subs = parser.add_subparsers(dest="subcommand")

    p_build = subs.add_parser("build", help="Build the AMP page.")
    p_build.add_argument("--root", type=Path, default=None,
                         help="Project root the configured paths are relative to (default: cwd).")
    p_build.add_argument("--source", type=Path, default=None, help="Source HTML file.")
    p_build.add_argument("--stylesheet", type=Path, default=None, help="Stylesheet to inline.")
    p_build.add_argument("--output", type=Path, default=None, help="Output HTML file.")
    p_build.add_argument("--set", dest="overrides", action="append", default=[], metavar="KEY=VALUE",
                         help="Override a configuration value, e.g. analytics.account=UA-1-1.")
    p_build.add_argument("--no-progress", action="store_true", help="Hide the progress bar.")

    p_shim = subs.add_parser("shim", help="Emit the preload-to-stylesheet browser script.")
    p_shim.add_argument("--output", type=Path, default=None, help="Write the script here instead of stdout.")
    return parser


def _apply_overrides(overrides: List[str]) -> bool:
    for item in overrides:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            print(f"❌ Error: Invalid override '{item}', expected KEY=VALUE.")
            return False
        if not config_manager.set_nested(key.strip(), value):
            print(f"❌ Error: Could not set '{key.strip()}'.")
            return False
    return True


def handle_build(pargs: argparse.Namespace) -> int:
    """Runs one build. This is the single place where build failures are reported."""
    if not _apply_overrides(pargs.overrides):
        return 1

    try:
        settings = BuildSettings.from_config(
            config_manager,
            root=pargs.root,
            source=pargs.source,
            stylesheet=pargs.stylesheet,
            output=pargs.output,
        )
        controller = BuildController(settings)
        result = asyncio.run(controller.run(show_progress=not pargs.no_progress))
    except AmpifyError as e:
        logger.error("Build failed (%s): %s", type(e).__name__, e)
        print(f"❌ Build failed: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(f"✅ Wrote {result.output} ({result.bytes_written} bytes, {result.duration_s}s)")
    return 0


def handle_shim(pargs: argparse.Namespace) -> int:
    script = PathUtils.get_preload_shim().read_text(encoding="utf-8")
    if pargs.output is None:
        sys.stdout.write(script)
        return 0
    try:
        pargs.output.parent.mkdir(parents=True, exist_ok=True)
        pargs.output.write_text(script, encoding="utf-8")
    except OSError as e:
        logger.error("Could not write shim: %s", e)
        print(f"❌ Error: Could not write {pargs.output}: {e}", file=sys.stderr)
        return 1
    print(f"✅ Wrote {pargs.output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the `ampify` command."""
    parser = _build_parser()
    try:
        pargs = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    configure_logger("DEBUG" if pargs.verbose else config_manager.get_nested("debug.level", "INFO"))

    if pargs.subcommand == "build":
        return handle_build(pargs)
    if pargs.subcommand == "shim":
        return handle_shim(pargs)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
