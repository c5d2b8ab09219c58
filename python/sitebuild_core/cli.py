"""Command-line entry point.

Usage:
    sitebuild [--config FILE] [--output DIR] [--static DIR]
              [--source-dir DIR] [--no-static] [--log-level LEVEL]

Options default to the SITEBUILD_* environment variables, then to the
BuildSettings defaults.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from .builder import run_build
from .events import BuildEventNames, BuildEvents
from .logging import configure_logging
from .types import BuildSettings

logger = logging.getLogger("sitebuild")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitebuild",
        description="Resolve a YAML site document and write its pages.",
    )
    parser.add_argument("--config", dest="config_file", help="Site document (default: config.yaml)")
    parser.add_argument("--output", dest="output_dir", help="Output directory (default: build)")
    parser.add_argument("--static", dest="static_dir", help="Static asset directory (default: static)")
    parser.add_argument(
        "--source-dir",
        dest="source_dir",
        help="Directory templates are loaded from (default: .)",
    )
    parser.add_argument(
        "--no-static",
        dest="link_static",
        action="store_false",
        default=None,
        help="Do not link the static directory into the output",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["trace", "debug", "info", "warn", "error"],
        help="Log level (default: info)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Returns:
        0 on success, 1 if the build failed, 2 for invalid settings.
    """
    args = build_parser().parse_args(argv)

    try:
        settings = BuildSettings.from_env(**vars(args))
    except ValidationError as e:
        print(f"Invalid settings:\n{e}", file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    events = BuildEvents()
    events.start()
    events.subscribe(BuildEventNames.PAGE_WRITTEN, _on_page_written)

    try:
        run_build(settings, events=events)
    except Exception:
        logger.exception("Error!")
        return 1
    finally:
        events.stop()

    print("Building complete!")
    return 0


def _on_page_written(url: str, path: Path) -> None:
    logger.info(f"  {url} -> {path}")


if __name__ == "__main__":
    sys.exit(main())
