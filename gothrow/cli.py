"""Command-line entry point: ``gothrow [DIR] [--dry-run] [--diff] [--err-name NAME] [--verbose]``."""

from __future__ import annotations

import argparse
import logging
import sys

from . import constants
from .api import rewrite_project
from .errors import ProjectLoadError
from .rewrite_types import RewriteConfig

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNIT_FAILED = 1
EXIT_UNREADABLE = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gothrow",
        description="Rewrite Go code that discards errors with `_` into checked errors",
    )
    parser.add_argument("directory", nargs="?", default=".",
                        help="Project root to rewrite (default: current directory)")
    parser.add_argument("--dry-run", "-n", action="store_true",
                        help="Report what would change without writing files")
    parser.add_argument("--diff", "-d", action="store_true",
                        help="Print a unified diff for every changed file")
    parser.add_argument("--err-name", default=constants.DEFAULT_ERROR_VAR,
                        help="Name of the error variable (default: err)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log internal decisions")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    if not args.err_name.isidentifier():
        logger.error("--err-name must be a Go identifier, got %r", args.err_name)
        return EXIT_UNREADABLE

    config = RewriteConfig(error_var=args.err_name)
    try:
        report = rewrite_project(args.directory, config=config, dry_run=args.dry_run)
    except ProjectLoadError as e:
        logger.error("%s", e)
        return EXIT_UNREADABLE

    if args.diff:
        for unit in report.modified:
            sys.stdout.write(unit.diff)
    for unit in report.failed:
        print(f"{unit.path}: {unit.error}", file=sys.stderr)
    return EXIT_UNIT_FAILED if report.failed else EXIT_OK
