"""Composable API functions for the rewrite pipelines.

Each function corresponds to a CLI workflow but is callable programmatically
without argparse.
"""

from __future__ import annotations

import difflib
import logging
import os
import tempfile

from .errors import GothrowError
from .loader import SOURCE_PACKAGE_PATH, load_project, parse_source
from .oracle import ErrorOracle
from .packages import PackageRegistry, index_package
from .parser import Parser
from .planner import apply_candidates
from .printer import print_unit
from .report import ProjectReport, RewriteResult, UnitReport
from .resolver import resolve_unit
from .rewrite_types import RewriteConfig
from .scanner import scan_unit
from .unit import CompilationUnit

logger = logging.getLogger(__name__)


def rewrite_unit(unit: CompilationUnit, oracle: ErrorOracle, config: RewriteConfig) -> RewriteResult:
    """Scan, apply and print one resolved unit.

    Raises:
        PrintError: the mutated unit could not be serialized.
    """
    candidates = scan_unit(unit, oracle, config)
    modified = apply_candidates(unit, candidates, oracle, config) if candidates else False
    source = print_unit(unit) if modified else unit.source
    return RewriteResult(
        path=unit.path,
        modified=modified,
        source=source.decode("utf-8"),
        diagnostics=list(unit.diagnostics),
    )


def rewrite_source(
    source: str,
    config: RewriteConfig | None = None,
    path: str = "main.go",
    registry: PackageRegistry | None = None,
) -> RewriteResult:
    """Rewrite a single Go file given as text, treated as a package of its own.

    Args:
        source: The Go source text.
        config: Names and templates to emit; defaults to ``RewriteConfig()``.
        path: The file name used in diagnostics.
        registry: Package registry to resolve imports against.

    Returns:
        The rewritten text and the diagnostics of the pass.

    Raises:
        UnitLoadError: the source does not parse.
    """
    config = config or RewriteConfig()
    registry = registry or PackageRegistry()
    parsed = parse_source(path, source.encode("utf-8"), Parser())
    index = index_package(SOURCE_PACKAGE_PATH, [parsed])
    registry.register(index)
    unit = resolve_unit(path, parsed.source, parsed.tree, index, registry, config)
    return rewrite_unit(unit, ErrorOracle(registry), config)


def write_atomic(path: str, text: str) -> None:
    """Replace *path* with *text* via a temporary file in the same directory."""
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".gothrow-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        if os.path.exists(path):
            os.chmod(tmp_path, os.stat(path).st_mode & 0o777)
        os.replace(tmp_path, path)
    except BaseException:
        os.unlink(tmp_path)
        raise


def unified_diff(path: str, before: str, after: str) -> str:
    return "".join(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
        )
    )


def rewrite_project(
    root: str,
    config: RewriteConfig | None = None,
    dry_run: bool = False,
) -> ProjectReport:
    """Rewrite every package under *root*, writing modified files in place.

    A failure in one unit is recorded in its ``UnitReport`` and never stops
    the others.

    Raises:
        ProjectLoadError: *root* cannot be read.
    """
    config = config or RewriteConfig()
    registry = PackageRegistry()
    oracle = ErrorOracle(registry)
    project = load_project(root, registry)
    report = ProjectReport(root=root)
    for package in project.packages:
        for unit in package.resolve(registry, config):
            report.units.append(_rewrite_and_write(unit, oracle, config, dry_run))
    report.units.extend(UnitReport(path=e.path, error=e.reason) for e in project.errors)
    report.units.sort(key=lambda u: u.path)
    logger.info(
        "Processed %d files: %d modified, %d failed",
        len(report.units),
        len(report.modified),
        len(report.failed),
    )
    return report


def _rewrite_and_write(
    unit: CompilationUnit, oracle: ErrorOracle, config: RewriteConfig, dry_run: bool
) -> UnitReport:
    unit_report = UnitReport(path=unit.path)
    try:
        result = rewrite_unit(unit, oracle, config)
        unit_report.modified = result.modified
        unit_report.diagnostics = result.diagnostics
        if not result.modified:
            return unit_report
        unit_report.diff = unified_diff(unit.path, unit.source.decode("utf-8"), result.source)
        if not dry_run:
            logger.info("Writing modified file: %s", unit.path)
            write_atomic(unit.path, result.source)
            unit_report.written = True
    except (GothrowError, OSError) as e:
        logger.warning("Failed to rewrite %s: %s", unit.path, e)
        unit_report.error = str(e)
    return unit_report
