"""Loader — finds a project's Go packages, parses and resolves their files.

Loading happens in two phases so that cross-package calls resolve: every
package is parsed and indexed into the shared registry first, then each file
is resolved into a ``CompilationUnit``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from . import constants
from .errors import ProjectLoadError, UnitLoadError
from .packages import PackageIndex, PackageRegistry, ParsedFile, index_package, package_name
from .parser import Parser, first_error
from .resolver import resolve_unit
from .rewrite_types import RewriteConfig
from .unit import CompilationUnit

logger = logging.getLogger(__name__)

GO_MOD = "go.mod"
SOURCE_PACKAGE_PATH = "command-line-arguments"


def _skip_directory(name: str) -> bool:
    return name in constants.SKIPPED_DIRECTORIES or name.startswith((".", "_"))


def is_source_file(name: str) -> bool:
    return name.endswith(constants.GO_FILE_SUFFIX) and not name.endswith(
        constants.GO_TEST_FILE_SUFFIX
    )


def discover_packages(root: str) -> dict[str, list[str]]:
    """Map each directory under *root* holding Go files to its sorted file paths."""
    if not os.path.isdir(root):
        raise ProjectLoadError(f"{root} is not a directory")
    try:
        os.listdir(root)
    except OSError as e:
        raise ProjectLoadError(f"cannot read {root}: {e}") from e

    packages: dict[str, list[str]] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not _skip_directory(d))
        files = sorted(os.path.join(dirpath, f) for f in filenames if is_source_file(f))
        if files:
            packages[dirpath] = files
    logger.info("Discovered %d packages under %s", len(packages), root)
    return packages


def module_path(root: str) -> str:
    """Module path declared by ``go.mod`` at *root*, or ``""``."""
    try:
        with open(os.path.join(root, GO_MOD), encoding="utf-8") as f:
            for line in f:
                parts = line.split("//")[0].split()
                if len(parts) == 2 and parts[0] == "module":
                    return parts[1].strip('"')
    except FileNotFoundError:
        return ""
    return ""


def import_path_for(root: str, directory: str, module: str) -> str:
    rel = os.path.relpath(directory, root).replace(os.sep, "/")
    base = module or "_"
    return base if rel == "." else f"{base}/{rel}"


def parse_source(path: str, source: bytes, parser: Parser) -> ParsedFile:
    try:
        source.decode("utf-8")
    except UnicodeDecodeError as e:
        raise UnitLoadError(path, f"not valid UTF-8 at byte {e.start}") from e
    tree = parser.parse(source)
    error = first_error(tree.root_node)
    if error is not None:
        raise UnitLoadError(path, f"syntax error at line {error.start_point[0] + 1}")
    if not package_name(tree.root_node, source):
        raise UnitLoadError(path, "missing package clause")
    return ParsedFile(path=path, source=source, tree=tree)


def parse_file(path: str, parser: Parser) -> ParsedFile:
    try:
        with open(path, "rb") as f:
            source = f.read()
    except OSError as e:
        raise UnitLoadError(path, str(e)) from e
    return parse_source(path, source, parser)


@dataclass
class LoadedPackage:
    """One package's parsed files and index, plus the files that failed to load."""

    path: str
    index: PackageIndex
    files: list[ParsedFile] = field(default_factory=list)
    errors: list[UnitLoadError] = field(default_factory=list)

    def resolve(self, registry: PackageRegistry, config: RewriteConfig) -> list[CompilationUnit]:
        """Resolve every file; a file that fails is recorded in ``errors`` and dropped."""
        units: list[CompilationUnit] = []
        for f in self.files:
            try:
                units.append(resolve_unit(f.path, f.source, f.tree, self.index, registry, config))
            except Exception as e:
                error = UnitLoadError(f.path, f"cannot resolve: {e}")
                logger.warning("%s", error)
                self.errors.append(error)
        return units


def load_package(
    path: str,
    files: list[str],
    registry: PackageRegistry,
    parser: Parser,
) -> LoadedPackage:
    """Parse *files*, index them as package *path* and register the index."""
    parsed: list[ParsedFile] = []
    errors: list[UnitLoadError] = []
    for file_path in files:
        try:
            parsed.append(parse_file(file_path, parser))
        except UnitLoadError as e:
            logger.warning("%s", e)
            errors.append(e)
    parsed = _majority_package(parsed, errors)
    index = index_package(path, parsed)
    registry.register(index)
    return LoadedPackage(path=path, index=index, files=parsed, errors=errors)


def _majority_package(parsed: list[ParsedFile], errors: list[UnitLoadError]) -> list[ParsedFile]:
    """Keep the files of the directory's main package; the rest cannot be resolved with it."""
    names = [package_name(f.root, f.source) for f in parsed]
    if len(set(names)) <= 1:
        return parsed
    majority = max(sorted(set(names)), key=names.count)
    kept = []
    for f, name in zip(parsed, names):
        if name == majority:
            kept.append(f)
        else:
            error = UnitLoadError(f.path, f"package {name} differs from {majority}")
            logger.warning("%s", error)
            errors.append(error)
    return kept


@dataclass
class LoadedProject:
    root: str
    packages: list[LoadedPackage] = field(default_factory=list)

    @property
    def errors(self) -> list[UnitLoadError]:
        return [e for p in self.packages for e in p.errors]


def load_project(root: str, registry: PackageRegistry, parser: Parser | None = None) -> LoadedProject:
    """Discover, parse and index every package under *root*."""
    parser = parser or Parser()
    module = module_path(root)
    project = LoadedProject(root=root)
    for directory, files in discover_packages(root).items():
        path = import_path_for(root, directory, module)
        logger.debug("Loading package %s (%d files)", path, len(files))
        project.packages.append(load_package(path, files, registry, parser))
    return project
