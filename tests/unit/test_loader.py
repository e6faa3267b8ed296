"""Tests for project discovery and loading."""

from __future__ import annotations

import os

import pytest

from gothrow import loader
from gothrow.errors import ProjectLoadError, UnitLoadError
from gothrow.loader import (
    discover_packages,
    import_path_for,
    load_project,
    module_path,
    parse_source,
)
from gothrow.packages import PackageRegistry
from gothrow.parser import Parser
from gothrow.rewrite_types import RewriteConfig


def _write(root, rel: str, text: str) -> str:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return str(path)


class TestDiscoverPackages:
    def test_groups_go_files_by_directory(self, tmp_path):
        a = _write(tmp_path, "main.go", "package main\n")
        b = _write(tmp_path, "util/util.go", "package util\n")
        packages = discover_packages(str(tmp_path))
        assert packages == {str(tmp_path): [a], os.path.dirname(b): [b]}

    def test_skips_tests_vendor_testdata_and_hidden(self, tmp_path):
        keep = _write(tmp_path, "lib.go", "package lib\n")
        _write(tmp_path, "lib_test.go", "package lib\n")
        _write(tmp_path, "vendor/x/x.go", "package x\n")
        _write(tmp_path, "testdata/t.go", "package t\n")
        _write(tmp_path, ".git/g.go", "package g\n")
        _write(tmp_path, "_build/b.go", "package b\n")
        _write(tmp_path, "notes.txt", "hi\n")
        assert discover_packages(str(tmp_path)) == {str(tmp_path): [keep]}

    def test_missing_root_is_project_fatal(self, tmp_path):
        with pytest.raises(ProjectLoadError):
            discover_packages(str(tmp_path / "nope"))


class TestModulePath:
    def test_reads_go_mod(self, tmp_path):
        _write(tmp_path, "go.mod", "module example.com/app // comment\n\ngo 1.22\n")
        assert module_path(str(tmp_path)) == "example.com/app"

    def test_missing_go_mod(self, tmp_path):
        assert module_path(str(tmp_path)) == ""

    def test_import_paths(self, tmp_path):
        root = str(tmp_path)
        assert import_path_for(root, root, "example.com/app") == "example.com/app"
        assert import_path_for(root, os.path.join(root, "a", "b"), "example.com/app") == "example.com/app/a/b"
        assert import_path_for(root, os.path.join(root, "a"), "") == "_/a"


class TestParseSource:
    def test_syntax_error_is_unit_fatal(self):
        with pytest.raises(UnitLoadError) as info:
            parse_source("bad.go", b"package main\n\nfunc {\n", Parser())
        assert info.value.path == "bad.go"
        assert info.value.reason.startswith("syntax error at line ")

    def test_missing_package_clause(self):
        with pytest.raises(UnitLoadError):
            parse_source("empty.go", b"", Parser())

    def test_invalid_utf8_is_unit_fatal(self):
        with pytest.raises(UnitLoadError) as info:
            parse_source("latin1.go", b"package main\n\n// caf\xe9\n", Parser())
        assert "UTF-8" in info.value.reason


class TestLoadProject:
    def test_cross_package_calls_resolve(self, tmp_path):
        _write(tmp_path, "go.mod", "module example.com/app\n")
        _write(tmp_path, "store/store.go", """\
package store

type Item struct{}

func Load(name string) (*Item, error) { return &Item{}, nil }
""")
        _write(tmp_path, "main.go", """\
package main

import "example.com/app/store"

func main() {
\titem, _ := store.Load("x")
\t_ = item
}
""")
        registry = PackageRegistry()
        project = load_project(str(tmp_path), registry)
        main_pkg = next(p for p in project.packages if p.path == "example.com/app")
        unit = main_pkg.resolve(registry, config=RewriteConfig())[0]
        stmt = next(s for s in unit.statements if s.assign is not None and unit.text(s.node).startswith("item"))
        assert len(stmt.assign.result_types) == 2

    def test_broken_file_does_not_stop_siblings(self, tmp_path):
        _write(tmp_path, "good.go", "package main\n\nfunc main() {}\n")
        bad = _write(tmp_path, "bad.go", "package main\n\nfunc {\n")
        project = load_project(str(tmp_path), PackageRegistry())
        assert [e.path for e in project.errors] == [bad]
        assert [f.path for f in project.packages[0].files] == [str(tmp_path / "good.go")]

    def test_resolve_failure_is_recorded_per_file(self, tmp_path, monkeypatch):
        good = _write(tmp_path, "good.go", "package main\n\nfunc main() {}\n")
        bad = _write(tmp_path, "odd.go", "package main\n\nfunc helper() {}\n")
        real_resolve = loader.resolve_unit

        def resolve_or_fail(path, *args, **kwargs):
            if path == bad:
                raise KeyError("helper")
            return real_resolve(path, *args, **kwargs)

        monkeypatch.setattr(loader, "resolve_unit", resolve_or_fail)
        registry = PackageRegistry()
        project = load_project(str(tmp_path), registry)
        units = project.packages[0].resolve(registry, RewriteConfig())
        assert [u.path for u in units] == [good]
        assert [e.path for e in project.errors] == [bad]

    def test_minority_package_is_reported(self, tmp_path):
        _write(tmp_path, "a.go", "package lib\n")
        _write(tmp_path, "b.go", "package lib\n")
        other = _write(tmp_path, "gen.go", "package main\n")
        project = load_project(str(tmp_path), PackageRegistry())
        assert [e.path for e in project.errors] == [other]
