"""Tests for the composable API functions in gothrow.api."""

from __future__ import annotations

import os
import stat

import pytest

from gothrow.api import rewrite_project, rewrite_source, unified_diff, write_atomic
from gothrow.errors import ProjectLoadError, UnitLoadError
from gothrow.rewrite_types import RewriteConfig

DISCARDING = """\
package util

import "os"

func Remove(path string) error {
\t_ = os.Remove(path)
\treturn nil
}
"""

CLEAN = """\
package util

func Double(x int) int { return x * 2 }
"""


def _write(root, rel: str, text: str) -> str:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return str(path)


class TestRewriteSource:
    def test_clean_source_is_returned_unchanged(self):
        result = rewrite_source(CLEAN, path="util.go")
        assert not result.modified
        assert result.source == CLEAN
        assert result.diagnostics == []

    def test_syntax_error_raises(self):
        with pytest.raises(UnitLoadError):
            rewrite_source("package main\n\nfunc {\n")


class TestRewriteProject:
    def test_modified_file_is_written(self, tmp_path):
        path = _write(tmp_path, "util.go", DISCARDING)
        report = rewrite_project(str(tmp_path))
        text = open(path).read()
        assert "\terr := os.Remove(path)\n\tif err != nil {\n\t\treturn err\n\t}\n" in text
        assert [u.path for u in report.modified] == [path]
        assert report.units[0].written

    def test_clean_file_is_untouched(self, tmp_path):
        path = _write(tmp_path, "double.go", CLEAN)
        before = os.stat(path).st_mtime_ns
        report = rewrite_project(str(tmp_path))
        assert report.modified == []
        assert os.stat(path).st_mtime_ns == before

    def test_no_temporary_files_left(self, tmp_path):
        _write(tmp_path, "util.go", DISCARDING)
        rewrite_project(str(tmp_path))
        assert sorted(os.listdir(tmp_path)) == ["util.go"]

    def test_dry_run_writes_nothing(self, tmp_path):
        path = _write(tmp_path, "util.go", DISCARDING)
        report = rewrite_project(str(tmp_path), dry_run=True)
        assert open(path).read() == DISCARDING
        unit = report.modified[0]
        assert not unit.written
        assert "+\tif err != nil {\n" in unit.diff

    def test_broken_unit_does_not_stop_siblings(self, tmp_path):
        bad = _write(tmp_path, "broken.go", "package util\n\nfunc {\n")
        good = _write(tmp_path, "util.go", DISCARDING)
        report = rewrite_project(str(tmp_path))
        assert [u.path for u in report.failed] == [bad]
        assert [u.path for u in report.modified] == [good]
        assert open(bad).read() == "package util\n\nfunc {\n"

    def test_undecodable_unit_does_not_stop_siblings(self, tmp_path):
        bad = tmp_path / "latin1.go"
        bad.write_bytes(b"package util\n\n// caf\xe9\n")
        good = _write(tmp_path, "util.go", DISCARDING)
        report = rewrite_project(str(tmp_path), dry_run=True)
        assert [u.path for u in report.failed] == [str(bad)]
        assert [u.path for u in report.modified] == [good]

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(ProjectLoadError):
            rewrite_project(str(tmp_path / "missing"))

    def test_custom_error_name(self, tmp_path):
        path = _write(tmp_path, "util.go", DISCARDING)
        rewrite_project(str(tmp_path), config=RewriteConfig(error_var="rmErr"))
        assert "\trmErr := os.Remove(path)\n" in open(path).read()

    def test_cross_package_call_in_entry_routine(self, tmp_path):
        _write(tmp_path, "go.mod", "module example.com/app\n")
        _write(tmp_path, "store/store.go", """\
package store

type Item struct{}

func Load(name string) (*Item, error) { return &Item{}, nil }
""")
        main = _write(tmp_path, "main.go", """\
package main

import "example.com/app/store"

func main() {
\titem, _ := store.Load("x")
\t_ = item
}
""")
        rewrite_project(str(tmp_path))
        assert open(main).read() == """\
package main

import "example.com/app/store"
import "log"

func main() {
\titem, err := store.Load("x")
\tif err != nil {
\t\tlog.Fatalf("error: %v", err)
\t}
\t_ = item
}
"""


class TestWriteAtomic:
    def test_preserves_mode(self, tmp_path):
        path = _write(tmp_path, "x.go", "package x\n")
        os.chmod(path, 0o640)
        write_atomic(path, "package y\n")
        assert open(path).read() == "package y\n"
        assert stat.S_IMODE(os.stat(path).st_mode) == 0o640


class TestUnifiedDiff:
    def test_headers_and_hunks(self):
        diff = unified_diff("a.go", "x\ny\n", "x\nz\n")
        assert diff.startswith("--- a/a.go\n+++ b/a.go\n")
        assert "-y\n+z\n" in diff

    def test_identical_text_has_no_diff(self):
        assert unified_diff("a.go", "x\n", "x\n") == ""
