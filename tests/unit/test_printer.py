"""Tests for the splicing printer."""

from __future__ import annotations

import pytest
import tree_sitter_language_pack

from gothrow.errors import PrintError
from gothrow.packages import PackageRegistry, ParsedFile, index_package
from gothrow.printer import print_unit
from gothrow.resolver import resolve_unit
from gothrow.syntax import BasicLit, BinaryExpr, Ident, IfStmt, ReturnStmt, VarDecl
from gothrow.unit import CompilationUnit, Statement, Token


def _resolve(source: str) -> CompilationUnit:
    parser = tree_sitter_language_pack.get_parser("go")
    source_bytes = source.encode("utf-8")
    parsed = ParsedFile(path="app.go", source=source_bytes, tree=parser.parse(source_bytes))
    registry = PackageRegistry(stubs={})
    index = index_package("example.com/app", [parsed])
    registry.register(index)
    return resolve_unit(parsed.path, source_bytes, parsed.tree, index, registry)


def _statement(unit: CompilationUnit, prefix: str) -> Statement:
    return next(s for s in unit.statements if unit.text(s.node).startswith(prefix))


def _check() -> IfStmt:
    return IfStmt(BinaryExpr(Ident("err"), "!=", Ident("nil")), [ReturnStmt([Ident("err")])])


class TestUnchanged:
    def test_unmodified_unit_prints_verbatim(self):
        source = "package app\n\n// keep me\nfunc f() {\n\tx := 1 // and me\n\t_ = x\n}\n"
        assert print_unit(_resolve(source)).decode() == source


class TestAssignmentEdits:
    def test_target_and_operator_replaced(self):
        unit = _resolve("package app\n\nfunc f() {\n\tx := 1\n\tx, _ := 2, 3\n}\n")
        assign = _statement(unit, "x, _").assign
        assign.replace_target(1, "y")
        assign.tok = Token.ASSIGN
        assert print_unit(unit).decode() == "package app\n\nfunc f() {\n\tx := 1\n\tx, y = 2, 3\n}\n"


class TestInsertions:
    def test_check_after_statement_keeps_trailing_comment(self):
        unit = _resolve("package app\n\nfunc f() error {\n\terr := g() // call\n\treturn nil\n}\n")
        unit.insert_after(_statement(unit, "err := g()"), _check())
        assert print_unit(unit).decode() == (
            "package app\n\nfunc f() error {\n"
            "\terr := g() // call\n"
            "\tif err != nil {\n"
            "\t\treturn err\n"
            "\t}\n"
            "\treturn nil\n}\n"
        )

    def test_declaration_before_first_statement(self):
        unit = _resolve("package app\n\nfunc f() {\n\tif true {\n\t\tg()\n\t}\n}\n")
        unit.insert_before(_statement(unit, "g()"), VarDecl("err", "error"))
        assert "\tif true {\n\t\tvar err error\n\t\tg()\n" in print_unit(unit).decode()

    def test_insertions_after_last_statement_in_case(self):
        unit = _resolve("package app\n\nfunc f(x int) error {\n\tswitch x {\n\tcase 1:\n\t\terr := g()\n\t}\n\treturn nil\n}\n")
        unit.insert_after(_statement(unit, "err := g()"), _check())
        out = print_unit(unit).decode()
        assert "\t\terr := g()\n\t\tif err != nil {\n\t\t\treturn err\n\t\t}\n\t}\n" in out

    def test_successive_insertions_keep_order(self):
        unit = _resolve("package app\n\nfunc f() {\n\tg()\n}\n")
        stmt = _statement(unit, "g()")
        unit.insert_after(stmt, ReturnStmt([BasicLit("1")]))
        unit.insert_after(stmt, ReturnStmt([BasicLit("2")]))
        assert "\tg()\n\treturn 1\n\treturn 2\n" in print_unit(unit).decode()


class TestImports:
    def test_import_into_group_sorted(self):
        unit = _resolve('package app\n\nimport (\n\t"fmt"\n\t"os"\n)\n')
        unit.ensure_import("log")
        assert '\t"fmt"\n\t"log"\n\t"os"\n' in print_unit(unit).decode()

    def test_import_at_end_of_group(self):
        unit = _resolve('package app\n\nimport (\n\t"fmt"\n)\n')
        unit.ensure_import("log")
        assert 'import (\n\t"fmt"\n\t"log"\n)\n' in print_unit(unit).decode()

    def test_import_after_package_clause(self):
        unit = _resolve("package app\n\nfunc f() {}\n")
        unit.ensure_import("log")
        assert print_unit(unit).decode() == 'package app\n\nimport "log"\n\nfunc f() {}\n'

    def test_conflicting_name_gets_alias(self):
        unit = _resolve('package app\n\nimport log "example.com/logger"\n')
        assert unit.ensure_import("log") == "stdlog"
        assert 'import stdlog "log"' in print_unit(unit).decode()

    def test_ensure_import_is_idempotent(self):
        unit = _resolve('package app\n\nimport "log"\n')
        assert unit.ensure_import("log") == "log"
        assert unit.added_imports == []


class TestOverlap:
    def test_overlapping_edits_raise(self):
        unit = _resolve("package app\n\nfunc f() {\n\tx, y := 1, 2\n\t_, _ = x, y\n}\n")
        assign = _statement(unit, "x, y").assign
        assign.replace_target(0, "a")
        # Forge a second edit covering the first target.
        assign.original_lhs[1] = type(assign.original_lhs[1])(
            "x, y", assign.original_lhs[0].start_byte, assign.original_lhs[1].end_byte
        )
        assign.replace_target(1, "b")
        with pytest.raises(PrintError):
            print_unit(unit)
