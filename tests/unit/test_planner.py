"""Tests for the rewrite planner/applier, driven end to end through rewrite_source."""

from __future__ import annotations

from gothrow.api import rewrite_source
from gothrow.report import DiagnosticKind, RewriteResult
from gothrow.rewrite_types import RewriteConfig


def _rewrite(source: str, **config) -> RewriteResult:
    return rewrite_source(source, config=RewriteConfig(**config) if config else None)


LOAD_SOURCE = """\
package main

import "os"

func load(path string) (*os.File, error) {
\tf, _ := os.Open(path)
\treturn f, nil
}
"""

LOAD_EXPECTED = """\
package main

import "os"

func load(path string) (*os.File, error) {
\tf, err := os.Open(path)
\tif err != nil {
\t\treturn nil, err
\t}
\treturn f, nil
}
"""


class TestPropagatingReturn:
    def test_discarded_error_is_named_and_checked(self):
        result = _rewrite(LOAD_SOURCE)
        assert result.modified
        assert result.source == LOAD_EXPECTED

    def test_found_diagnostic_is_recorded(self):
        result = _rewrite(LOAD_SOURCE)
        found = result.diagnostics_of(DiagnosticKind.FOUND)
        assert len(found) == 1
        assert found[0].position.line == 6

    def test_zero_values_match_declared_results(self):
        source = """\
package main

import "strconv"

type Config struct{ Port int }

type Celsius float64

func parse(s string) (Config, Celsius, string, bool, []int, error) {
\tn, _ := strconv.Atoi(s)
\treturn Config{Port: n}, 0, "", false, nil, nil
}
"""
        result = _rewrite(source)
        assert '\t\treturn Config{}, 0, "", false, nil, err\n' in result.source

    def test_type_parameter_result_uses_new(self):
        source = """\
package main

import "os"

func first[T any](path string, fallback T) (T, error) {
\t_, _ = os.Stat(path)
\treturn fallback, nil
}
"""
        result = _rewrite(source)
        assert "\t_, err := os.Stat(path)\n" in result.source
        assert "\t\treturn *new(T), err\n" in result.source

    def test_unknown_qualified_type_gets_composite_literal(self):
        source = """\
package main

import (
\t"os"

\t"example.com/geo"
)

func locate(path string) (geo.Point, error) {
\t_, _ = os.ReadFile(path)
\treturn geo.Point{}, nil
}
"""
        result = _rewrite(source)
        assert "\t\treturn geo.Point{}, err\n" in result.source

    def test_named_results_still_get_full_return(self):
        source = """\
package main

import "os"

func size(path string) (n int64, err error) {
\tinfo, _ := os.Stat(path)
\tn = info.Size()
\treturn
}
"""
        result = _rewrite(source)
        assert "\tinfo, err := os.Stat(path)\n" in result.source
        assert "\t\treturn 0, err\n" in result.source

    def test_method_with_pointer_receiver(self):
        source = """\
package main

import "encoding/json"

type Store struct{ data map[string]string }

func (s *Store) Dump() ([]byte, error) {
\tout, _ := json.Marshal(s.data)
\treturn out, nil
}
"""
        result = _rewrite(source)
        assert "\tout, err := json.Marshal(s.data)\n" in result.source
        assert "\t\treturn nil, err\n" in result.source

    def test_custom_error_type_result(self):
        source = """\
package main

type ParseError struct{ msg string }

func (e *ParseError) Error() string { return e.msg }

func tokenize(s string) ([]string, *ParseError) {
\treturn nil, nil
}

func run(s string) (int, error) {
\ttoks, _ := tokenize(s)
\treturn len(toks), nil
}
"""
        result = _rewrite(source)
        assert "\ttoks, err := tokenize(s)\n" in result.source
        assert "\t\treturn 0, err\n" in result.source


MAIN_SOURCE = """\
package main

import (
\t"fmt"
\t"os"
)

func main() {
\tf, _ := os.Open("in.txt")
\tfmt.Println(f)
\tg, _ := os.Create("out.txt")
\tfmt.Println(g)
}
"""

MAIN_EXPECTED = """\
package main

import (
\t"fmt"
\t"log"
\t"os"
)

func main() {
\tf, err := os.Open("in.txt")
\tif err != nil {
\t\tlog.Fatalf("error: %v", err)
\t}
\tfmt.Println(f)
\tg, err := os.Create("out.txt")
\tif err != nil {
\t\tlog.Fatalf("error: %v", err)
\t}
\tfmt.Println(g)
}
"""


class TestEntryRoutine:
    def test_main_gets_fatal_check_and_single_import(self):
        result = _rewrite(MAIN_SOURCE)
        assert result.source == MAIN_EXPECTED

    def test_main_never_gets_return(self):
        result = _rewrite(MAIN_SOURCE)
        assert "return" not in result.source

    def test_existing_log_import_is_reused(self):
        source = """\
package main

import (
\tl "log"
\t"os"
)

func main() {
\tl.Println("start")
\t_, _ = os.Getwd()
}
"""
        result = _rewrite(source)
        assert '\t\tl.Fatalf("error: %v", err)\n' in result.source
        assert result.source.count('"log"') == 1

    def test_import_added_after_single_import(self):
        source = """\
package main

import "os"

func main() {
\t_, _ = os.Getwd()
}
"""
        result = _rewrite(source)
        assert 'import "os"\nimport "log"\n' in result.source

    def test_main_outside_package_main_is_not_entry(self):
        source = """\
package tool

import "os"

func main() {
\t_, _ = os.Getwd()
}
"""
        result = _rewrite(source)
        assert not result.modified
        assert result.diagnostics_of(DiagnosticKind.SKIPPED)

    def test_package_level_log_gets_aliased_import(self):
        source = """\
package main

import "os"

type log struct{ lines []string }

func main() {
\t_ = os.Remove("x")
}
"""
        result = _rewrite(source)
        assert 'import "os"\nimport stdlog "log"\n' in result.source
        assert '\t\tstdlog.Fatalf("error: %v", err)\n' in result.source

    def test_local_log_hides_existing_import(self):
        source = """\
package main

import (
\t"log"
\t"os"
)

func init() {
\tlog.SetFlags(0)
}

func main() {
\tlog := "out.log"
\t_ = os.Remove(log)
}
"""
        result = _rewrite(source)
        assert '\t"log"\n\tstdlog "log"\n\t"os"\n' in result.source
        assert '\terr := os.Remove(log)\n' in result.source
        assert '\t\tstdlog.Fatalf("error: %v", err)\n' in result.source


DEMOTION_SOURCE = """\
package main

import (
\t"errors"
\t"io"
)

func validate(b []byte) error {
\tif len(b) == 0 {
\t\treturn errors.New("empty")
\t}
\treturn nil
}

func read(r io.Reader) ([]byte, error) {
\tbody, _ := io.ReadAll(r)
\terr := validate(body)
\treturn body, err
}
"""


class TestDemotion:
    def test_later_err_definition_is_demoted(self):
        result = _rewrite(DEMOTION_SOURCE)
        assert "\tbody, err := io.ReadAll(r)\n" in result.source
        assert "\terr = validate(body)\n" in result.source
        assert len(result.diagnostics_of(DiagnosticKind.DEMOTED)) == 1

    def test_nested_err_definition_is_demoted(self):
        source = """\
package main

import "os"

func touch(path string) error {
\tf, _ := os.Create(path)
\tif f != nil {
\t\terr := f.Close()
\t\treturn err
\t}
\treturn nil
}
"""
        result = _rewrite(source)
        assert "\t\terr = f.Close()\n" in result.source

    def test_err_definition_shadowing_outer_err_is_demoted(self):
        source = """\
package main

import "os"

func touch(path string) error {
\terr := os.Remove(path)
\tif err != nil {
\t\terr := os.Remove(path + ".bak")
\t\treturn err
\t}
\treturn nil
}
"""
        result = _rewrite(source)
        assert result.modified
        assert "\t\terr = os.Remove(path + \".bak\")\n" in result.source
        assert "\terr := os.Remove(path)\n" in result.source
        assert len(result.diagnostics_of(DiagnosticKind.DEMOTED)) == 1

    def test_err_definition_at_routine_top_is_left_alone(self):
        source = """\
package main

import "os"

func touch(path string) error {
\terr := os.Remove(path)
\treturn err
}
"""
        result = _rewrite(source)
        assert not result.modified
        assert result.source == source

    def test_outer_err_of_other_type_is_not_reused(self):
        source = """\
package main

import "os"

func touch(path string) error {
\terr := "pending"
\tif path != err {
\t\terr := os.Remove(path)
\t\treturn err
\t}
\treturn nil
}
"""
        result = _rewrite(source)
        assert not result.modified

    def test_closure_does_not_demote_captured_err(self):
        source = """\
package main

import "os"

func touch(path string) error {
\terr := os.Remove(path)
\tcleanup := func() error {
\t\terr := os.Remove(path + ".bak")
\t\treturn err
\t}
\t_ = cleanup
\treturn err
}
"""
        result = _rewrite(source)
        assert not result.modified

    def test_sibling_blocks_each_define_err(self):
        source = """\
package main

import "os"

func pick(a bool) (*os.File, error) {
\tif a {
\t\tf, _ := os.Open("a")
\t\treturn f, nil
\t}
\tg, _ := os.Open("b")
\treturn g, nil
}
"""
        result = _rewrite(source)
        assert "\t\tf, err := os.Open(\"a\")\n" in result.source
        assert "\tg, err := os.Open(\"b\")\n" in result.source


class TestBindingDecision:
    def test_assignment_promoted_when_no_target_is_redeclared(self):
        source = """\
package main

import "strconv"

func parse(s string) (int, error) {
\tvar n int
\tn, _ = strconv.Atoi(s)
\treturn n, nil
}
"""
        result = _rewrite(source)
        assert "\tn, err := strconv.Atoi(s)\n" in result.source
        assert "\t\treturn 0, err\n" in result.source

    def test_assignment_to_outer_variable_declares_err_first(self):
        source = """\
package main

import "strconv"

func parse(s string) (int, error) {
\tn := 0
\tif s != "" {
\t\tn, _ = strconv.Atoi(s)
\t}
\treturn n, nil
}
"""
        expected = """\
package main

import "strconv"

func parse(s string) (int, error) {
\tn := 0
\tif s != "" {
\t\tvar err error
\t\tn, err = strconv.Atoi(s)
\t\tif err != nil {
\t\t\treturn 0, err
\t\t}
\t}
\treturn n, nil
}
"""
        result = _rewrite(source)
        assert result.source == expected

    def test_assignment_with_bound_err_stays_assignment(self):
        source = """\
package main

import "strconv"

func parse(a, b string) (int, error) {
\tx, err := strconv.Atoi(a)
\tif err != nil {
\t\treturn 0, err
\t}
\tvar y int
\ty, _ = strconv.Atoi(b)
\treturn x + y, nil
}
"""
        result = _rewrite(source)
        assert "\ty, err = strconv.Atoi(b)\n" in result.source

    def test_define_keeps_operator_when_other_target_is_new(self):
        source = """\
package main

import "strconv"

func parse(a, b string) (int, error) {
\tx, err := strconv.Atoi(a)
\tif err != nil {
\t\treturn 0, err
\t}
\ty, _ := strconv.Atoi(b)
\treturn x + y, nil
}
"""
        result = _rewrite(source)
        assert "\ty, err := strconv.Atoi(b)\n" in result.source

    def test_err_bound_to_non_error_is_skipped(self):
        source = """\
package main

import "strconv"

func parse(err string) (int, error) {
\tvar n int
\tn, _ = strconv.Atoi(err)
\treturn n, nil
}
"""
        result = _rewrite(source)
        assert not result.modified
        assert result.diagnostics_of(DiagnosticKind.SKIPPED)

    def test_custom_error_variable_name(self):
        result = _rewrite(LOAD_SOURCE, error_var="openErr")
        assert "\tf, openErr := os.Open(path)\n" in result.source
        assert "\t\treturn nil, openErr\n" in result.source


class TestSkippedCandidates:
    def test_routine_without_error_result_is_untouched(self):
        source = """\
package main

import "os"

func size(path string) int64 {
\tinfo, _ := os.Stat(path)
\treturn info.Size()
}
"""
        result = _rewrite(source)
        assert not result.modified
        assert result.source == source
        skipped = result.diagnostics_of(DiagnosticKind.SKIPPED)
        assert len(skipped) == 1
        assert "size cannot return an error" in skipped[0].message

    def test_if_initializer_is_skipped(self):
        source = """\
package main

import "os"

func exists(path string) (bool, error) {
\tif _, e := os.Stat(path); e == nil {
\t\treturn true, nil
\t}
\tif f, _ := os.Open(path); f != nil {
\t\treturn true, nil
\t}
\treturn false, nil
}
"""
        result = _rewrite(source)
        assert not result.modified
        assert "statement is not in a block" in result.diagnostics_of(DiagnosticKind.SKIPPED)[0].message

    def test_non_error_discard_is_not_a_candidate(self):
        source = """\
package main

import "strings"

func head(s string) (string, error) {
\tbefore, _ := strings.CutPrefix(s, "x")
\treturn before, nil
}
"""
        result = _rewrite(source)
        assert not result.modified
        assert result.diagnostics == []

    def test_function_literal_is_its_own_routine(self):
        source = """\
package main

import "os"

func main() {
\tcleanup := func() {
\t\t_, _ = os.Getwd()
\t}
\tcleanup()
}
"""
        result = _rewrite(source)
        assert not result.modified


class TestIdempotence:
    def test_second_pass_finds_nothing(self):
        for source in (LOAD_SOURCE, MAIN_SOURCE, DEMOTION_SOURCE):
            first = _rewrite(source)
            second = _rewrite(first.source)
            assert not second.modified
            assert second.source == first.source
