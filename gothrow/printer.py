"""Printer — serializes a mutated compilation unit by splicing edits into its source.

Untouched source text is copied verbatim, so comments and formatting survive.
Only the edited spans are produced here: rewritten assignment targets and
operators, inserted statements and added imports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import constants
from .errors import PrintError
from .nodes import line_indent
from .packages import default_import_name
from .syntax import render_expr, render_stmt
from .unit import CompilationUnit, Statement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edit:
    start: int
    end: int
    text: str
    seq: int = 0

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end


def _line_end(source: bytes, offset: int) -> int:
    end = source.find(b"\n", offset)
    return len(source) if end < 0 else end


def _line_start(source: bytes, offset: int) -> int:
    return source.rfind(b"\n", 0, offset) + 1


def _after_statement(source: bytes, stmt: Statement) -> int:
    """Where text following *stmt* goes: end of its line when only a comment trails it."""
    line_end = _line_end(source, stmt.end_byte)
    rest = source[stmt.end_byte : line_end].strip()
    if not rest or rest.startswith(b"//"):
        return line_end
    return stmt.end_byte


class UnitPrinter:
    def __init__(self, unit: CompilationUnit):
        self.unit = unit
        self.source = unit.source
        self._edits: list[Edit] = []

    def _add(self, start: int, end: int, text: str) -> None:
        self._edits.append(Edit(start, end, text, seq=len(self._edits)))

    def print(self) -> bytes:
        self._collect_imports()
        self._collect_assignments()
        self._collect_insertions()
        return self._splice()

    # ── edits ────────────────────────────────────────────────────

    def _collect_assignments(self) -> None:
        for stmt in self.unit.statements:
            assign = stmt.assign
            if assign is None or not assign.modified:
                continue
            for original, current in zip(assign.original_lhs, assign.lhs):
                if current is original:
                    continue
                self._add(original.start_byte, original.end_byte, render_expr(current))
            if assign.tok != assign.original_tok:
                self._add(assign.tok_start, assign.tok_end, assign.tok.value)

    def _collect_insertions(self) -> None:
        for stmt_list in self.unit.lists:
            entries = stmt_list.entries
            pending: list = []
            previous: Statement | None = None
            for entry in entries:
                if not isinstance(entry, Statement):
                    pending.append(entry)
                    continue
                if pending:
                    if previous is not None:
                        self._insert_after(previous, pending)
                    else:
                        self._insert_before(entry, pending)
                    pending = []
                previous = entry
            if pending:
                if previous is None:
                    raise PrintError(f"{self.unit.path}: inserted statements have no anchor")
                self._insert_after(previous, pending)

    def _render(self, nodes: list, indent: str) -> list[str]:
        lines: list[str] = []
        for node in nodes:
            lines.extend(render_stmt(node, indent))
        return lines

    def _insert_after(self, anchor: Statement, nodes: list) -> None:
        indent = line_indent(self.source, anchor.start_byte)
        offset = _after_statement(self.source, anchor)
        self._add(offset, offset, "".join("\n" + line for line in self._render(nodes, indent)))

    def _insert_before(self, anchor: Statement, nodes: list) -> None:
        indent = line_indent(self.source, anchor.start_byte)
        offset = _line_start(self.source, anchor.start_byte)
        prefix = self.source[offset : anchor.start_byte]
        if prefix.strip():
            # The anchor shares its line with other code.
            text = "".join(line + "\n" + indent for line in self._render(nodes, ""))
            self._add(anchor.start_byte, anchor.start_byte, text)
            return
        self._add(offset, offset, "".join(line + "\n" for line in self._render(nodes, indent)))

    # ── imports ──────────────────────────────────────────────────

    def _collect_imports(self) -> None:
        if not self.unit.added_imports:
            return
        root = self.unit.root
        decls = [c for c in root.named_children if c.type == "import_declaration"]
        group = next(
            (
                spec_list
                for decl in decls
                for spec_list in decl.named_children
                if spec_list.type == "import_spec_list"
            ),
            None,
        )
        for name, path in sorted(self.unit.added_imports, key=lambda item: item[1]):
            spec = _import_spec_text(name, path)
            if group is not None:
                self._import_into_group(group, spec, path)
            elif decls:
                self._add(decls[-1].end_byte, decls[-1].end_byte, f"\nimport {spec}")
            else:
                clause = next((c for c in root.named_children if c.type == "package_clause"), None)
                if clause is None:
                    raise PrintError(f"{self.unit.path}: no package clause to import after")
                self._add(clause.end_byte, clause.end_byte, f"\n\nimport {spec}")

    def _import_into_group(self, group, spec: str, path: str) -> None:
        specs = [c for c in group.named_children if c.type == "import_spec"]
        if not specs:
            close = group.children[-1]
            self._add(close.start_byte, close.start_byte, f"\n{constants.INDENT}{spec}\n")
            return
        indent = line_indent(self.source, specs[0].start_byte)
        for existing in specs:
            existing_path = self.unit.text(existing.child_by_field_name("path")).strip('"`')
            if existing_path > path:
                offset = _line_start(self.source, existing.start_byte)
                self._add(offset, offset, f"{indent}{spec}\n")
                return
        last = specs[-1]
        offset = _line_end(self.source, last.end_byte)
        self._add(offset, offset, f"\n{indent}{spec}")

    # ── splice ───────────────────────────────────────────────────

    def _splice(self) -> bytes:
        edits = sorted(self._edits, key=lambda e: (e.start, not e.is_insertion, e.seq))
        out: list[bytes] = []
        cursor = 0
        for edit in edits:
            if edit.start < cursor:
                raise PrintError(
                    f"{self.unit.path}: overlapping edits at byte {edit.start}"
                )
            out.append(self.source[cursor : edit.start])
            out.append(edit.text.encode("utf-8"))
            cursor = edit.end
        out.append(self.source[cursor:])
        logger.debug("Printed %s with %d edits", self.unit.path, len(edits))
        return b"".join(out)


def _import_spec_text(name: str, path: str) -> str:
    if name == default_import_name(path):
        return f'"{path}"'
    return f'{name} "{path}"'


def print_unit(unit: CompilationUnit) -> bytes:
    """Serialize *unit* with all of its pending edits applied."""
    return UnitPrinter(unit).print()
