"""Compilation unit — a resolved Go file as a statement arena.

Every statement reachable from a routine body gets a stable integer id, so
the applier reaches candidates by index instead of re-walking a tree it is
mutating.  Statement lists hold either original statements or synthesized
``syntax`` nodes inserted next to them.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .gotypes import GoType
from .nodes import node_text
from .packages import PackageIndex, default_import_name
from .report import Diagnostic, SourcePosition
from .scope import BindingKind, Scope
from .syntax import Expr, Ident, SourceExpr, Stmt

logger = logging.getLogger(__name__)


class Token(str, Enum):
    DEFINE = ":="
    ASSIGN = "="


@dataclass
class AssignStmt:
    """Mutable view of a ``:=`` / ``=`` statement."""

    lhs: list[Expr]
    tok: Token
    rhs: list[Expr]
    tok_start: int
    tok_end: int
    original_tok: Token
    original_lhs: list[Expr] = field(default_factory=list)
    call_node: object = None
    result_types: tuple[GoType | None, ...] | None = None

    def __post_init__(self):
        if not self.original_lhs:
            self.original_lhs = list(self.lhs)

    def target_name(self, index: int) -> str | None:
        """Identifier spelled at target *index*, or ``None`` for other expressions."""
        target = self.lhs[index]
        if isinstance(target, Ident):
            return target.name
        if isinstance(target, SourceExpr) and target.text.isidentifier():
            return target.text
        return None

    def replace_target(self, index: int, name: str) -> None:
        self.lhs[index] = Ident(name)

    @property
    def modified(self) -> bool:
        return self.tok != self.original_tok or any(
            a is not b for a, b in zip(self.lhs, self.original_lhs)
        )


@dataclass(eq=False)
class Routine:
    """A function, method or function literal."""

    id: int
    name: str
    node: object
    scope: Scope
    results: list[GoType | None] = field(default_factory=list)
    type_params: frozenset[str] = frozenset()
    is_entry: bool = False
    parent: Routine | None = None

    @property
    def label(self) -> str:
        return self.name or "func literal"


@dataclass(eq=False)
class Statement:
    id: int
    node: object
    scope: Scope
    routine: Routine | None
    list_id: int | None = None
    assign: AssignStmt | None = None
    new_names: frozenset[str] = frozenset()

    @property
    def kind(self) -> str:
        return self.node.type

    @property
    def start_byte(self) -> int:
        return self.node.start_byte

    @property
    def end_byte(self) -> int:
        return self.node.end_byte


Entry = Union[Statement, Stmt]


@dataclass
class StatementList:
    id: int
    entries: list[Entry] = field(default_factory=list)


class CompilationUnit:
    """One Go file plus the resolved information the rewrite needs."""

    def __init__(
        self,
        path: str,
        source: bytes,
        tree,
        package: PackageIndex,
        imports: dict[str, str],
        file_scope: Scope,
    ):
        self.path = path
        self.source = source
        self.tree = tree
        self.package = package
        self.imports = dict(imports)
        self.file_scope = file_scope
        self.statements: list[Statement] = []
        self.lists: list[StatementList] = []
        self.routines: list[Routine] = []
        self.added_imports: list[tuple[str, str]] = []
        self.diagnostics: list[Diagnostic] = []

    @property
    def root(self):
        return self.tree.root_node

    @property
    def package_name(self) -> str:
        return self.package.name

    # ── arena ────────────────────────────────────────────────────

    def new_list(self) -> StatementList:
        stmt_list = StatementList(id=len(self.lists))
        self.lists.append(stmt_list)
        return stmt_list

    def add_statement(self, node, scope: Scope, routine: Routine | None, stmt_list: StatementList | None) -> Statement:
        stmt = Statement(
            id=len(self.statements),
            node=node,
            scope=scope,
            routine=routine,
            list_id=stmt_list.id if stmt_list is not None else None,
        )
        self.statements.append(stmt)
        if stmt_list is not None:
            stmt_list.entries.append(stmt)
        return stmt

    def add_routine(self, routine: Routine) -> Routine:
        self.routines.append(routine)
        return routine

    def statement(self, stmt_id: int) -> Statement:
        return self.statements[stmt_id]

    def text(self, node) -> str:
        return node_text(node, self.source)

    def position(self, offset: int) -> SourcePosition:
        line_start = self.source.rfind(b"\n", 0, offset) + 1
        return SourcePosition(
            line=self.source.count(b"\n", 0, offset) + 1,
            col=offset - line_start,
        )

    # ── mutation ─────────────────────────────────────────────────

    def _list_index(self, stmt: Statement) -> tuple[StatementList, int]:
        if stmt.list_id is None:
            raise ValueError(f"Statement {stmt.id} is not part of a statement list")
        stmt_list = self.lists[stmt.list_id]
        index = next(i for i, e in enumerate(stmt_list.entries) if e is stmt)
        return stmt_list, index

    def can_insert_around(self, stmt: Statement) -> bool:
        return stmt.list_id is not None

    def insert_after(self, stmt: Statement, node: Stmt) -> None:
        stmt_list, index = self._list_index(stmt)
        index += 1
        while index < len(stmt_list.entries) and not isinstance(
            stmt_list.entries[index], Statement
        ):
            index += 1
        stmt_list.entries.insert(index, node)

    def insert_before(self, stmt: Statement, node: Stmt) -> None:
        stmt_list, index = self._list_index(stmt)
        stmt_list.entries.insert(index, node)

    def _shadowed(self, name: str, scope: Scope | None, pos: int) -> bool:
        if scope is None:
            return False
        binding = scope.lookup(name, pos)
        return binding is not None and binding.kind != BindingKind.IMPORT

    def _import_name_taken(self, name: str, scope: Scope | None, pos: int) -> bool:
        return (
            name in self.imports
            or name in self.package.top_level_names()
            or self._shadowed(name, scope, pos)
        )

    def ensure_import(self, path: str, scope: Scope | None = None, pos: int = 0) -> str:
        """Make sure *path* is imported; return the name to qualify it with.

        With *scope*, the name must also refer to the import at *pos*: an
        existing import hidden by a local declaration is not reused, and an
        added import avoids names declared in the package or visible there.
        """
        for name, imported in self.imports.items():
            if imported == path and not self._shadowed(name, scope, pos):
                return name
        base = default_import_name(path)
        name = base
        for suffix in itertools.count(1):
            if not self._import_name_taken(name, scope, pos):
                break
            name = f"std{base}" if suffix == 1 else f"std{base}{suffix}"
        self.imports[name] = path
        self.added_imports.append((name, path))
        logger.debug("Adding import %s to %s", path, self.path)
        return name
