"""Rewrite planner and applier — the second pass over a compilation unit.

Candidates arrive sorted by source position and are applied strictly in that
order, each reached through the statement arena by id.  The binding decision
for the error variable consults a ``ScopeLedger`` so that names introduced
earlier in this pass count as bound even though the original symbol table
has never seen them.
"""

from __future__ import annotations

import logging

from .gotypes import ERROR_TYPE
from .ledger import ScopeLedger
from .oracle import ErrorOracle
from .report import Diagnostic, DiagnosticKind
from .rewrite_types import Candidate, CandidateKind, RewriteConfig
from .scope import Binding, BindingKind
from .scanner import is_placeholder
from .synth import fatal_check, propagating_check
from .syntax import VarDecl
from .unit import CompilationUnit, Routine, Statement, Token
from .zero import zero_value_for

logger = logging.getLogger(__name__)


class Applier:
    """Applies one unit's candidates; owns the unit's ledger for the pass."""

    def __init__(self, unit: CompilationUnit, oracle: ErrorOracle, config: RewriteConfig):
        self.unit = unit
        self.oracle = oracle
        self.config = config
        self.ledger = ScopeLedger()
        self.modified = False
        self._handlers = {
            CandidateKind.ERROR_DISCARD: self._apply_discard,
            CandidateKind.DEMOTION: self._apply_demotion,
        }

    def apply(self, candidates: list[Candidate]) -> bool:
        for candidate in sorted(candidates, key=lambda c: (c.pos, c.stmt_id)):
            stmt = self.unit.statement(candidate.stmt_id)
            self._handlers[candidate.kind](stmt, candidate)
        return self.modified

    # ── diagnostics ──────────────────────────────────────────────

    def _line(self, stmt: Statement) -> int:
        return self.unit.position(stmt.start_byte).line

    def _record(self, kind: DiagnosticKind, stmt: Statement, message: str) -> None:
        self.unit.diagnostics.append(
            Diagnostic(
                kind=kind,
                path=self.unit.path,
                position=self.unit.position(stmt.start_byte),
                message=message,
            )
        )

    def _skip(self, stmt: Statement, reason: str) -> None:
        logger.warning("Skipping ignored error in %s at line %d: %s", self.unit.path, self._line(stmt), reason)
        self._record(DiagnosticKind.SKIPPED, stmt, reason)

    # ── eligibility ──────────────────────────────────────────────

    def can_propagate(self, routine: Routine) -> bool:
        """Whether *routine*'s declared results end in an error-like type."""
        return bool(routine.results) and self.oracle.is_error_like(routine.results[-1])

    def _can_promote(self, stmt: Statement, error_index: int) -> bool:
        """``=`` may become ``:=`` only if no other target would be redeclared."""
        assign = stmt.assign
        for index, target in enumerate(assign.lhs):
            if index == error_index:
                continue
            if is_placeholder(target):
                continue
            name = assign.target_name(index)
            if name is None:
                return False
            binding = stmt.scope.lookup_local(name, stmt.start_byte)
            if binding is None or binding.kind != BindingKind.VAR:
                return False
        return True

    def _reused_binding(self, stmt: Statement, tok: Token) -> Binding | None:
        """The original binding the error variable refers to after the rewrite."""
        name = self.config.error_var
        if self.ledger.introduced(stmt.scope, name):
            return None
        if tok == Token.ASSIGN:
            return stmt.scope.lookup(name, stmt.start_byte)
        return stmt.scope.lookup_local(name, stmt.start_byte)

    def _incompatible(self, binding: Binding | None) -> bool:
        if binding is None:
            return False
        if binding.kind != BindingKind.VAR:
            return True
        return binding.type is not None and not self.oracle.is_error_like(binding.type)

    # ── candidates ───────────────────────────────────────────────

    def _apply_discard(self, stmt: Statement, candidate: Candidate) -> None:
        assign = stmt.assign
        routine = stmt.routine
        name = self.config.error_var
        if routine is None:
            self._skip(stmt, "enclosing function could not be found")
            return
        if not routine.is_entry and not self.can_propagate(routine):
            self._skip(stmt, f"{routine.label} cannot return an error")
            return
        if not self.unit.can_insert_around(stmt):
            self._skip(stmt, "statement is not in a block")
            return
        if any(
            assign.target_name(i) == name for i in range(len(assign.lhs)) if i != candidate.error_index
        ):
            self._skip(stmt, f"{name} is already assigned by this statement")
            return

        bound = self.ledger.is_bound(stmt.scope, name, stmt.start_byte)
        tok = assign.tok
        declare_first = False
        if tok == Token.ASSIGN and not bound:
            if self._can_promote(stmt, candidate.error_index):
                tok = Token.DEFINE
            else:
                declare_first = True
        elif tok == Token.DEFINE and bound and not (stmt.new_names - {name}):
            tok = Token.ASSIGN
        if not declare_first and self._incompatible(self._reused_binding(stmt, tok)):
            self._skip(stmt, f"{name} is bound to a value that is not an error")
            return

        logger.info("Found ignored error in %s at line %d", self.unit.path, self._line(stmt))
        self._record(DiagnosticKind.FOUND, stmt, f"ignored error assigned to {name}")
        assign.replace_target(candidate.error_index, name)
        assign.tok = tok
        if declare_first:
            self.unit.insert_before(stmt, VarDecl(name, str(ERROR_TYPE)))
        if tok == Token.DEFINE or declare_first:
            self.ledger.mark_introduced(stmt.scope, name)

        if routine.is_entry:
            log_name = self.unit.ensure_import(self.config.fatal_import, stmt.scope, stmt.end_byte)
            self.unit.insert_after(stmt, fatal_check(log_name, self.config))
        else:
            check = propagating_check(
                routine, self.config, lambda t: zero_value_for(t, self.oracle.registry)
            )
            self.unit.insert_after(stmt, check)
        self.modified = True

    def _outer_error_binding(self, stmt: Statement) -> Binding | None:
        """An error variable of the same routine that *stmt*'s definition would shadow."""
        name = self.config.error_var
        own = stmt.scope.lookup_local(name, stmt.end_byte)
        for scope in stmt.scope.chain():
            binding = scope.lookup_local(name, stmt.start_byte)
            if binding is not None:
                break
            if scope is stmt.routine.scope:
                return None
        else:
            return None
        if binding.kind != BindingKind.VAR or binding.type is None:
            return None
        if binding.type == ERROR_TYPE:
            return binding
        if own is not None and own.type == binding.type and self.oracle.is_error_like(binding.type):
            return binding
        return None

    def _apply_demotion(self, stmt: Statement, candidate: Candidate) -> None:
        name = self.config.error_var
        if stmt.routine is None:
            return
        if not self.ledger.introduced(stmt.scope, name) and self._outer_error_binding(stmt) is None:
            return
        logger.info(
            "Demoting `%s :=` to `%s =` in %s at line %d", name, name, self.unit.path, self._line(stmt)
        )
        self._record(DiagnosticKind.DEMOTED, stmt, f"{name} := demoted to {name} =")
        stmt.assign.tok = Token.ASSIGN
        self.modified = True


def apply_candidates(
    unit: CompilationUnit,
    candidates: list[Candidate],
    oracle: ErrorOracle,
    config: RewriteConfig,
) -> bool:
    """Apply *candidates* to *unit* in source order; return whether it changed."""
    return Applier(unit, oracle, config).apply(candidates)
