"""Candidate scanner — the first, read-only pass over a compilation unit."""

from __future__ import annotations

import logging

from . import constants
from .oracle import ErrorOracle
from .rewrite_types import Candidate, CandidateKind, RewriteConfig
from .syntax import SourceExpr
from .unit import AssignStmt, CompilationUnit, Statement, Token

logger = logging.getLogger(__name__)


def is_placeholder(target) -> bool:
    return isinstance(target, SourceExpr) and target.text == constants.BLANK_IDENTIFIER


def error_index(assign: AssignStmt, oracle: ErrorOracle) -> int:
    """Lowest index whose target is ``_`` and whose result is error-like, else -1.

    Only statements with exactly one call on the right whose result arity
    matches the number of targets qualify.
    """
    if assign.call_node is None or assign.result_types is None:
        return -1
    if len(assign.result_types) != len(assign.lhs):
        return -1
    for index, (target, result) in enumerate(zip(assign.lhs, assign.result_types)):
        if is_placeholder(target) and oracle.is_error_like(result):
            return index
    return -1


def _is_demotion(stmt: Statement, oracle: ErrorOracle, config: RewriteConfig) -> bool:
    assign = stmt.assign
    if assign.tok != Token.DEFINE or stmt.new_names != frozenset({config.error_var}):
        return False
    names = [assign.target_name(i) for i in range(len(assign.lhs))]
    if names.count(config.error_var) != 1:
        return False
    binding = stmt.scope.lookup_local(config.error_var, stmt.end_byte)
    if binding is not None and binding.type is not None and not oracle.is_error_like(binding.type):
        return False
    return True


def scan_unit(unit: CompilationUnit, oracle: ErrorOracle, config: RewriteConfig) -> list[Candidate]:
    """All candidates of *unit*, ordered by source position."""
    candidates: list[Candidate] = []
    for stmt in unit.statements:
        if stmt.assign is None:
            continue
        index = error_index(stmt.assign, oracle)
        if index >= 0:
            candidates.append(
                Candidate(
                    kind=CandidateKind.ERROR_DISCARD,
                    stmt_id=stmt.id,
                    pos=stmt.start_byte,
                    error_index=index,
                )
            )
        elif _is_demotion(stmt, oracle, config):
            candidates.append(
                Candidate(kind=CandidateKind.DEMOTION, stmt_id=stmt.id, pos=stmt.start_byte)
            )
    candidates.sort(key=lambda c: (c.pos, c.stmt_id))
    logger.debug("Scanned %s: %d candidates", unit.path, len(candidates))
    return candidates
