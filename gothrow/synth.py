"""Failure-check statements inserted after a rewritten assignment."""

from __future__ import annotations

from typing import Callable

from . import constants
from .gotypes import GoType
from .rewrite_types import RewriteConfig
from .syntax import BasicLit, BinaryExpr, CallExpr, Expr, ExprStmt, Ident, IfStmt, ReturnStmt, SelectorExpr
from .unit import Routine


def _error_test(config: RewriteConfig) -> Expr:
    return BinaryExpr(Ident(config.error_var), constants.NOT_EQUAL_TOKEN, Ident(constants.NIL_LITERAL))


def propagating_check(
    routine: Routine,
    config: RewriteConfig,
    zero: Callable[[GoType | None], Expr],
) -> IfStmt:
    """``if err != nil { return <zero>..., err }`` for *routine*'s result list."""
    results = [zero(t) for t in routine.results[:-1]]
    results.append(Ident(config.error_var))
    return IfStmt(cond=_error_test(config), body=[ReturnStmt(results)])


def fatal_check(log_name: str, config: RewriteConfig) -> IfStmt:
    """``if err != nil { log.Fatalf("error: %v", err) }`` for the entry routine."""
    call = CallExpr(
        fun=SelectorExpr(Ident(log_name), config.fatal_func),
        args=[BasicLit(config.fatal_format), Ident(config.error_var)],
    )
    return IfStmt(cond=_error_test(config), body=[ExprStmt(call)])
