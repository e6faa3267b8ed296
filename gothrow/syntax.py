"""Go syntax nodes synthesized by the rewrite, and their rendering.

Original statements are never re-rendered; only these nodes are turned into
text, in gofmt layout (tab indentation, one statement per line).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Union

from . import constants


@dataclass
class Ident:
    name: str


@dataclass
class BasicLit:
    value: str


@dataclass
class CompositeLit:
    type_text: str


@dataclass
class StarNew:
    """``*new(T)``, the zero value of a type parameter."""

    type_text: str


@dataclass
class SelectorExpr:
    x: Expr
    sel: str


@dataclass
class BinaryExpr:
    x: Expr
    op: str
    y: Expr


@dataclass
class CallExpr:
    fun: Expr
    args: list[Expr] = field(default_factory=list)


@dataclass
class SourceExpr:
    """An expression kept verbatim from the original source."""

    text: str
    start_byte: int
    end_byte: int


Expr = Union[Ident, BasicLit, CompositeLit, StarNew, SelectorExpr, BinaryExpr, CallExpr, SourceExpr]


@dataclass
class ExprStmt:
    x: Expr


@dataclass
class ReturnStmt:
    results: list[Expr] = field(default_factory=list)


@dataclass
class IfStmt:
    cond: Expr
    body: list[Stmt] = field(default_factory=list)


@dataclass
class VarDecl:
    name: str
    type_text: str


Stmt = Union[ExprStmt, ReturnStmt, IfStmt, VarDecl]


# ── rendering ────────────────────────────────────────────────────


def render_expr(expr: Expr) -> str:
    renderer = _EXPR_RENDERERS.get(type(expr))
    if renderer is None:
        raise TypeError(f"Cannot render expression node {type(expr).__name__}")
    return renderer(expr)


def _render_call(expr: CallExpr) -> str:
    args = ", ".join(render_expr(a) for a in expr.args)
    return f"{render_expr(expr.fun)}({args})"


_EXPR_RENDERERS: dict[type, Callable[..., str]] = {
    Ident: lambda e: e.name,
    BasicLit: lambda e: e.value,
    CompositeLit: lambda e: f"{e.type_text}{{}}",
    StarNew: lambda e: f"*new({e.type_text})",
    SelectorExpr: lambda e: f"{render_expr(e.x)}.{e.sel}",
    BinaryExpr: lambda e: f"{render_expr(e.x)} {e.op} {render_expr(e.y)}",
    CallExpr: _render_call,
    SourceExpr: lambda e: e.text,
}


def render_stmt(stmt: Stmt, indent: str = "") -> list[str]:
    """Render *stmt* as lines, each prefixed with *indent*."""
    if isinstance(stmt, ExprStmt):
        return [indent + render_expr(stmt.x)]
    if isinstance(stmt, ReturnStmt):
        if not stmt.results:
            return [indent + "return"]
        return [indent + "return " + ", ".join(render_expr(r) for r in stmt.results)]
    if isinstance(stmt, VarDecl):
        return [f"{indent}var {stmt.name} {stmt.type_text}"]
    if isinstance(stmt, IfStmt):
        lines = [f"{indent}if {render_expr(stmt.cond)} {{"]
        for inner in stmt.body:
            lines.extend(render_stmt(inner, indent + constants.INDENT))
        lines.append(indent + "}")
        return lines
    raise TypeError(f"Cannot render statement node {type(stmt).__name__}")
