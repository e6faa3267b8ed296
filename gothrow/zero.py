"""Zero-value synthesis for declared result types.

Dispatch order: predeclared primitives first, then named types (resolved
through the registry when their declaration is known), then reference-like
shapes, which all take ``nil``.  A named type whose declaration is unknown
is assumed to be an aggregate and gets an empty composite literal; that is a
heuristic, not a checked guarantee.
"""

from __future__ import annotations

import logging

from . import constants
from .gotypes import GoType, TypeKind
from .packages import PackageRegistry
from .syntax import BasicLit, CompositeLit, Expr, Ident, StarNew

logger = logging.getLogger(__name__)

_NIL_KINDS: frozenset[TypeKind] = frozenset(
    {
        TypeKind.POINTER,
        TypeKind.SLICE,
        TypeKind.MAP,
        TypeKind.CHAN,
        TypeKind.FUNC,
        TypeKind.INTERFACE,
    }
)


def _nil() -> Expr:
    return Ident(constants.NIL_LITERAL)


def _predeclared_zero(name: str) -> Expr | None:
    if name in constants.STRING_TYPES:
        return BasicLit(constants.EMPTY_STRING_LITERAL)
    if name in constants.BOOL_TYPES:
        return Ident(constants.FALSE_LITERAL)
    if name in constants.NUMERIC_TYPES:
        return BasicLit(constants.ZERO_LITERAL)
    if name in constants.NIL_NAMED_TYPES:
        return _nil()
    return None


def zero_value_for(declared: GoType | None, registry: PackageRegistry | None = None) -> Expr:
    """A fresh expression holding the zero value of *declared*."""
    if declared is None:
        return _nil()
    if declared.kind == TypeKind.TYPE_PARAM:
        return StarNew(str(declared))
    if declared.kind in _NIL_KINDS:
        return _nil()
    if declared.kind in (TypeKind.ARRAY, TypeKind.STRUCT):
        return CompositeLit(str(declared)) if declared.text else _nil()
    if declared.kind != TypeKind.NAMED:
        return _nil()
    if declared.is_predeclared():
        return _predeclared_zero(declared.name) or CompositeLit(str(declared))
    return _named_zero(declared, registry)


def _named_zero(declared: GoType, registry: PackageRegistry | None) -> Expr:
    underlying = registry.underlying(declared) if registry is not None else None
    if underlying is None:
        logger.debug("No declaration for %s, assuming an aggregate", declared)
        return CompositeLit(str(declared))
    if underlying.kind == TypeKind.NAMED and underlying.is_predeclared():
        zero = _predeclared_zero(underlying.name)
        if zero is not None:
            return zero
    if underlying.kind in _NIL_KINDS:
        return _nil()
    return CompositeLit(str(declared))
