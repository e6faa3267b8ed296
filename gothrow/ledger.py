"""Scope ledger — names this pass has introduced, layered over the symbol table."""

from __future__ import annotations

import logging

from .scope import Scope

logger = logging.getLogger(__name__)


class ScopeLedger:
    """Overlay of pass-introduced names, checked before the original table.

    The original table was built before any rewrite, so a name the pass
    introduces is invisible to it; the overlay records those names per
    scope.  Entries are never removed during a pass.
    """

    def __init__(self):
        self._introduced: dict[int, set[str]] = {}

    def mark_introduced(self, scope: Scope, name: str) -> None:
        logger.debug("Marking %s introduced in %r", name, scope)
        self._introduced.setdefault(scope.id, set()).add(name)

    def introduced(self, scope: Scope, name: str) -> bool:
        """Whether the pass introduced *name* in *scope* or an enclosing scope."""
        return any(name in self._introduced.get(s.id, ()) for s in scope.chain())

    def is_bound(self, scope: Scope, name: str, pos: int) -> bool:
        for s in scope.chain():
            if name in self._introduced.get(s.id, ()):
                return True
            if s.lookup_local(name, pos) is not None:
                return True
        return False
