"""Lexical scopes and bindings — the pre-existing symbol table of a unit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from .gotypes import GoType, Signature


class BindingKind(str, Enum):
    VAR = "var"
    CONST = "const"
    TYPE = "type"
    FUNC = "func"
    IMPORT = "import"
    BUILTIN = "builtin"


class ScopeKind(str, Enum):
    UNIVERSE = "universe"
    PACKAGE = "package"
    FILE = "file"
    FUNCTION = "function"
    BLOCK = "block"
    IF = "if"
    FOR = "for"
    SWITCH = "switch"
    CASE = "case"


@dataclass
class Binding:
    name: str
    kind: BindingKind
    visible_from: int = 0
    type: GoType | None = None
    signature: Signature | None = None
    import_path: str = ""


@dataclass(eq=False)
class Scope:
    """One lexical scope.

    Bindings are position aware: a name declared by a statement becomes
    visible only where that statement ends, so ``lookup(name, pos)`` answers
    "is *name* bound at *pos*" rather than "is it declared anywhere here".
    """

    id: int
    kind: ScopeKind
    parent: Scope | None = None
    start: int = 0
    end: int = 0
    bindings: dict[str, list[Binding]] = field(default_factory=dict)

    def declare(self, binding: Binding) -> None:
        self.bindings.setdefault(binding.name, []).append(binding)

    def lookup_local(self, name: str, pos: int) -> Binding | None:
        visible = [b for b in self.bindings.get(name, []) if b.visible_from <= pos]
        return visible[-1] if visible else None

    def lookup(self, name: str, pos: int) -> Binding | None:
        for scope in self.chain():
            found = scope.lookup_local(name, pos)
            if found is not None:
                return found
        return None

    def chain(self) -> Iterator[Scope]:
        """This scope and its ancestors, innermost first."""
        scope: Scope | None = self
        while scope is not None:
            yield scope
            scope = scope.parent

    def __repr__(self) -> str:
        return f"Scope({self.id}, {self.kind.value}, {self.start}:{self.end})"
