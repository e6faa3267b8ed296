"""Error-capability oracle: does a type satisfy Go's ``error`` interface?"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from . import constants
from .gotypes import GoType, Signature, TypeKind
from .packages import ERROR_SIGNATURE, PackageRegistry


@dataclass(frozen=True)
class ErrorContract:
    """The single-method failure-reporting interface: ``Error() string``."""

    method: str = constants.ERROR_METHOD_NAME
    signature: Signature = ERROR_SIGNATURE

    def satisfied_by(self, methods: Mapping[str, Signature]) -> bool:
        found = methods.get(self.method)
        if found is None:
            return False
        return (
            found.params == self.signature.params
            and found.results == self.signature.results
            and not found.variadic
        )


class ErrorOracle:
    """Read-only capability built once per run and passed to every component.

    Unresolved types are never error-like; they must not crash the pass.
    """

    def __init__(self, registry: PackageRegistry, contract: ErrorContract | None = None):
        self._registry = registry
        self.contract = contract or ErrorContract()

    @property
    def registry(self) -> PackageRegistry:
        return self._registry

    def is_error_like(self, t: GoType | None) -> bool:
        if t is None or t.kind == TypeKind.TYPE_PARAM:
            return False
        return self.contract.satisfied_by(self._registry.method_set(t))
