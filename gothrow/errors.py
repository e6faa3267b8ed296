"""Exception taxonomy for the rewrite pipeline.

Candidate-level problems are not exceptions: they are reported as
``Diagnostic`` records and the rest of the unit still applies.
"""

from __future__ import annotations


class GothrowError(Exception):
    """Base class for all pipeline failures."""


class UnitLoadError(GothrowError):
    """A compilation unit could not be read, parsed or resolved.

    The unit is skipped; sibling units are still processed.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class PrintError(GothrowError):
    """A mutated unit could not be serialized; nothing is written for it."""


class ProjectLoadError(GothrowError):
    """The project's compilation units could not be discovered at all."""
