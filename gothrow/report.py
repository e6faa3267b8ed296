"""Structured records produced by a rewrite run."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class SourcePosition(BaseModel):
    """1-based line, 0-based column of a point in a unit."""

    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.line}:{self.col}"


NO_POSITION = SourcePosition(line=0, col=0)


class DiagnosticKind(str, Enum):
    FOUND = "found"
    DEMOTED = "demoted"
    SKIPPED = "skipped"


class Diagnostic(BaseModel):
    """One human-readable progress or diagnostic line about a candidate."""

    kind: DiagnosticKind
    path: str
    position: SourcePosition = NO_POSITION
    message: str

    def __str__(self) -> str:
        return f"{self.path}:{self.position}: {self.message}"


class RewriteResult(BaseModel):
    """Outcome of rewriting one compilation unit."""

    path: str
    modified: bool = False
    source: str = ""
    diagnostics: list[Diagnostic] = []

    def diagnostics_of(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]


class UnitReport(BaseModel):
    """Per-unit summary in a project run."""

    path: str
    modified: bool = False
    written: bool = False
    error: str = ""
    diff: str = ""
    diagnostics: list[Diagnostic] = []


class ProjectReport(BaseModel):
    root: str
    units: list[UnitReport] = []

    @property
    def failed(self) -> list[UnitReport]:
        return [u for u in self.units if u.error]

    @property
    def modified(self) -> list[UnitReport]:
        return [u for u in self.units if u.modified]
