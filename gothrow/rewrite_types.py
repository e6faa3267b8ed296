"""Rewrite configuration and candidate data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from . import constants


@dataclass(frozen=True)
class RewriteConfig:
    """Groups the names and templates the rewrite emits."""

    error_var: str = constants.DEFAULT_ERROR_VAR
    fatal_import: str = constants.FATAL_IMPORT
    fatal_func: str = constants.FATAL_FUNCTION
    fatal_format: str = constants.FATAL_FORMAT
    entry_package: str = constants.ENTRY_PACKAGE
    entry_func: str = constants.ENTRY_FUNCTION


class CandidateKind(Enum):
    """What the applier does with a candidate statement."""

    ERROR_DISCARD = "error_discard"
    DEMOTION = "demotion"


@dataclass(frozen=True)
class Candidate:
    """A statement found by the scanner, keyed by source position."""

    kind: CandidateKind
    stmt_id: int
    pos: int
    error_index: int = -1
