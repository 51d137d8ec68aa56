"""Diagnostic types for the SQLMaker validator.

A ``Diagnostic`` is a finding attached to a named subject (a table, a
field or a relationship).  Errors block a commit; warnings only inform.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from sqlmaker.errors import ErrorKind


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics."""

    ERROR = auto()
    WARNING = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding.

    Parameters
    ----------
    kind:
        The error kind; its value doubles as the diagnostic code.
    severity:
        How serious this finding is.
    message:
        Human-readable description, suitable for showing verbatim.
    subject:
        Name of the table, field or relationship the finding is about.
    suggestion:
        Optional human-readable fix suggestion.
    rule:
        The rule name that produced this diagnostic.
    """

    kind: ErrorKind
    severity: DiagnosticSeverity
    message: str
    subject: str = ""
    suggestion: str | None = field(default=None)
    rule: str = field(default="")

    @property
    def code(self) -> str:
        return self.kind.code

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic should block a commit."""
        return self.severity == DiagnosticSeverity.ERROR

    def __str__(self) -> str:
        prefix = f"[{self.code}] {self.severity.name}"
        suggestion_part = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"{prefix}: {self.message}{suggestion_part}"
