"""Exception types raised by the SQLMaker core.

Every error the store, the relationship engine or the project loader
can raise derives from ``SchemaError`` and carries an ``ErrorKind`` so
callers can branch on the kind without parsing messages.  Messages are
written to be shown to the end user as-is.

No error leaves a ``SchemaStore`` half-updated: all checks run before
any collection is replaced.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlmaker.validator.diagnostics import Diagnostic


class ErrorKind(Enum):
    """What went wrong, independent of wording.  Values are the codes."""

    EMPTY_NAME = "SQM001"
    DUPLICATE_TABLE_NAME = "SQM002"
    NO_FIELDS = "SQM003"
    NO_PRIMARY_KEY = "SQM004"
    DUPLICATE_FIELD_NAME = "SQM005"
    INVALID_ENDPOINTS = "SQM006"
    MISSING_TABLE = "SQM007"
    IMPORT_ERROR = "SQM008"
    MISSING_RELATIONSHIP = "SQM009"
    DANGLING_FOREIGN_KEY = "SQM010"

    @property
    def code(self) -> str:
        return self.value


class SchemaError(Exception):
    """Base class for all SQLMaker errors.

    Parameters
    ----------
    kind:
        Machine-readable error kind.
    message:
        Human-readable description.
    """

    def __init__(self, kind: ErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.kind.code


class ValidationError(SchemaError):
    """A table draft failed one or more commit rules.

    Parameters
    ----------
    diagnostics:
        The error diagnostics that blocked the commit, in rule order.
        The exception's ``kind`` and message are those of the first.
    """

    def __init__(self, diagnostics: list["Diagnostic"]) -> None:
        if not diagnostics:
            raise ValueError("ValidationError requires at least one diagnostic")
        self.diagnostics = list(diagnostics)
        first = self.diagnostics[0]
        super().__init__(first.kind, first.message)

    def __str__(self) -> str:
        if len(self.diagnostics) == 1:
            return self.message
        lines = [f"{self.message} ({len(self.diagnostics)} problem(s)):"]
        for diagnostic in self.diagnostics:
            lines.append(f"  {diagnostic}")
        return "\n".join(lines)


class InvalidEndpointsError(SchemaError):
    """A relationship's parent and child are the same table, or unset."""

    def __init__(self, message: str = "Invalid parent/child tables") -> None:
        super().__init__(ErrorKind.INVALID_ENDPOINTS, message)


class MissingTableError(SchemaError):
    """A referenced table id is not present in the store."""

    def __init__(self, table_id: str, message: str | None = None) -> None:
        self.table_id = table_id
        super().__init__(
            ErrorKind.MISSING_TABLE,
            message or f"Table {table_id!r} does not exist",
        )


class MissingRelationshipError(SchemaError):
    """A referenced relationship id is not present in the store."""

    def __init__(self, relationship_id: str) -> None:
        self.relationship_id = relationship_id
        super().__init__(
            ErrorKind.MISSING_RELATIONSHIP,
            f"Relationship {relationship_id!r} does not exist",
        )


class ProjectImportError(SchemaError):
    """A project document could not be loaded."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.IMPORT_ERROR, f"Import failed: {message}")
