"""Individual commit rules for table drafts.

Each rule is a callable that accepts the draft being committed and the
tables it must not collide with (every committed table except the one
being edited) and returns a list of ``Diagnostic`` objects.  Rules are
composed by ``TableValidator``, which runs them all in order.

Codes follow ``ErrorKind``:

    SQM001  Empty table or field name
    SQM002  Table name collides with another table
    SQM003  Table has no fields
    SQM004  Table has no primary-key field
    SQM005  Two fields share a name
    SQM010  Foreign key references a table that no longer exists

All name comparisons go through ``sqlmaker.naming.normalize_name``.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import Callable

from sqlmaker.model.drafts import TableDraft
from sqlmaker.model.entities import SchemaState, Table
from sqlmaker.naming import normalize_name
from sqlmaker.validator.diagnostics import Diagnostic, DiagnosticSeverity, ErrorKind

Rule = Callable[[TableDraft, Sequence[Table]], list[Diagnostic]]


def _error(
    kind: ErrorKind,
    message: str,
    subject: str,
    suggestion: str | None = None,
    rule: str = "",
) -> Diagnostic:
    return Diagnostic(
        kind=kind,
        severity=DiagnosticSeverity.ERROR,
        message=message,
        subject=subject,
        suggestion=suggestion,
        rule=rule,
    )


# ---------------------------------------------------------------------------
# SQM001 — table name present
# ---------------------------------------------------------------------------

def rule_table_name_present(draft: TableDraft, others: Sequence[Table]) -> list[Diagnostic]:
    """SQM001: A table needs a non-blank name."""
    if normalize_name(draft.name):
        return []
    return [_error(
        ErrorKind.EMPTY_NAME,
        "Table name required",
        draft.name,
        suggestion="Give the table a name",
        rule="table_name_present",
    )]


# ---------------------------------------------------------------------------
# SQM002 — table name unique
# ---------------------------------------------------------------------------

def rule_unique_table_name(draft: TableDraft, others: Sequence[Table]) -> list[Diagnostic]:
    """SQM002: Table names must be unique, ignoring case and surrounding spaces."""
    wanted = normalize_name(draft.name)
    if not wanted:
        return []
    for table in others:
        if normalize_name(table.name) == wanted:
            return [_error(
                ErrorKind.DUPLICATE_TABLE_NAME,
                f"Table name {draft.name.strip()!r} already exists",
                draft.name,
                suggestion="Pick a name no other table uses",
                rule="unique_table_name",
            )]
    return []


# ---------------------------------------------------------------------------
# SQM003 — at least one field
# ---------------------------------------------------------------------------

def rule_has_fields(draft: TableDraft, others: Sequence[Table]) -> list[Diagnostic]:
    """SQM003: A table needs at least one field."""
    if draft.fields:
        return []
    return [_error(
        ErrorKind.NO_FIELDS,
        "At least one field required",
        draft.name,
        rule="has_fields",
    )]


# ---------------------------------------------------------------------------
# SQM004 — primary key present
# ---------------------------------------------------------------------------

def rule_has_primary_key(draft: TableDraft, others: Sequence[Table]) -> list[Diagnostic]:
    """SQM004: At least one field must be marked primary."""
    if not draft.fields or any(f.is_primary for f in draft.fields):
        return []
    return [_error(
        ErrorKind.NO_PRIMARY_KEY,
        "Primary key required",
        draft.name,
        suggestion="Mark one field as the primary key",
        rule="has_primary_key",
    )]


# ---------------------------------------------------------------------------
# SQM001 — field names present
# ---------------------------------------------------------------------------

def rule_field_names_present(draft: TableDraft, others: Sequence[Table]) -> list[Diagnostic]:
    """SQM001: Every field needs a non-blank name."""
    blank = sum(1 for f in draft.fields if not normalize_name(f.name))
    if not blank:
        return []
    return [_error(
        ErrorKind.EMPTY_NAME,
        f"Field name required ({blank} unnamed field(s) in {draft.name.strip() or 'table'!r})",
        draft.name,
        suggestion="Name or remove the unnamed fields",
        rule="field_names_present",
    )]


# ---------------------------------------------------------------------------
# SQM005 — field names unique
# ---------------------------------------------------------------------------

def rule_unique_field_names(draft: TableDraft, others: Sequence[Table]) -> list[Diagnostic]:
    """SQM005: Field names must be unique within a table, ignoring case."""
    counts = Counter(normalize_name(f.name) for f in draft.fields if normalize_name(f.name))
    duplicates = sorted(name for name, count in counts.items() if count > 1)
    if not duplicates:
        return []
    return [_error(
        ErrorKind.DUPLICATE_FIELD_NAME,
        f"Duplicate field names: {', '.join(duplicates)}",
        draft.name,
        suggestion="Rename fields so each name appears once",
        rule="unique_field_names",
    )]


DEFAULT_RULES: list[Rule] = [
    rule_table_name_present,
    rule_unique_table_name,
    rule_has_fields,
    rule_has_primary_key,
    rule_field_names_present,
    rule_unique_field_names,
]


# ---------------------------------------------------------------------------
# SQM010 — dangling foreign keys (schema-wide, warning only)
# ---------------------------------------------------------------------------

def rule_dangling_foreign_keys(state: SchemaState) -> list[Diagnostic]:
    """SQM010: Foreign keys left behind after their target table was deleted."""
    known = {t.id for t in state.tables}
    diagnostics: list[Diagnostic] = []
    for table in state.tables:
        for fk in table.foreign_keys:
            if fk.references not in known:
                diagnostics.append(Diagnostic(
                    kind=ErrorKind.DANGLING_FOREIGN_KEY,
                    severity=DiagnosticSeverity.WARNING,
                    message=(
                        f"Field {table.name}.{fk.name} references a table that "
                        f"no longer exists"
                    ),
                    subject=f"{table.name}.{fk.name}",
                    suggestion="Remove the field or point it at an existing table",
                    rule="dangling_foreign_keys",
                ))
    return diagnostics
