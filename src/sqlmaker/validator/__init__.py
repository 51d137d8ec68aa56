"""SQLMaker validator module.

Exports the commit-time ``TableValidator``, the schema-wide
``check_schema`` pass, and the ``Diagnostic`` types they produce.
"""
from __future__ import annotations

from sqlmaker.validator.diagnostics import Diagnostic, DiagnosticSeverity, ErrorKind
from sqlmaker.validator.rules import DEFAULT_RULES, Rule
from sqlmaker.validator.validator import TableValidator, check_schema, validate_table

__all__ = [
    "Diagnostic",
    "DiagnosticSeverity",
    "ErrorKind",
    "DEFAULT_RULES",
    "Rule",
    "TableValidator",
    "check_schema",
    "validate_table",
]
