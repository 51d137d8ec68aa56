"""SQLMaker schema store.

Exports ``SchemaStore``, the single owner of a project's tables and
relationships.
"""
from __future__ import annotations

from sqlmaker.store.store import SchemaStore

__all__ = ["SchemaStore"]
