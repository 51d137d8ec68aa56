"""SQLMaker schema model.

Exports the committed entity types, the editable draft types, and the
serializer for converting project state to and from JSON/YAML.
"""
from __future__ import annotations

from sqlmaker.model.drafts import FieldDraft, RelationshipDraft, TableDraft
from sqlmaker.model.entities import (
    ColumnType,
    Dialect,
    Field,
    Relationship,
    RelationshipType,
    SchemaState,
    Table,
)
from sqlmaker.model.serializer import ProjectSerializer

__all__ = [
    # Entities
    "Field",
    "Table",
    "Relationship",
    "SchemaState",
    # Enums
    "ColumnType",
    "RelationshipType",
    "Dialect",
    # Drafts
    "FieldDraft",
    "TableDraft",
    "RelationshipDraft",
    # Serializer
    "ProjectSerializer",
]
