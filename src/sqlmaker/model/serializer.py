"""Project document serialization for SQLMaker.

Converts a ``SchemaState`` to and from the project document exchanged
with callers and written to disk::

    {"tables": [...], "relationships": [...], "dialect": "postgres"}

Keys inside the document are camelCase (``isPrimary``,
``parentTableId``, ...) so that files exported by earlier versions of
the designer load unchanged.  JSON and YAML carry the same structure.

Usage
-----
::

    from sqlmaker.model.serializer import ProjectSerializer

    serializer = ProjectSerializer()
    text = serializer.to_json(state)
    assert serializer.from_json(text) == state
"""
from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import yaml

from sqlmaker.errors import ProjectImportError
from sqlmaker.model.entities import (
    ColumnType,
    Dialect,
    Field,
    Relationship,
    RelationshipType,
    SchemaState,
    Table,
)


class ProjectSerializer:
    """Converts between ``SchemaState`` objects and plain Python dicts.

    Deserialization is lenient about optional keys, matching documents
    written by hand or by older exports: missing ``relationships``
    default to none, a missing ``dialect`` to postgres, missing boolean
    flags to false and a missing ``default`` to the empty string.
    Anything structurally wrong raises ``ProjectImportError``.
    """

    # ------------------------------------------------------------------
    # Serialization (state → dict)
    # ------------------------------------------------------------------

    def to_dict(self, state: SchemaState) -> dict[str, Any]:
        """Serialize a ``SchemaState`` to a JSON-compatible dict."""
        return {
            "tables": [self._table_to_dict(t) for t in state.tables],
            "relationships": [self._relationship_to_dict(r) for r in state.relationships],
            "dialect": state.dialect.value,
        }

    def _field_to_dict(self, f: Field) -> dict[str, Any]:
        return {
            "id": f.id,
            "name": f.name,
            "type": f.type.value,
            "isPrimary": f.is_primary,
            "isNull": f.is_null,
            "isUnique": f.is_unique,
            "autoIncrement": f.auto_increment,
            "default": f.default,
            "isForeignKey": f.is_foreign_key,
            "references": f.references,
        }

    def _table_to_dict(self, t: Table) -> dict[str, Any]:
        return {
            "id": t.id,
            "name": t.name,
            "fields": [self._field_to_dict(f) for f in t.fields],
        }

    def _relationship_to_dict(self, r: Relationship) -> dict[str, Any]:
        return {
            "id": r.id,
            "parentTableId": r.parent_table_id,
            "childTableId": r.child_table_id,
            "parentField": r.parent_field,
            "childField": r.child_field,
            "type": r.type.name,
            "joinTableId": r.join_table_id,
        }

    # ------------------------------------------------------------------
    # Deserialization (dict → state)
    # ------------------------------------------------------------------

    def from_dict(self, data: object) -> SchemaState:
        """Deserialize a ``SchemaState`` from a decoded project document.

        Raises
        ------
        ProjectImportError
            If the document is not an object, ``tables`` is not a list
            (any non-string sequence is accepted), or any record is
            malformed.
        """
        if not isinstance(data, Mapping):
            raise ProjectImportError("project document must be an object")
        tables = data.get("tables")
        if not _is_sequence(tables):
            raise ProjectImportError("'tables' must be a list")
        relationships = data.get("relationships") or []
        if not _is_sequence(relationships):
            raise ProjectImportError("'relationships' must be a list")
        return SchemaState(
            tables=tuple(self._table_from_dict(t, i) for i, t in enumerate(tables)),
            relationships=tuple(
                self._relationship_from_dict(r, i) for i, r in enumerate(relationships)
            ),
            dialect=self._dialect_from_value(data.get("dialect") or Dialect.POSTGRES.value),
        )

    def _table_from_dict(self, d: object, index: int) -> Table:
        where = f"table #{index}"
        record = _require_mapping(d, where)
        fields = record.get("fields")
        if not _is_sequence(fields):
            raise ProjectImportError(f"{where}: 'fields' must be a list")
        return Table(
            id=_require_str(record, "id", where),
            name=_require_str(record, "name", where),
            fields=tuple(
                self._field_from_dict(f, f"{where}, field #{i}") for i, f in enumerate(fields)
            ),
        )

    def _field_from_dict(self, d: object, where: str) -> Field:
        record = _require_mapping(d, where)
        try:
            column_type = ColumnType.parse(_require_str(record, "type", where))
        except ValueError as exc:
            raise ProjectImportError(f"{where}: {exc}") from exc
        default = record.get("default")
        return Field(
            id=_require_str(record, "id", where),
            name=_require_str(record, "name", where),
            type=column_type,
            is_primary=bool(record.get("isPrimary", False)),
            is_null=bool(record.get("isNull", False)),
            is_unique=bool(record.get("isUnique", False)),
            auto_increment=bool(record.get("autoIncrement", False)),
            default="" if default is None else str(default),
            is_foreign_key=bool(record.get("isForeignKey", False)),
            references=_optional_str(record.get("references")),
        )

    def _relationship_from_dict(self, d: object, index: int) -> Relationship:
        where = f"relationship #{index}"
        record = _require_mapping(d, where)
        type_name = _require_str(record, "type", where)
        try:
            rel_type = RelationshipType[type_name]
        except KeyError as exc:
            raise ProjectImportError(
                f"{where}: unknown relationship type {type_name!r}"
            ) from exc
        return Relationship(
            id=_require_str(record, "id", where),
            parent_table_id=_require_str(record, "parentTableId", where),
            child_table_id=_require_str(record, "childTableId", where),
            type=rel_type,
            parent_field=_optional_str(record.get("parentField")),
            child_field=_optional_str(record.get("childField")),
            join_table_id=_optional_str(record.get("joinTableId")),
        )

    def _dialect_from_value(self, value: object) -> Dialect:
        try:
            return Dialect(value)
        except ValueError as exc:
            known = ", ".join(d.value for d in Dialect)
            raise ProjectImportError(
                f"unknown dialect {value!r}. Known dialects: {known}"
            ) from exc

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, state: SchemaState, indent: int = 2) -> str:
        """Serialize a ``SchemaState`` to a JSON string."""
        return json.dumps(self.to_dict(state), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> SchemaState:
        """Deserialize a ``SchemaState`` from a JSON string."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ProjectImportError(f"invalid JSON: {exc}") from exc
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, state: SchemaState) -> str:
        """Serialize a ``SchemaState`` to a YAML string."""
        return yaml.dump(
            self.to_dict(state), default_flow_style=False, allow_unicode=True, sort_keys=False
        )

    def from_yaml(self, text: str) -> SchemaState:
        """Deserialize a ``SchemaState`` from a YAML string."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ProjectImportError(f"invalid YAML: {exc}") from exc
        return self.from_dict(data)


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _require_mapping(value: object, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ProjectImportError(f"{where} must be an object")
    return value


def _require_str(record: Mapping[str, Any], key: str, where: str) -> str:
    value = record.get(key)
    if not isinstance(value, str):
        raise ProjectImportError(f"{where}: {key!r} must be a string")
    return value


def _optional_str(value: object) -> str | None:
    # Older exports store "" where nothing was resolved.
    if value is None or value == "":
        return None
    return str(value)
