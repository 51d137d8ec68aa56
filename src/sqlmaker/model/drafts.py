"""Editable drafts of tables and relationships.

A draft is what a caller edits before asking the ``SchemaStore`` to
commit it.  Drafts are plain mutable dataclasses with no invariants of
their own; all checking happens once, at commit time, and converts the
draft into frozen ``Table``/``Relationship`` records.

Editing an existing table works on a deep copy obtained from
``TableDraft.from_table``, never on the committed record.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields as dataclass_fields

from sqlmaker.ids import IdFactory, uuid_ids
from sqlmaker.model.entities import ColumnType, Field, RelationshipType, Table


@dataclass
class FieldDraft:
    """Mutable counterpart of ``Field``.  ``id`` may be left unset."""

    name: str = ""
    type: ColumnType = ColumnType.TEXT
    is_primary: bool = False
    is_null: bool = True
    is_unique: bool = False
    auto_increment: bool = False
    default: str = ""
    is_foreign_key: bool = False
    references: str | None = None
    id: str | None = None

    @classmethod
    def primary_key(cls, name: str = "id", id: str | None = None) -> "FieldDraft":  # noqa: A002
        """Return the default auto-increment integer primary key."""
        return cls(
            name=name,
            type=ColumnType.INTEGER,
            is_primary=True,
            is_null=False,
            auto_increment=True,
            id=id,
        )

    @classmethod
    def from_field(cls, source: Field) -> "FieldDraft":
        return cls(
            name=source.name,
            type=source.type,
            is_primary=source.is_primary,
            is_null=source.is_null,
            is_unique=source.is_unique,
            auto_increment=source.auto_increment,
            default=source.default,
            is_foreign_key=source.is_foreign_key,
            references=source.references,
            id=source.id,
        )

    def build(self, id: str) -> Field:  # noqa: A002
        """Freeze this draft into a ``Field`` with the given id."""
        return Field(
            id=id,
            name=self.name.strip(),
            type=self.type,
            is_primary=self.is_primary,
            is_null=self.is_null,
            is_unique=self.is_unique,
            auto_increment=self.auto_increment,
            default=self.default,
            is_foreign_key=self.is_foreign_key,
            references=self.references,
        )


_FIELD_ATTRIBUTES = frozenset(f.name for f in dataclass_fields(FieldDraft)) - {"id"}


@dataclass
class TableDraft:
    """Mutable counterpart of ``Table``.

    Parameters
    ----------
    name:
        Proposed table name.
    fields:
        Proposed fields, in column order.
    id_factory:
        Source of ids for fields added through ``add_field``.
    """

    name: str = ""
    fields: list[FieldDraft] = field(default_factory=list)
    id_factory: IdFactory = field(default=uuid_ids, repr=False, compare=False)

    @classmethod
    def from_table(cls, table: Table, id_factory: IdFactory = uuid_ids) -> "TableDraft":
        """Return an editable deep copy of a committed table."""
        return cls(
            name=table.name,
            fields=[FieldDraft.from_field(f) for f in table.fields],
            id_factory=id_factory,
        )

    def add_field(
        self,
        name: str = "",
        type: ColumnType = ColumnType.TEXT,  # noqa: A002
        **attributes: object,
    ) -> FieldDraft:
        """Append a new field and return it.

        Unspecified attributes take the editor defaults: nullable, not
        primary, not unique, no auto-increment, empty default.
        """
        draft = FieldDraft(name=name, type=type, id=self.id_factory())
        for key, value in attributes.items():
            _set_field_attribute(draft, key, value)
        self.fields.append(draft)
        return draft

    def get_field(self, field_id: str) -> FieldDraft:
        for candidate in self.fields:
            if candidate.id == field_id:
                return candidate
        raise KeyError(f"No field with id {field_id!r} in draft {self.name!r}")

    def update_field(self, field_id: str, **changes: object) -> FieldDraft:
        """Change attributes of the draft field with id ``field_id``.

        Raises
        ------
        KeyError
            If no draft field has that id.
        AttributeError
            If a change names an attribute fields do not have.
        """
        target = self.get_field(field_id)
        unknown = sorted(set(changes) - _FIELD_ATTRIBUTES)
        if unknown:
            raise AttributeError(f"Fields have no attribute {unknown[0]!r}")
        for key, value in changes.items():
            setattr(target, key, value)
        return target

    def remove_field(self, field_id: str) -> None:
        """Drop the draft field with id ``field_id``.

        Raises
        ------
        KeyError
            If no draft field has that id.
        """
        target = self.get_field(field_id)
        self.fields = [f for f in self.fields if f is not target]


def _set_field_attribute(draft: FieldDraft, key: str, value: object) -> None:
    if key not in _FIELD_ATTRIBUTES:
        raise AttributeError(f"Fields have no attribute {key!r}")
    setattr(draft, key, value)


@dataclass
class RelationshipDraft:
    """Mutable counterpart of ``Relationship``.

    ``child_field`` optionally names the foreign-key column to create or
    reuse on the child table; left empty, the engine derives
    ``<parent>_id``.
    """

    parent_table_id: str = ""
    child_table_id: str = ""
    type: RelationshipType = RelationshipType.ONE_TO_MANY
    child_field: str = ""
