"""Committed schema entities.

Every record the ``SchemaStore`` holds is a frozen dataclass so that a
committed table or relationship can never be edited in place.  Changes
go through a draft (see ``sqlmaker.model.drafts``) or, for foreign-key
side effects, through the relationship engine, which builds a
replacement record with ``dataclasses.replace``.

Field order inside a ``Table`` is significant: it is the column order of
the generated DDL.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto

from sqlmaker.naming import names_equal


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ColumnType(Enum):
    """Column types offered by the designer.  Values are the SQL spelling."""

    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    TEXT = "TEXT"
    VARCHAR = "VARCHAR(255)"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"
    REAL = "REAL"
    DECIMAL = "DECIMAL"

    @classmethod
    def parse(cls, text: str) -> "ColumnType":
        """Look up a type by SQL spelling or member name, case-insensitively.

        Raises
        ------
        ValueError
            If ``text`` names no known column type.
        """
        wanted = text.strip().upper()
        for member in cls:
            if wanted in (member.value, member.name):
                return member
        known = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown column type {text!r}. Known types: {known}")


class RelationshipType(Enum):
    """Cardinality of a relationship between two tables."""

    ONE_TO_ONE = auto()
    ONE_TO_MANY = auto()
    MANY_TO_MANY = auto()


class Dialect(Enum):
    """Target SQL flavor.  Only identifier quoting depends on it."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Field:
    """A single column of a table.

    Parameters
    ----------
    id:
        Opaque identifier, unique within the store.
    name:
        Column name.  Unique within its table, case-insensitively.
    type:
        Column type.
    is_primary:
        Part of the table's primary key.
    is_null:
        Column accepts NULL.  Ignored for primary-key columns.
    is_unique:
        Column carries a UNIQUE constraint.
    auto_increment:
        Column is auto-generated.  Informational; not rendered in DDL.
    default:
        Literal default value; the empty string means no default.
    is_foreign_key:
        Column references another table.
    references:
        Id of the referenced table when ``is_foreign_key`` is set.
    """

    id: str
    name: str
    type: ColumnType = ColumnType.TEXT
    is_primary: bool = False
    is_null: bool = True
    is_unique: bool = False
    auto_increment: bool = False
    default: str = ""
    is_foreign_key: bool = False
    references: str | None = None

    def references_table(self, table_id: str) -> bool:
        """Return True if this field is a foreign key pointing at ``table_id``."""
        return self.is_foreign_key and self.references == table_id


@dataclass(frozen=True, slots=True)
class Table:
    """A committed table: a name and an ordered tuple of fields."""

    id: str
    name: str
    fields: tuple[Field, ...] = field(default_factory=tuple)

    @property
    def primary_key(self) -> Field | None:
        """Return the first primary-key field, else the first field, else None."""
        for candidate in self.fields:
            if candidate.is_primary:
                return candidate
        return self.fields[0] if self.fields else None

    @property
    def foreign_keys(self) -> tuple[Field, ...]:
        """Return the foreign-key fields in field order."""
        return tuple(f for f in self.fields if f.is_foreign_key and f.references)

    def field_named(self, name: str) -> Field | None:
        """Return the field whose name matches ``name`` case-insensitively."""
        for candidate in self.fields:
            if names_equal(candidate.name, name):
                return candidate
        return None

    def references_table(self, table_id: str) -> bool:
        """Return True if any field of this table is a foreign key to ``table_id``."""
        return any(f.references_table(table_id) for f in self.fields)

    def with_fields(self, fields: tuple[Field, ...]) -> "Table":
        """Return a copy of this table with ``fields`` replacing its own."""
        return replace(self, fields=tuple(fields))


@dataclass(frozen=True, slots=True)
class Relationship:
    """A committed relationship between a parent and a child table.

    ``parent_field`` and ``child_field`` name the parent primary key and
    the child foreign key for one-to-one and one-to-many relationships;
    they are ``None`` for many-to-many, whose columns live on the join
    table identified by ``join_table_id``.
    """

    id: str
    parent_table_id: str
    child_table_id: str
    type: RelationshipType
    parent_field: str | None = None
    child_field: str | None = None
    join_table_id: str | None = None

    def involves(self, table_id: str) -> bool:
        """Return True if ``table_id`` is either endpoint."""
        return table_id in (self.parent_table_id, self.child_table_id)


@dataclass(frozen=True, slots=True)
class SchemaState:
    """Immutable snapshot of a whole project.

    This is the unit that is loaded, serialized and rendered to DDL.
    Equality is structural, so ``load(serialize(state)) == state`` can
    be asserted directly.
    """

    tables: tuple[Table, ...] = field(default_factory=tuple)
    relationships: tuple[Relationship, ...] = field(default_factory=tuple)
    dialect: Dialect = Dialect.POSTGRES

    def get_table(self, table_id: str) -> Table | None:
        """Return the table with id ``table_id``, or None."""
        for table in self.tables:
            if table.id == table_id:
                return table
        return None
