"""The schema store: owner of every committed table and relationship.

All changes to a schema go through a ``SchemaStore`` method.  Each
method validates first, computes the complete new collections, and only
then replaces the old ones, so a rejected call leaves the store exactly
as it was.

The store is not thread-safe.  Callers sharing one store across threads
must serialize access themselves.

Usage
-----
::

    from sqlmaker.store import SchemaStore

    store = SchemaStore()
    users = store.create_table(store.new_table_draft())
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlmaker.engine import RelationshipEngine
from sqlmaker.errors import (
    InvalidEndpointsError,
    MissingRelationshipError,
    MissingTableError,
    ValidationError,
)
from sqlmaker.ids import IdFactory, uuid_ids
from sqlmaker.model.drafts import FieldDraft, RelationshipDraft, TableDraft
from sqlmaker.model.entities import Dialect, Relationship, SchemaState, Table
from sqlmaker.naming import normalize_name, unique_name
from sqlmaker.validator import Diagnostic, TableValidator

logger = logging.getLogger(__name__)


class SchemaStore:
    """In-memory schema with validated, all-or-nothing mutations.

    Parameters
    ----------
    tables:
        Initial tables, in DDL order.  Not re-validated.
    relationships:
        Initial relationships.
    dialect:
        The project's preferred dialect.
    id_factory:
        Source of ids for every record the store or its engine creates.
        Must not repeat within the store's lifetime.
    validator:
        Validator applied to table drafts on commit.
    """

    def __init__(
        self,
        tables: Iterable[Table] = (),
        relationships: Iterable[Relationship] = (),
        dialect: Dialect = Dialect.POSTGRES,
        id_factory: IdFactory = uuid_ids,
        validator: TableValidator | None = None,
    ) -> None:
        self._tables: tuple[Table, ...] = tuple(tables)
        self._relationships: tuple[Relationship, ...] = tuple(relationships)
        self.dialect = dialect
        self._new_id = id_factory
        self._validator = validator or TableValidator()
        self._engine = RelationshipEngine(id_factory)

    @classmethod
    def from_state(cls, state: SchemaState, id_factory: IdFactory = uuid_ids) -> "SchemaStore":
        """Return a store holding the contents of ``state``."""
        return cls(
            tables=state.tables,
            relationships=state.relationships,
            dialect=state.dialect,
            id_factory=id_factory,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def tables(self) -> tuple[Table, ...]:
        return self._tables

    @property
    def relationships(self) -> tuple[Relationship, ...]:
        return self._relationships

    @property
    def state(self) -> SchemaState:
        """Return an immutable snapshot of the whole store."""
        return SchemaState(
            tables=self._tables,
            relationships=self._relationships,
            dialect=self.dialect,
        )

    def get_table(self, table_id: str) -> Table:
        """Return the table with id ``table_id``.

        Raises
        ------
        MissingTableError
            If there is no such table.
        """
        for table in self._tables:
            if table.id == table_id:
                return table
        raise MissingTableError(table_id)

    def find_table(self, name: str) -> Table | None:
        """Return the table named ``name`` (case-insensitive), or None."""
        wanted = normalize_name(name)
        for table in self._tables:
            if normalize_name(table.name) == wanted:
                return table
        return None

    def get_relationship(self, relationship_id: str) -> Relationship:
        """Return the relationship with id ``relationship_id``.

        Raises
        ------
        MissingRelationshipError
            If there is no such relationship.
        """
        for relationship in self._relationships:
            if relationship.id == relationship_id:
                return relationship
        raise MissingRelationshipError(relationship_id)

    # ------------------------------------------------------------------
    # Drafts
    # ------------------------------------------------------------------

    def new_table_draft(self) -> TableDraft:
        """Return a draft for a new table.

        The draft is named ``table`` (suffixed to avoid collisions) and
        starts with an auto-increment integer primary key ``id``.
        """
        return TableDraft(
            name=unique_name("table", self._tables),
            fields=[FieldDraft.primary_key(id=self._new_id())],
            id_factory=self._new_id,
        )

    def edit_table_draft(self, table_id: str) -> TableDraft:
        """Return an editable copy of the committed table ``table_id``."""
        return TableDraft.from_table(self.get_table(table_id), id_factory=self._new_id)

    def new_relationship_draft(self) -> RelationshipDraft:
        """Return a one-to-many draft from the first table to the second.

        Raises
        ------
        InvalidEndpointsError
            If the store holds fewer than two tables.
        """
        if len(self._tables) < 2:
            raise InvalidEndpointsError("Need at least two tables")
        return RelationshipDraft(
            parent_table_id=self._tables[0].id,
            child_table_id=self._tables[1].id,
        )

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def check_table(self, draft: TableDraft, editing_id: str | None = None) -> list[Diagnostic]:
        """Return the diagnostics committing ``draft`` would produce.  Never mutates."""
        return self._validator.validate(draft, self._tables, editing_id=editing_id)

    def _require_valid(self, draft: TableDraft, editing_id: str | None = None) -> None:
        errors = [d for d in self.check_table(draft, editing_id) if d.is_error]
        if errors:
            raise ValidationError(errors)

    def _build(self, draft: TableDraft, table_id: str) -> Table:
        return Table(
            id=table_id,
            name=draft.name.strip(),
            fields=tuple(f.build(f.id or self._new_id()) for f in draft.fields),
        )

    def create_table(self, draft: TableDraft) -> Table:
        """Validate ``draft`` and append it as a new table.

        Raises
        ------
        ValidationError
            If the draft breaks any table rule.
        """
        self._require_valid(draft)
        table = self._build(draft, self._new_id())
        self._tables = (*self._tables, table)
        logger.debug("Created table %r (%s)", table.name, table.id)
        return table

    def update_table(self, table_id: str, draft: TableDraft) -> Table:
        """Validate ``draft`` and replace table ``table_id`` with it.

        The table keeps its id and its position.

        Raises
        ------
        MissingTableError
            If there is no such table.
        ValidationError
            If the draft breaks any table rule.
        """
        self.get_table(table_id)
        self._require_valid(draft, editing_id=table_id)
        table = self._build(draft, table_id)
        self._tables = tuple(table if t.id == table_id else t for t in self._tables)
        logger.debug("Updated table %r (%s)", table.name, table.id)
        return table

    def delete_table(self, table_id: str) -> None:
        """Remove table ``table_id`` and every relationship touching it.

        Foreign-key fields on other tables that pointed at the removed
        table stay where they are.

        Raises
        ------
        MissingTableError
            If there is no such table.
        """
        table = self.get_table(table_id)
        remaining = tuple(r for r in self._relationships if not r.involves(table_id))
        dropped = len(self._relationships) - len(remaining)
        self._tables = tuple(t for t in self._tables if t.id != table_id)
        self._relationships = remaining
        logger.debug("Deleted table %r and %d relationship(s)", table.name, dropped)

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------

    def create_relationship(self, draft: RelationshipDraft) -> Relationship:
        """Commit ``draft``, applying its side effects to the tables.

        Raises
        ------
        InvalidEndpointsError
            If parent and child are unset or the same table.
        MissingTableError
            If either table does not exist.
        """
        tables, relationship = self._engine.link(draft, self._tables)
        self._tables = tables
        self._relationships = (*self._relationships, relationship)
        logger.debug(
            "Created %s relationship %s -> %s",
            relationship.type.name,
            relationship.parent_table_id,
            relationship.child_table_id,
        )
        return relationship

    def delete_relationship(self, relationship_id: str) -> None:
        """Remove a relationship and reverse its side effects.

        Deleting a many-to-many relationship drops its join table, and
        with it every other relationship that used the join table as an
        endpoint.

        Raises
        ------
        MissingRelationshipError
            If there is no such relationship.
        """
        relationship = self.get_relationship(relationship_id)
        tables = self._engine.unlink(relationship, self._tables)
        kept_ids = {t.id for t in tables}
        dropped_ids = [t.id for t in self._tables if t.id not in kept_ids]
        remaining = tuple(
            r
            for r in self._relationships
            if r.id != relationship_id and not any(r.involves(d) for d in dropped_ids)
        )
        cascaded = len(self._relationships) - len(remaining) - 1
        self._tables = tables
        self._relationships = remaining
        logger.debug(
            "Deleted relationship %s and %d dependent relationship(s)",
            relationship_id,
            cascaded,
        )
