"""Relationship resolution: turns a relationship declaration into schema changes.

Declaring a relationship is never just bookkeeping.  Depending on its
type the engine changes the tables themselves:

ONE_TO_MANY
    The child gets a foreign-key column ``<parent>_id`` (or the name the
    caller asked for) typed like the parent's primary key.  If the child
    already has a column of that name nothing changes.
ONE_TO_ONE
    As ONE_TO_MANY, but the foreign key is UNIQUE.  An existing column
    of that name is promoted to UNIQUE instead of being duplicated.
MANY_TO_MANY
    Neither endpoint changes.  A join table ``<parent>_<child>_join``
    is synthesized with its own primary key and one foreign key to each
    endpoint.

Removing a relationship reverses those changes.

The engine is pure: it receives the current tables as a tuple and
returns the new tuple, leaving the ``SchemaStore`` to swap it in.  A
failed call therefore never leaves anything half-applied.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from sqlmaker.errors import InvalidEndpointsError, MissingTableError
from sqlmaker.ids import IdFactory, uuid_ids
from sqlmaker.model.drafts import RelationshipDraft
from sqlmaker.model.entities import (
    ColumnType,
    Field,
    Relationship,
    RelationshipType,
    Table,
)
from sqlmaker.naming import names_equal, unique_name

logger = logging.getLogger(__name__)


def _find(tables: Sequence[Table], table_id: str) -> Table | None:
    for table in tables:
        if table.id == table_id:
            return table
    return None


def _replace_table(tables: Sequence[Table], updated: Table) -> tuple[Table, ...]:
    return tuple(updated if t.id == updated.id else t for t in tables)


def default_foreign_key_name(parent: Table) -> str:
    """Return the foreign-key column name derived from ``parent``: ``<name>_id``."""
    return f"{parent.name.lower()}_id"


def resolve_endpoints(
    draft: RelationshipDraft, tables: Sequence[Table]
) -> tuple[Table, Table]:
    """Return the ``(parent, child)`` tables a draft connects.

    Raises
    ------
    InvalidEndpointsError
        If either id is empty, or parent and child are the same table.
    MissingTableError
        If either id names no table.
    """
    if not draft.parent_table_id or not draft.child_table_id:
        raise InvalidEndpointsError("Invalid parent/child tables: both must be set")
    if draft.parent_table_id == draft.child_table_id:
        raise InvalidEndpointsError(
            "Invalid parent/child tables: a table cannot be related to itself"
        )
    parent = _find(tables, draft.parent_table_id)
    child = _find(tables, draft.child_table_id)
    if parent is None:
        raise MissingTableError(draft.parent_table_id, "Parent table missing")
    if child is None:
        raise MissingTableError(draft.child_table_id, "Child table missing")
    return parent, child


class RelationshipEngine:
    """Applies and reverses the schema side effects of relationships.

    Parameters
    ----------
    id_factory:
        Source of ids for relationships, join tables and the fields the
        engine creates.
    """

    def __init__(self, id_factory: IdFactory = uuid_ids) -> None:
        self._new_id = id_factory

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def link(
        self, draft: RelationshipDraft, tables: Sequence[Table]
    ) -> tuple[tuple[Table, ...], Relationship]:
        """Resolve ``draft`` against ``tables``.

        Returns
        -------
        tuple
            The new table tuple and the relationship record to store.

        Raises
        ------
        InvalidEndpointsError
            If the draft's endpoints are unset or identical.
        MissingTableError
            If either endpoint does not exist.
        """
        parent, child = resolve_endpoints(draft, tables)
        if draft.type is RelationshipType.MANY_TO_MANY:
            return self._link_many_to_many(draft, parent, child, tables)
        return self._link_foreign_key(draft, parent, child, tables)

    def _link_many_to_many(
        self,
        draft: RelationshipDraft,
        parent: Table,
        child: Table,
        tables: Sequence[Table],
    ) -> tuple[tuple[Table, ...], Relationship]:
        join_name = unique_name(f"{parent.name}_{child.name}_join", tables)
        join_table = Table(
            id=self._new_id(),
            name=join_name,
            fields=(
                Field(
                    id=self._new_id(),
                    name="id",
                    type=ColumnType.INTEGER,
                    is_primary=True,
                    is_null=False,
                    auto_increment=True,
                ),
                self._join_key(parent),
                self._join_key(child),
            ),
        )
        relationship = Relationship(
            id=self._new_id(),
            parent_table_id=parent.id,
            child_table_id=child.id,
            type=RelationshipType.MANY_TO_MANY,
            join_table_id=join_table.id,
        )
        logger.debug(
            "Created join table %r for %s <-> %s", join_name, parent.name, child.name
        )
        return (*tables, join_table), relationship

    def _join_key(self, target: Table) -> Field:
        return Field(
            id=self._new_id(),
            name=default_foreign_key_name(target),
            type=ColumnType.INTEGER,
            is_null=False,
            is_foreign_key=True,
            references=target.id,
        )

    def _link_foreign_key(
        self,
        draft: RelationshipDraft,
        parent: Table,
        child: Table,
        tables: Sequence[Table],
    ) -> tuple[tuple[Table, ...], Relationship]:
        parent_pk = parent.primary_key
        fk_name = draft.child_field.strip() or default_foreign_key_name(parent)
        one_to_one = draft.type is RelationshipType.ONE_TO_ONE
        existing = child.field_named(fk_name)

        new_tables = tuple(tables)
        if existing is None:
            fk = Field(
                id=self._new_id(),
                name=fk_name,
                type=parent_pk.type if parent_pk is not None else ColumnType.INTEGER,
                is_null=False,
                is_unique=one_to_one,
                is_foreign_key=True,
                references=parent.id,
            )
            new_tables = _replace_table(tables, child.with_fields((*child.fields, fk)))
            logger.debug("Added foreign key %s.%s -> %s", child.name, fk_name, parent.name)
        elif one_to_one:
            promoted = tuple(
                _promote_unique(f) if names_equal(f.name, fk_name) else f
                for f in child.fields
            )
            new_tables = _replace_table(tables, child.with_fields(promoted))
            logger.debug("Marked %s.%s unique for one-to-one link", child.name, fk_name)

        relationship = Relationship(
            id=self._new_id(),
            parent_table_id=parent.id,
            child_table_id=child.id,
            type=draft.type,
            parent_field=parent_pk.name if parent_pk is not None else None,
            child_field=fk_name,
        )
        return new_tables, relationship

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def unlink(
        self, relationship: Relationship, tables: Sequence[Table]
    ) -> tuple[Table, ...]:
        """Return ``tables`` with the side effects of ``relationship`` reversed."""
        if relationship.type is RelationshipType.MANY_TO_MANY:
            return self._unlink_many_to_many(relationship, tables)

        child = _find(tables, relationship.child_table_id)
        if child is None:
            return tuple(tables)
        kept = tuple(
            f for f in child.fields if not f.references_table(relationship.parent_table_id)
        )
        logger.debug(
            "Removed %d foreign key(s) from %s",
            len(child.fields) - len(kept),
            child.name,
        )
        return _replace_table(tables, child.with_fields(kept))

    def _unlink_many_to_many(
        self, relationship: Relationship, tables: Sequence[Table]
    ) -> tuple[Table, ...]:
        if relationship.join_table_id is not None:
            join_table = _find(tables, relationship.join_table_id)
        else:
            join_table = self._guess_join_table(relationship, tables)
        if join_table is None:
            return tuple(tables)
        logger.debug("Dropping join table %r", join_table.name)
        return tuple(t for t in tables if t.id != join_table.id)

    def _guess_join_table(
        self, relationship: Relationship, tables: Sequence[Table]
    ) -> Table | None:
        # Documents exported before join tables were recorded on the
        # relationship: fall back to the first table holding a foreign
        # key to either endpoint.
        for table in tables:
            if table.references_table(relationship.parent_table_id) or table.references_table(
                relationship.child_table_id
            ):
                logger.warning(
                    "Relationship %r has no recorded join table; assuming %r. "
                    "The match is ambiguous when several tables reference the "
                    "same endpoints.",
                    relationship.id,
                    table.name,
                )
                return table
        return None


def _promote_unique(f: Field) -> Field:
    return replace(f, is_unique=True)
