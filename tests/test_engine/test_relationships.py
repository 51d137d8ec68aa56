"""Tests for sqlmaker.engine — relationship side effects on tables.

Covers:
  1. One-to-many: foreign-key insertion, typing, idempotence.
  2. One-to-one: unique foreign keys and promotion of existing columns.
  3. Many-to-many: join-table synthesis and naming.
  4. Endpoint errors.
  5. Reversal on delete, including documents without a recorded join table.
"""
from __future__ import annotations

import logging
from collections.abc import Callable

import pytest

from sqlmaker.engine import RelationshipEngine, default_foreign_key_name, resolve_endpoints
from sqlmaker.errors import InvalidEndpointsError, MissingTableError
from sqlmaker.ids import SequentialIds
from sqlmaker.model.drafts import FieldDraft, RelationshipDraft
from sqlmaker.model.entities import (
    ColumnType,
    Field,
    Relationship,
    RelationshipType,
    Table,
)
from sqlmaker.store import SchemaStore


def _link(
    store: SchemaStore,
    parent: Table,
    child: Table,
    type: RelationshipType = RelationshipType.ONE_TO_MANY,  # noqa: A002
    child_field: str = "",
) -> Relationship:
    return store.create_relationship(
        RelationshipDraft(parent.id, child.id, type=type, child_field=child_field)
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_default_foreign_key_name_lowercases(self) -> None:
        table = Table(id="t", name="Users")
        assert default_foreign_key_name(table) == "users_id"

    def test_resolve_endpoints(self, users: Table, orders: Table) -> None:
        parent, child = resolve_endpoints(
            RelationshipDraft(users.id, orders.id), (users, orders)
        )
        assert parent is users
        assert child is orders

    @pytest.mark.parametrize(
        ("parent_id", "child_id"),
        [("", "b"), ("a", ""), ("", ""), ("a", "a")],
    )
    def test_invalid_endpoints(self, parent_id: str, child_id: str) -> None:
        tables = (Table(id="a", name="a"), Table(id="b", name="b"))
        with pytest.raises(InvalidEndpointsError, match="Invalid parent/child tables"):
            resolve_endpoints(RelationshipDraft(parent_id, child_id), tables)

    def test_missing_parent(self) -> None:
        tables = (Table(id="b", name="b"),)
        with pytest.raises(MissingTableError, match="Parent table missing"):
            resolve_endpoints(RelationshipDraft("a", "b"), tables)

    def test_missing_child(self) -> None:
        tables = (Table(id="a", name="a"),)
        with pytest.raises(MissingTableError, match="Child table missing"):
            resolve_endpoints(RelationshipDraft("a", "b"), tables)


# ---------------------------------------------------------------------------
# ONE_TO_MANY
# ---------------------------------------------------------------------------


class TestOneToMany:
    def test_adds_foreign_key(self, store: SchemaStore, users: Table, orders: Table) -> None:
        rel = _link(store, users, orders)
        child = store.get_table(orders.id)
        assert [f.name for f in child.fields] == ["id", "total", "users_id"]
        fk = child.fields[-1]
        assert fk.is_foreign_key
        assert fk.references == users.id
        assert not fk.is_null
        assert not fk.is_unique
        assert rel.parent_field == "id"
        assert rel.child_field == "users_id"

    def test_parent_untouched(self, store: SchemaStore, users: Table, orders: Table) -> None:
        _link(store, users, orders)
        assert store.get_table(users.id) == users

    def test_foreign_key_typed_like_parent_key(
        self, store: SchemaStore, make_table: Callable[..., Table]
    ) -> None:
        draft = store.new_table_draft()
        draft.name = "countries"
        draft.fields = [FieldDraft(name="code", type=ColumnType.VARCHAR, is_primary=True)]
        countries = store.create_table(draft)
        cities = make_table("cities")
        rel = _link(store, countries, cities)
        fk = store.get_table(cities.id).field_named("countries_id")
        assert fk is not None
        assert fk.type is ColumnType.VARCHAR
        assert rel.parent_field == "code"

    def test_existing_field_left_alone(self, store: SchemaStore, users: Table, orders: Table) -> None:
        _link(store, users, orders)
        before = store.get_table(orders.id)
        rel = _link(store, users, orders)
        assert store.get_table(orders.id) == before
        assert len(store.relationships) == 2
        assert rel.child_field == "users_id"

    def test_existing_field_matched_case_insensitively(
        self, store: SchemaStore, make_table: Callable[..., Table], users: Table
    ) -> None:
        posts = make_table("posts", FieldDraft(name="Users_ID", type=ColumnType.INTEGER))
        _link(store, users, posts)
        assert len(store.get_table(posts.id).fields) == 2

    def test_custom_child_field(self, store: SchemaStore, users: Table, orders: Table) -> None:
        rel = _link(store, users, orders, child_field="  buyer_id ")
        child = store.get_table(orders.id)
        assert child.field_named("buyer_id") is not None
        assert child.field_named("users_id") is None
        assert rel.child_field == "buyer_id"

    def test_parent_without_fields_defaults_to_integer(
        self, store: SchemaStore, orders: Table
    ) -> None:
        bare = Table(id="bare", name="Bare")
        engine = RelationshipEngine(SequentialIds("e"))
        tables, rel = engine.link(RelationshipDraft("bare", orders.id), (bare, *store.tables))
        child = next(t for t in tables if t.id == orders.id)
        fk = child.field_named("bare_id")
        assert fk is not None
        assert fk.type is ColumnType.INTEGER
        assert rel.parent_field is None


# ---------------------------------------------------------------------------
# ONE_TO_ONE
# ---------------------------------------------------------------------------


class TestOneToOne:
    def test_adds_unique_foreign_key(self, store: SchemaStore, users: Table, orders: Table) -> None:
        _link(store, users, orders, RelationshipType.ONE_TO_ONE)
        fk = store.get_table(orders.id).field_named("users_id")
        assert fk is not None
        assert fk.is_unique
        assert not fk.is_null

    def test_promotes_existing_field(
        self, store: SchemaStore, make_table: Callable[..., Table], users: Table
    ) -> None:
        profiles = make_table("profiles", FieldDraft(name="users_id", type=ColumnType.INTEGER))
        _link(store, users, profiles, RelationshipType.ONE_TO_ONE)
        updated = store.get_table(profiles.id)
        assert len(updated.fields) == len(profiles.fields)
        assert updated.field_named("users_id").is_unique  # type: ignore[union-attr]

    def test_promotion_keeps_other_attributes(
        self, store: SchemaStore, make_table: Callable[..., Table], users: Table
    ) -> None:
        profiles = make_table("profiles", FieldDraft(name="users_id", default="7"))
        original = profiles.field_named("users_id")
        _link(store, users, profiles, RelationshipType.ONE_TO_ONE)
        promoted = store.get_table(profiles.id).field_named("users_id")
        assert promoted is not None and original is not None
        assert promoted.id == original.id
        assert promoted.default == "7"
        assert promoted.type is original.type


# ---------------------------------------------------------------------------
# MANY_TO_MANY
# ---------------------------------------------------------------------------


class TestManyToMany:
    def test_creates_join_table(self, store: SchemaStore, users: Table, orders: Table) -> None:
        rel = _link(store, users, orders, RelationshipType.MANY_TO_MANY)
        assert len(store.tables) == 3
        join = store.tables[-1]
        assert join.name == "users_orders_join"
        assert rel.join_table_id == join.id
        assert [f.name for f in join.fields] == ["id", "users_id", "orders_id"]

    def test_join_table_fields(self, store: SchemaStore, users: Table, orders: Table) -> None:
        _link(store, users, orders, RelationshipType.MANY_TO_MANY)
        pk, to_parent, to_child = store.tables[-1].fields
        assert pk.is_primary and pk.auto_increment and not pk.is_null
        assert pk.type is ColumnType.INTEGER
        for fk, target in ((to_parent, users), (to_child, orders)):
            assert fk.is_foreign_key
            assert fk.references == target.id
            assert fk.type is ColumnType.INTEGER
            assert not fk.is_null

    def test_endpoints_unchanged(self, store: SchemaStore, users: Table, orders: Table) -> None:
        _link(store, users, orders, RelationshipType.MANY_TO_MANY)
        assert store.get_table(users.id) == users
        assert store.get_table(orders.id) == orders

    def test_relationship_has_no_field_names(
        self, store: SchemaStore, users: Table, orders: Table
    ) -> None:
        rel = _link(store, users, orders, RelationshipType.MANY_TO_MANY)
        assert rel.parent_field is None
        assert rel.child_field is None

    def test_join_names_stay_unique(self, store: SchemaStore, users: Table, orders: Table) -> None:
        _link(store, users, orders, RelationshipType.MANY_TO_MANY)
        _link(store, users, orders, RelationshipType.MANY_TO_MANY)
        names = [t.name for t in store.tables]
        assert names == ["users", "orders", "users_orders_join", "users_orders_join_1"]


# ---------------------------------------------------------------------------
# Reversal
# ---------------------------------------------------------------------------


class TestUnlink:
    def test_one_to_many_removes_foreign_key(
        self, store: SchemaStore, users: Table, orders: Table
    ) -> None:
        rel = _link(store, users, orders)
        store.delete_relationship(rel.id)
        assert store.get_table(orders.id) == orders

    def test_one_to_one_removes_promoted_field(
        self, store: SchemaStore, make_table: Callable[..., Table], users: Table
    ) -> None:
        profiles = make_table(
            "profiles",
            FieldDraft(name="users_id", is_foreign_key=True, references=users.id),
        )
        rel = _link(store, users, profiles, RelationshipType.ONE_TO_ONE)
        store.delete_relationship(rel.id)
        assert store.get_table(profiles.id).field_named("users_id") is None

    def test_many_to_many_drops_recorded_join_table(
        self, store: SchemaStore, users: Table, orders: Table
    ) -> None:
        first = _link(store, users, orders, RelationshipType.MANY_TO_MANY)
        _link(store, users, orders, RelationshipType.MANY_TO_MANY)
        store.delete_relationship(first.id)
        assert [t.name for t in store.tables] == ["users", "orders", "users_orders_join_1"]

    def test_missing_join_table_is_noop(self, users: Table, orders: Table) -> None:
        engine = RelationshipEngine()
        rel = Relationship(
            id="r",
            parent_table_id=users.id,
            child_table_id=orders.id,
            type=RelationshipType.MANY_TO_MANY,
            join_table_id="gone",
        )
        assert engine.unlink(rel, (users, orders)) == (users, orders)

    def test_legacy_document_falls_back_with_warning(
        self, users: Table, orders: Table, caplog: pytest.LogCaptureFixture
    ) -> None:
        join = Table(
            id="j",
            name="users_orders_join",
            fields=(
                Field(id="j1", name="id", type=ColumnType.INTEGER, is_primary=True),
                Field(id="j2", name="users_id", is_foreign_key=True, references=users.id),
                Field(id="j3", name="orders_id", is_foreign_key=True, references=orders.id),
            ),
        )
        rel = Relationship(
            id="legacy",
            parent_table_id=users.id,
            child_table_id=orders.id,
            type=RelationshipType.MANY_TO_MANY,
        )
        engine = RelationshipEngine()
        with caplog.at_level(logging.WARNING, logger="sqlmaker.engine.relationships"):
            remaining = engine.unlink(rel, (users, orders, join))
        assert remaining == (users, orders)
        assert "no recorded join table" in caplog.text

    def test_child_gone_is_noop(self, users: Table) -> None:
        engine = RelationshipEngine()
        rel = Relationship(
            id="r",
            parent_table_id=users.id,
            child_table_id="gone",
            type=RelationshipType.ONE_TO_MANY,
        )
        assert engine.unlink(rel, (users,)) == (users,)
