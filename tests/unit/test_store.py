"""Unit tests for sqlmaker.store — SchemaStore table and relationship
operations, drafts, and the no-partial-commit guarantee.
"""
from __future__ import annotations

import pytest

from sqlmaker.errors import (
    ErrorKind,
    InvalidEndpointsError,
    MissingRelationshipError,
    MissingTableError,
    ValidationError,
)
from sqlmaker.ids import SequentialIds
from sqlmaker.model.drafts import FieldDraft, RelationshipDraft, TableDraft
from sqlmaker.model.entities import ColumnType, Dialect, RelationshipType, SchemaState, Table
from sqlmaker.store import SchemaStore


def _rel(parent: Table, child: Table, type: RelationshipType = RelationshipType.ONE_TO_MANY) -> RelationshipDraft:  # noqa: A002
    return RelationshipDraft(parent_table_id=parent.id, child_table_id=child.id, type=type)


# ===========================================================================
# Drafts
# ===========================================================================


class TestNewTableDraft:
    def test_default_name_and_field(self, store: SchemaStore) -> None:
        draft = store.new_table_draft()
        assert draft.name == "table"
        assert len(draft.fields) == 1
        pk = draft.fields[0]
        assert pk.name == "id"
        assert pk.type is ColumnType.INTEGER
        assert pk.is_primary
        assert pk.auto_increment
        assert pk.id is not None

    def test_name_avoids_existing(self, store: SchemaStore) -> None:
        store.create_table(store.new_table_draft())
        assert store.new_table_draft().name == "table_1"

    def test_default_draft_commits(self, store: SchemaStore) -> None:
        table = store.create_table(store.new_table_draft())
        assert table.name == "table"
        assert len(store.tables) == 1
        assert store.relationships == ()


class TestNewRelationshipDraft:
    def test_needs_two_tables(self, store: SchemaStore, users: Table) -> None:
        with pytest.raises(InvalidEndpointsError, match="Need at least two tables"):
            store.new_relationship_draft()

    def test_defaults_first_to_second(self, store: SchemaStore, users: Table, orders: Table) -> None:
        draft = store.new_relationship_draft()
        assert draft.parent_table_id == users.id
        assert draft.child_table_id == orders.id
        assert draft.type is RelationshipType.ONE_TO_MANY
        assert draft.child_field == ""


# ===========================================================================
# create_table
# ===========================================================================


class TestCreateTable:
    def test_assigns_ids(self, store: SchemaStore) -> None:
        draft = TableDraft(name="users", fields=[FieldDraft.primary_key()])
        table = store.create_table(draft)
        assert table.id
        assert table.fields[0].id

    def test_keeps_existing_field_ids(self, store: SchemaStore) -> None:
        draft = store.new_table_draft()
        pk_id = draft.fields[0].id
        table = store.create_table(draft)
        assert table.fields[0].id == pk_id

    def test_trims_name(self, store: SchemaStore) -> None:
        table = store.create_table(TableDraft(name="  users ", fields=[FieldDraft.primary_key()]))
        assert table.name == "users"

    def test_appends_in_order(self, store: SchemaStore, users: Table, orders: Table) -> None:
        assert [t.name for t in store.tables] == ["users", "orders"]

    def test_preserves_field_order(self, store: SchemaStore) -> None:
        draft = TableDraft(
            name="t",
            fields=[FieldDraft(name="b"), FieldDraft.primary_key(), FieldDraft(name="a")],
        )
        table = store.create_table(draft)
        assert [f.name for f in table.fields] == ["b", "id", "a"]

    @pytest.mark.parametrize(
        ("draft", "kind"),
        [
            (TableDraft(name="", fields=[FieldDraft.primary_key()]), ErrorKind.EMPTY_NAME),
            (TableDraft(name="t", fields=[]), ErrorKind.NO_FIELDS),
            (TableDraft(name="t", fields=[FieldDraft(name="a")]), ErrorKind.NO_PRIMARY_KEY),
            (
                TableDraft(name="t", fields=[FieldDraft.primary_key(), FieldDraft(name="ID")]),
                ErrorKind.DUPLICATE_FIELD_NAME,
            ),
            (
                TableDraft(name="t", fields=[FieldDraft.primary_key(), FieldDraft(name="")]),
                ErrorKind.EMPTY_NAME,
            ),
        ],
    )
    def test_invalid_drafts_rejected_without_mutation(
        self, store: SchemaStore, users: Table, draft: TableDraft, kind: ErrorKind
    ) -> None:
        before = store.state
        with pytest.raises(ValidationError) as exc_info:
            store.create_table(draft)
        assert exc_info.value.kind is kind
        assert store.state == before

    def test_duplicate_table_name(self, store: SchemaStore, users: Table) -> None:
        with pytest.raises(ValidationError) as exc_info:
            store.create_table(TableDraft(name="USERS", fields=[FieldDraft.primary_key()]))
        assert exc_info.value.kind is ErrorKind.DUPLICATE_TABLE_NAME
        assert len(store.tables) == 1

    def test_validation_error_carries_all_diagnostics(self, store: SchemaStore) -> None:
        with pytest.raises(ValidationError) as exc_info:
            store.create_table(TableDraft(name="", fields=[]))
        kinds = [d.kind for d in exc_info.value.diagnostics]
        assert kinds == [ErrorKind.EMPTY_NAME, ErrorKind.NO_FIELDS]
        assert exc_info.value.message == "Table name required"

    def test_store_usable_after_rejection(self, store: SchemaStore) -> None:
        with pytest.raises(ValidationError):
            store.create_table(TableDraft(name="t", fields=[]))
        table = store.create_table(TableDraft(name="t", fields=[FieldDraft.primary_key()]))
        assert store.tables == (table,)

    def test_check_table_returns_values(self, store: SchemaStore, users: Table) -> None:
        diagnostics = store.check_table(TableDraft(name="users", fields=[]))
        assert [d.kind for d in diagnostics] == [
            ErrorKind.DUPLICATE_TABLE_NAME,
            ErrorKind.NO_FIELDS,
        ]
        assert len(store.tables) == 1


# ===========================================================================
# update_table
# ===========================================================================


class TestUpdateTable:
    def test_rename_keeps_id_and_position(
        self, store: SchemaStore, users: Table, orders: Table
    ) -> None:
        draft = store.edit_table_draft(users.id)
        draft.name = "people"
        updated = store.update_table(users.id, draft)
        assert updated.id == users.id
        assert [t.name for t in store.tables] == ["people", "orders"]

    def test_same_name_allowed(self, store: SchemaStore, users: Table) -> None:
        draft = store.edit_table_draft(users.id)
        draft.name = "Users"
        assert store.update_table(users.id, draft).name == "Users"

    def test_collision_with_other_table(self, store: SchemaStore, users: Table, orders: Table) -> None:
        draft = store.edit_table_draft(users.id)
        draft.name = "orders"
        with pytest.raises(ValidationError) as exc_info:
            store.update_table(users.id, draft)
        assert exc_info.value.kind is ErrorKind.DUPLICATE_TABLE_NAME
        assert store.get_table(users.id) == users

    def test_field_edits(self, store: SchemaStore, users: Table) -> None:
        draft = store.edit_table_draft(users.id)
        added = draft.add_field("age", ColumnType.INTEGER)
        draft.update_field(draft.fields[1].id, is_unique=True)
        updated = store.update_table(users.id, draft)
        assert [f.name for f in updated.fields] == ["id", "email", "age"]
        assert updated.fields[1].is_unique
        assert updated.fields[2].id == added.id

    def test_removing_primary_key_rejected(self, store: SchemaStore, users: Table) -> None:
        draft = store.edit_table_draft(users.id)
        draft.remove_field(users.fields[0].id)
        with pytest.raises(ValidationError) as exc_info:
            store.update_table(users.id, draft)
        assert exc_info.value.kind is ErrorKind.NO_PRIMARY_KEY
        assert store.get_table(users.id) == users

    def test_editing_draft_does_not_touch_store(self, store: SchemaStore, users: Table) -> None:
        draft = store.edit_table_draft(users.id)
        draft.name = "changed"
        draft.fields.clear()
        assert store.get_table(users.id) == users

    def test_unknown_table(self, store: SchemaStore) -> None:
        with pytest.raises(MissingTableError):
            store.update_table("nope", TableDraft(name="t", fields=[FieldDraft.primary_key()]))


# ===========================================================================
# delete_table
# ===========================================================================


class TestDeleteTable:
    def test_removes_table(self, store: SchemaStore, users: Table, orders: Table) -> None:
        store.delete_table(orders.id)
        assert store.tables == (users,)

    def test_removes_only_touching_relationships(
        self, store: SchemaStore, users: Table, orders: Table, tags: Table
    ) -> None:
        r1 = store.create_relationship(_rel(users, orders))
        r2 = store.create_relationship(_rel(orders, tags))
        r3 = store.create_relationship(_rel(tags, users))
        store.delete_table(users.id)
        assert store.relationships == (r2,)
        assert r1 not in store.relationships
        assert r3 not in store.relationships

    def test_leaves_dangling_foreign_keys(self, store: SchemaStore, users: Table, orders: Table) -> None:
        store.create_relationship(_rel(users, orders))
        store.delete_table(users.id)
        remaining = store.get_table(orders.id)
        fk = remaining.field_named("users_id")
        assert fk is not None
        assert fk.references == users.id

    def test_unknown_table(self, store: SchemaStore, users: Table) -> None:
        with pytest.raises(MissingTableError) as exc_info:
            store.delete_table("nope")
        assert exc_info.value.kind is ErrorKind.MISSING_TABLE
        assert store.tables == (users,)


# ===========================================================================
# Relationships through the store
# ===========================================================================


class TestStoreRelationships:
    def test_create_records_relationship(self, store: SchemaStore, users: Table, orders: Table) -> None:
        rel = store.create_relationship(_rel(users, orders))
        assert store.relationships == (rel,)
        assert store.get_relationship(rel.id) is rel

    def test_same_table_rejected(self, store: SchemaStore, users: Table) -> None:
        before = store.state
        with pytest.raises(InvalidEndpointsError):
            store.create_relationship(_rel(users, users))
        assert store.state == before

    def test_missing_table_rejected(self, store: SchemaStore, users: Table) -> None:
        before = store.state
        with pytest.raises(MissingTableError):
            store.create_relationship(RelationshipDraft(users.id, "ghost"))
        assert store.state == before

    def test_delete_relationship(self, store: SchemaStore, users: Table, orders: Table) -> None:
        rel = store.create_relationship(_rel(users, orders))
        store.delete_relationship(rel.id)
        assert store.relationships == ()
        assert store.get_table(orders.id).field_named("users_id") is None

    def test_delete_many_to_many_drops_relationships_on_join_table(
        self, store: SchemaStore, users: Table, orders: Table, tags: Table
    ) -> None:
        many = store.create_relationship(_rel(users, orders, RelationshipType.MANY_TO_MANY))
        join = store.get_table(many.join_table_id)  # type: ignore[arg-type]
        on_join = store.create_relationship(_rel(join, tags))
        unrelated = store.create_relationship(_rel(orders, tags))
        store.delete_relationship(many.id)
        assert on_join not in store.relationships
        assert store.relationships == (unrelated,)
        assert store.find_table(join.name) is None

    def test_delete_unknown_relationship(self, store: SchemaStore) -> None:
        with pytest.raises(MissingRelationshipError) as exc_info:
            store.delete_relationship("nope")
        assert exc_info.value.kind is ErrorKind.MISSING_RELATIONSHIP


# ===========================================================================
# Lookup and state
# ===========================================================================


class TestLookup:
    def test_find_table_case_insensitive(self, store: SchemaStore, users: Table) -> None:
        assert store.find_table(" USERS ") == users
        assert store.find_table("nobody") is None

    def test_get_table_missing(self, store: SchemaStore) -> None:
        with pytest.raises(MissingTableError):
            store.get_table("nope")

    def test_state_snapshot(self, store: SchemaStore, users: Table) -> None:
        store.dialect = Dialect.MYSQL
        state = store.state
        assert state == SchemaState(tables=(users,), relationships=(), dialect=Dialect.MYSQL)

    def test_from_state(self, store: SchemaStore, users: Table, orders: Table) -> None:
        copy = SchemaStore.from_state(store.state, id_factory=SequentialIds("n"))
        assert copy.state == store.state
        draft = copy.new_table_draft()
        draft.name = "extra"
        copy.create_table(draft)
        assert len(copy.tables) == 3
        assert len(store.tables) == 2


# ===========================================================================
# Walkthrough: users, orders, tags
# ===========================================================================


class TestWalkthrough:
    def test_users_orders_tags(self, store: SchemaStore) -> None:
        users_draft = store.new_table_draft()
        users_draft.name = "users"
        users = store.create_table(users_draft)
        assert (len(store.tables), len(store.relationships)) == (1, 0)

        orders = store.create_table(TableDraft(name="orders", fields=[FieldDraft.primary_key()]))
        assert len(store.tables) == 2

        one_to_many = store.create_relationship(_rel(users, orders))
        fk = store.get_table(orders.id).field_named("users_id")
        assert fk is not None
        assert fk.type is ColumnType.INTEGER
        assert fk.references == users.id
        assert not fk.is_null and not fk.is_unique
        assert (one_to_many.parent_field, one_to_many.child_field) == ("id", "users_id")

        tags = store.create_table(TableDraft(name="tags", fields=[FieldDraft.primary_key()]))
        store.create_relationship(_rel(users, tags, RelationshipType.MANY_TO_MANY))
        join = store.find_table("users_tags_join")
        assert join is not None
        assert [f.name for f in join.fields] == ["id", "users_id", "tags_id"]

        store.delete_table(users.id)
        assert store.relationships == ()
        assert store.get_table(orders.id).field_named("users_id") is not None
