"""Shared test fixtures for sqlmaker.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from collections.abc import Callable

import pytest

from sqlmaker.ids import SequentialIds
from sqlmaker.model.drafts import FieldDraft
from sqlmaker.model.entities import ColumnType, Table
from sqlmaker.store import SchemaStore


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def store() -> SchemaStore:
    """An empty store with deterministic ids (``id1``, ``id2``, ...)."""
    return SchemaStore(id_factory=SequentialIds())


@pytest.fixture()
def make_table(store: SchemaStore) -> Callable[..., Table]:
    """Return a helper committing a table with an ``id`` primary key plus extra fields."""

    def _make(name: str, *extra: FieldDraft) -> Table:
        draft = store.new_table_draft()
        draft.name = name
        draft.fields.extend(extra)
        return store.create_table(draft)

    return _make


@pytest.fixture()
def users(make_table: Callable[..., Table]) -> Table:
    return make_table("users", FieldDraft(name="email", type=ColumnType.VARCHAR))


@pytest.fixture()
def orders(make_table: Callable[..., Table], users: Table) -> Table:
    return make_table("orders", FieldDraft(name="total", type=ColumnType.DECIMAL))


@pytest.fixture()
def tags(make_table: Callable[..., Table], orders: Table) -> Table:
    return make_table("tags")
