#!/usr/bin/env python3
"""Example: Validation — sqlmaker

Shows how table drafts are checked before commit, how a rejected
commit leaves the store untouched, and how ``sqlmaker.check`` reports
foreign keys left dangling by a deleted table.

Usage:
    python examples/02_validation.py

Requirements:
    pip install sqlmaker
"""
from __future__ import annotations

import sqlmaker
from sqlmaker import FieldDraft, RelationshipDraft, SchemaStore, TableDraft, ValidationError


def main() -> None:
    store = SchemaStore()
    users = store.create_table(TableDraft(name="users", fields=[FieldDraft.primary_key()]))

    # Errors as values: nothing is committed
    bad = TableDraft(name="USERS", fields=[FieldDraft(name="email"), FieldDraft(name="Email")])
    for diagnostic in store.check_table(bad):
        print(f"  {diagnostic}")

    # Errors as exceptions
    try:
        store.create_table(bad)
    except ValidationError as exc:
        print(f"Rejected: {exc.message} ({exc.code})")
    print(f"Tables still: {[t.name for t in store.tables]}")

    # Dangling foreign keys
    orders = store.create_table(TableDraft(name="orders", fields=[FieldDraft.primary_key()]))
    store.create_relationship(RelationshipDraft(users.id, orders.id))
    store.delete_table(users.id)
    for diagnostic in sqlmaker.check(store.state):
        print(f"  {diagnostic}")


if __name__ == "__main__":
    main()
