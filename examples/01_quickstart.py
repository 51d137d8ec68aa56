#!/usr/bin/env python3
"""Example: Quickstart — sqlmaker

Minimal working example: create two tables, relate them, render the
DDL for two dialects and round-trip the project document.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install sqlmaker
"""
from __future__ import annotations

import sqlmaker
from sqlmaker import ColumnType, RelationshipDraft, RelationshipType, SchemaStore


def main() -> None:
    print(f"sqlmaker version: {sqlmaker.__version__}")

    store = SchemaStore()

    # Step 1: Create tables from drafts
    draft = store.new_table_draft()
    draft.name = "authors"
    draft.add_field("name", ColumnType.VARCHAR, is_null=False)
    authors = store.create_table(draft)

    draft = store.new_table_draft()
    draft.name = "books"
    draft.add_field("title", ColumnType.TEXT, is_null=False)
    books = store.create_table(draft)

    draft = store.new_table_draft()
    draft.name = "genres"
    draft.add_field("label", ColumnType.VARCHAR, is_unique=True)
    genres = store.create_table(draft)
    print(f"Tables: {', '.join(t.name for t in store.tables)}")

    # Step 2: Relate them
    store.create_relationship(RelationshipDraft(authors.id, books.id))
    store.create_relationship(
        RelationshipDraft(books.id, genres.id, type=RelationshipType.MANY_TO_MANY)
    )
    print(f"Tables after linking: {', '.join(t.name for t in store.tables)}")

    # Step 3: Render DDL
    print()
    print(sqlmaker.generate_ddl(store.state))
    print(sqlmaker.generate_ddl(store.state, "mysql"))

    # Step 4: Save and reload
    text = sqlmaker.serialize_project(store.state)
    reloaded = sqlmaker.load_project(text)
    print(f"Round trip preserved the project: {reloaded == store.state}")


if __name__ == "__main__":
    main()
