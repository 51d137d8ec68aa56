"""sqlmaker — relational schema designer: schema store, relationship engine, DDL generator.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import sqlmaker
    from sqlmaker import RelationshipDraft, RelationshipType, SchemaStore

    store = SchemaStore()
    users = store.create_table(store.new_table_draft())   # table "table"

    draft = store.new_table_draft()
    draft.name = "orders"
    orders = store.create_table(draft)

    store.create_relationship(RelationshipDraft(users.id, orders.id))

    # Render DDL
    sql = sqlmaker.generate_ddl(store.state, "mysql")

    # Save and reload
    text = sqlmaker.serialize_project(store.state)
    assert sqlmaker.load_project(text) == store.state

    sqlmaker.__version__
    '0.1.0'
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sqlmaker.errors import (
    ErrorKind,
    InvalidEndpointsError,
    MissingRelationshipError,
    MissingTableError,
    ProjectImportError,
    SchemaError,
    ValidationError,
)
from sqlmaker.model import (
    ColumnType,
    Dialect,
    Field,
    FieldDraft,
    Relationship,
    RelationshipDraft,
    RelationshipType,
    SchemaState,
    Table,
    TableDraft,
)
from sqlmaker.naming import unique_name
from sqlmaker.store import SchemaStore

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from sqlmaker.validator.diagnostics import Diagnostic


def load_project(source: str | bytes | Mapping[str, Any]) -> SchemaState:
    """Load a project document into a ``SchemaState``.

    Parameters
    ----------
    source:
        JSON text or an already-decoded project document.

    Raises
    ------
    sqlmaker.ProjectImportError
        If the document is malformed.
    """
    from sqlmaker.project import load_project as _load_project

    return _load_project(source)


def serialize_project(state: SchemaState) -> str:
    """Serialize a ``SchemaState`` to a JSON project document."""
    from sqlmaker.project import serialize_project as _serialize_project

    return _serialize_project(state)


def generate_ddl(state: SchemaState, dialect: Dialect | str | None = None) -> str:
    """Render a ``SchemaState`` as ``CREATE TABLE`` statements.

    Parameters
    ----------
    state:
        The project to render.
    dialect:
        ``postgres``, ``mysql`` or ``sqlite``.  Defaults to the state's
        own dialect.
    """
    from sqlmaker.project import generate_ddl as _generate_ddl

    return _generate_ddl(state, dialect)


def check(state: SchemaState) -> list["Diagnostic"]:
    """Return warnings about a committed schema, such as dangling foreign keys."""
    from sqlmaker.validator import check_schema

    return check_schema(state)


__all__ = [
    "__version__",
    # Boundary operations
    "load_project",
    "serialize_project",
    "generate_ddl",
    "check",
    # Store and model
    "SchemaStore",
    "SchemaState",
    "Table",
    "Field",
    "Relationship",
    "TableDraft",
    "FieldDraft",
    "RelationshipDraft",
    "ColumnType",
    "RelationshipType",
    "Dialect",
    "unique_name",
    # Errors
    "ErrorKind",
    "SchemaError",
    "ValidationError",
    "InvalidEndpointsError",
    "MissingTableError",
    "MissingRelationshipError",
    "ProjectImportError",
]
