"""SQLMaker DDL generation — renders a schema as ``CREATE TABLE`` text.

Public API
----------
The stable surface is the ``generate`` function, ``available_dialects``
and the ``SqlDialect`` base class.

Example
-------
::

    from sqlmaker.ddl import generate

    sql = generate(store.tables, dialect="mysql")
"""
from __future__ import annotations

from collections.abc import Sequence

from sqlmaker.ddl.base import SqlDialect
from sqlmaker.ddl.dialects import MySqlDialect, PostgresDialect, SqliteDialect
from sqlmaker.ddl.generator import DdlGenerator
from sqlmaker.model.entities import Dialect, Table

_REGISTRY: dict[str, type[SqlDialect]] = {
    "postgres": PostgresDialect,
    "mysql": MySqlDialect,
    "sqlite": SqliteDialect,
}


def get_dialect(dialect: Dialect | str) -> SqlDialect:
    """Return a dialect instance for a ``Dialect`` member or its name.

    Raises
    ------
    ValueError
        If ``dialect`` is not a registered dialect name.
    """
    key = dialect.value if isinstance(dialect, Dialect) else dialect.strip().lower()
    if key not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise ValueError(f"Unknown dialect {dialect!r}. Available dialects: {available}")
    return _REGISTRY[key]()


def generate(tables: Sequence[Table], dialect: Dialect | str = Dialect.POSTGRES) -> str:
    """Render ``tables`` as a DDL script for ``dialect``.

    Parameters
    ----------
    tables:
        Committed tables, in the order their statements should appear.
    dialect:
        Target dialect, as a ``Dialect`` member or its name.

    Returns
    -------
    str
        The DDL script, starting with a two-line comment header.

    Raises
    ------
    ValueError
        If ``dialect`` is not a registered dialect.
    """
    return DdlGenerator(get_dialect(dialect)).generate(tables)


def available_dialects() -> list[str]:
    """Return the list of registered dialect names."""
    return sorted(_REGISTRY)


__all__ = [
    "generate",
    "get_dialect",
    "available_dialects",
    "DdlGenerator",
    "SqlDialect",
    "PostgresDialect",
    "MySqlDialect",
    "SqliteDialect",
]
