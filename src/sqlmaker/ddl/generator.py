"""Schema → ``CREATE TABLE`` text generator.

Output layout, for a single table in the postgres dialect::

    -- Generated by SQLMaker
    -- Dialect: postgres

    CREATE TABLE "orders" (
      "id" INTEGER PRIMARY KEY,
      "users_id" INTEGER NOT NULL,
      FOREIGN KEY ("users_id") REFERENCES "users"("id")
    );

Tables are emitted in collection order and columns in field order.  No
dependency sort is attempted: a table may reference one that is created
later in the same script.

Column modifiers always appear in the order ``PRIMARY KEY``,
``NOT NULL``, ``UNIQUE``, ``DEFAULT``.  Foreign-key constraint lines
follow the column lines; a foreign key whose target table no longer
exists gets no constraint line.
"""
from __future__ import annotations

from collections.abc import Sequence

from sqlmaker.ddl.base import SqlDialect
from sqlmaker.model.entities import Field, Table

HEADER = "-- Generated by SQLMaker"
INDENT = "  "


class DdlGenerator:
    """Render tables as DDL for one dialect.

    Usage
    -----
    ::

        gen = DdlGenerator(MySqlDialect())
        sql = gen.generate(store.tables)

    The generator holds no state besides its dialect; the same instance
    can render any number of schemas.
    """

    def __init__(self, dialect: SqlDialect) -> None:
        self._dialect = dialect

    @property
    def dialect(self) -> SqlDialect:
        return self._dialect

    def generate(self, tables: Sequence[Table]) -> str:
        """Return the full DDL script for ``tables``."""
        by_id = {t.id: t for t in tables}
        lines = [HEADER, f"-- Dialect: {self._dialect.name}", ""]
        for table in tables:
            lines.append(self.create_table(table, by_id))
        return "\n".join(lines)

    def create_table(self, table: Table, tables_by_id: dict[str, Table]) -> str:
        """Return one ``CREATE TABLE`` statement followed by a blank line."""
        q = self._dialect.quote
        definitions = [INDENT + self.column_definition(f) for f in table.fields]
        for fk in table.foreign_keys:
            target = tables_by_id.get(fk.references or "")
            if target is None:
                continue
            definitions.append(INDENT + self.foreign_key_constraint(fk, target))
        return f"CREATE TABLE {q(table.name)} (\n" + ",\n".join(definitions) + "\n);\n"

    def column_definition(self, f: Field) -> str:
        """Return ``<name> <TYPE> [modifiers]`` for one column."""
        parts = [f"{self._dialect.quote(f.name)} {f.type.value}"]
        if f.is_primary:
            parts.append("PRIMARY KEY")
        if not f.is_null and not f.is_primary:
            parts.append("NOT NULL")
        if f.is_unique:
            parts.append("UNIQUE")
        if f.default:
            parts.append(f"DEFAULT '{f.default}'")
        return " ".join(parts)

    def foreign_key_constraint(self, fk: Field, target: Table) -> str:
        """Return the ``FOREIGN KEY ... REFERENCES ...`` line for ``fk``.

        The referenced column is the target's first primary-key field, or
        ``id`` when the target has none marked.
        """
        q = self._dialect.quote
        pk_name = next((f.name for f in target.fields if f.is_primary), "id")
        return f"FOREIGN KEY ({q(fk.name)}) REFERENCES {q(target.name)}({q(pk_name)})"
