"""Concrete SQL dialects."""
from __future__ import annotations

from sqlmaker.ddl.base import SqlDialect


class PostgresDialect(SqlDialect):
    """ANSI double-quoted identifiers."""

    @property
    def name(self) -> str:
        return "postgres"

    def quote(self, identifier: str) -> str:
        return f'"{identifier}"'


class SqliteDialect(PostgresDialect):
    """SQLite accepts the ANSI double-quote form."""

    @property
    def name(self) -> str:
        return "sqlite"


class MySqlDialect(SqlDialect):
    """Backtick-quoted identifiers."""

    @property
    def name(self) -> str:
        return "mysql"

    def quote(self, identifier: str) -> str:
        return f"`{identifier}`"
