"""Abstract base class for SQL dialects.

A dialect decides how identifiers are quoted.  Everything else in the
generated DDL is identical across dialects.
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class SqlDialect(ABC):
    """Abstract base class for DDL dialects.

    Subclasses must implement :meth:`name` and :meth:`quote`.

    Quoting does not escape quote characters inside the identifier;
    names are emitted as designed.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique short name for this dialect, e.g. ``"postgres"``."""

    @abstractmethod
    def quote(self, identifier: str) -> str:
        """Return ``identifier`` wrapped in this dialect's identifier quotes."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
