"""Identifier factories for tables, fields and relationships.

Every record the store commits gets an opaque string id from an
``IdFactory``: a zero-argument callable returning a new string.  The
store never inspects ids beyond equality, so any factory works as long
as it does not repeat itself within one store's lifetime.
"""
from __future__ import annotations

import itertools
import uuid
from typing import Callable

IdFactory = Callable[[], str]


def uuid_ids() -> str:
    """Return a random UUID4 string.  The default factory."""
    return str(uuid.uuid4())


class SequentialIds:
    """Deterministic factory producing ``<prefix>1``, ``<prefix>2``, ...

    Useful for reproducible exports and for tests that assert on ids.

    Parameters
    ----------
    prefix:
        Text prepended to every counter value.
    start:
        First counter value.
    """

    def __init__(self, prefix: str = "id", start: int = 1) -> None:
        self._prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self._prefix}{next(self._counter)}"

    def __repr__(self) -> str:
        return f"SequentialIds(prefix={self._prefix!r})"
