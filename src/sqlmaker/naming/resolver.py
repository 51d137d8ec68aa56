"""Collision-free identifier generation for tables and fields.

Table and field names are compared case-insensitively and ignoring
surrounding whitespace everywhere in SQLMaker.  ``normalize_name`` is the
one place that rule lives; validators, the relationship engine and the
store all go through it.

Usage
-----
::

    from sqlmaker.naming import unique_name

    unique_name("table", ["table", "Table_1"])   # -> "table_2"
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, Union


class Named(Protocol):
    """Anything with a ``name`` attribute (tables, fields, drafts)."""

    name: str


NamedItem = Union[Named, str]


def normalize_name(name: str) -> str:
    """Return the comparison key for ``name``: trimmed and lower-cased."""
    return name.strip().lower()


def names_equal(left: str, right: str) -> bool:
    """Return True if two names collide under case-insensitive comparison."""
    return normalize_name(left) == normalize_name(right)


def _name_of(item: NamedItem) -> str:
    return item if isinstance(item, str) else item.name


def unique_name(base: str, existing: Iterable[NamedItem]) -> str:
    """Return ``base`` or the first free ``base_N`` suffix.

    Parameters
    ----------
    base:
        Preferred name.
    existing:
        Items already occupying names.  Either plain strings or objects
        with a ``name`` attribute.

    Returns
    -------
    str
        ``base`` itself when no item collides with it, otherwise
        ``base_1``, ``base_2`` and so on, whichever comes first without
        a collision.
    """
    taken = {normalize_name(_name_of(item)) for item in existing}
    candidate = base
    suffix = 1
    while normalize_name(candidate) in taken:
        candidate = f"{base}_{suffix}"
        suffix += 1
    return candidate
