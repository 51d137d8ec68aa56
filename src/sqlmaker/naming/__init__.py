"""SQLMaker name resolution.

Exports the single normalization function used for every
case-insensitive name comparison, and the collision-free name
generator built on top of it.
"""
from __future__ import annotations

from sqlmaker.naming.resolver import names_equal, normalize_name, unique_name

__all__ = [
    "normalize_name",
    "names_equal",
    "unique_name",
]
