"""SQLMaker relationship engine.

The engine owns the rules for how declaring or removing a relationship
changes the tables involved.  The ``SchemaStore`` is its only caller in
normal use.
"""
from __future__ import annotations

from sqlmaker.engine.relationships import (
    RelationshipEngine,
    default_foreign_key_name,
    resolve_endpoints,
)

__all__ = [
    "RelationshipEngine",
    "default_foreign_key_name",
    "resolve_endpoints",
]
