"""CLI package.

The ``cli`` sub-package contains the Click application and all
command implementations.  Commands edit a project file through the
``SchemaStore``; they never change project documents directly.
"""
from __future__ import annotations
