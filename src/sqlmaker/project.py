"""Project boundary: load, save and render whole projects.

These are the operations an outer layer (the CLI, an editor, a web
front-end) uses to move a schema in and out of SQLMaker.  Loading and
serializing work on ``SchemaState`` snapshots; edit them through a
``SchemaStore``::

    state = load_project(path.read_text())
    store = SchemaStore.from_state(state)
    ...
    path.write_text(serialize_project(store.state))
"""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from sqlmaker.ddl import generate
from sqlmaker.errors import ProjectImportError
from sqlmaker.model.entities import Dialect, SchemaState
from sqlmaker.model.serializer import ProjectSerializer

DEFAULT_PROJECT_FILE = "sqlmaker_project.json"
DEFAULT_SCHEMA_FILE = "schema.sql"

_serializer = ProjectSerializer()


def load_project(source: str | bytes | Mapping[str, Any]) -> SchemaState:
    """Load a project document.

    Parameters
    ----------
    source:
        JSON text, UTF-8 encoded JSON bytes, or an already-decoded
        document.

    Returns
    -------
    SchemaState
        The loaded project.

    Raises
    ------
    ProjectImportError
        If the document is not valid UTF-8 or JSON, ``tables`` is missing
        or not a sequence, or any record is malformed.
    """
    if isinstance(source, Mapping):
        return _serializer.from_dict(source)
    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ProjectImportError(f"invalid UTF-8: {exc}") from exc
    return _serializer.from_json(source)


def serialize_project(state: SchemaState, indent: int = 2) -> str:
    """Return ``state`` as a JSON project document."""
    return _serializer.to_json(state, indent=indent)


def generate_ddl(state: SchemaState, dialect: Dialect | str | None = None) -> str:
    """Render the tables of ``state`` as DDL.

    Parameters
    ----------
    state:
        The project to render.
    dialect:
        Target dialect.  Defaults to the project's own dialect.
    """
    return generate(state.tables, dialect if dialect is not None else state.dialect)


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def read_project(path: str | Path) -> SchemaState:
    """Load a project file.  ``.yaml``/``.yml`` files are read as YAML.

    Raises
    ------
    ProjectImportError
        If the file cannot be read or its content is not a valid project.
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ProjectImportError(f"invalid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ProjectImportError(f"cannot read {file_path}: {exc}") from exc
    if file_path.suffix.lower() in (".yaml", ".yml"):
        return _serializer.from_yaml(text)
    return _serializer.from_json(text)


def write_project(state: SchemaState, path: str | Path) -> Path:
    """Write ``state`` to ``path`` as JSON, or YAML for ``.yaml``/``.yml``."""
    file_path = Path(path)
    if file_path.suffix.lower() in (".yaml", ".yml"):
        text = _serializer.to_yaml(state)
    else:
        text = serialize_project(state) + "\n"
    file_path.write_text(text, encoding="utf-8")
    return file_path


def write_schema(
    state: SchemaState,
    path: str | Path = DEFAULT_SCHEMA_FILE,
    dialect: Dialect | str | None = None,
) -> Path:
    """Write the project's DDL to ``path`` and return the path."""
    file_path = Path(path)
    file_path.write_text(generate_ddl(state, dialect), encoding="utf-8")
    return file_path
