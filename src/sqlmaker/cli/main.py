"""CLI entry point for sqlmaker.

Invoked as::

    sqlmaker [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m sqlmaker.cli.main

Every command works on one project file, ``sqlmaker_project.json`` by
default (override with ``--project`` or ``SQLMAKER_PROJECT``).  A
missing project file reads as an empty project.

Commands
--------
init        Create an empty project file
show        List tables, fields and relationships
table       Add, rename, edit or delete tables
rel         Add or delete relationships
dialect     Set the project's SQL dialect
ddl         Print or write the CREATE TABLE script
export      Dump the project as JSON or YAML
check       Report dangling foreign keys
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table as RichTable

from sqlmaker.errors import SchemaError
from sqlmaker.model.drafts import FieldDraft, RelationshipDraft
from sqlmaker.model.entities import (
    ColumnType,
    Dialect,
    Field,
    RelationshipType,
    SchemaState,
    Table,
)
from sqlmaker.project import DEFAULT_PROJECT_FILE, read_project, write_project
from sqlmaker.store import SchemaStore

console = Console()
err_console = Console(stderr=True)

_DIALECT_CHOICE = click.Choice([d.value for d in Dialect], case_sensitive=False)
_REL_TYPE_CHOICE = click.Choice([t.name.lower() for t in RelationshipType], case_sensitive=False)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def _project_path(ctx: click.Context) -> Path:
    return Path(ctx.obj["project"])


def _load_store(ctx: click.Context) -> SchemaStore:
    """Open the project file, exiting on error."""
    path = _project_path(ctx)
    if not path.exists():
        return SchemaStore()
    try:
        return SchemaStore.from_state(read_project(path))
    except SchemaError as exc:
        _fail(exc.message)


def _save_store(ctx: click.Context, store: SchemaStore) -> None:
    write_project(store.state, _project_path(ctx))


def _table_or_exit(store: SchemaStore, name: str) -> Table:
    table = store.find_table(name)
    if table is None:
        _fail(f"No table named {name!r}")
    return table


def parse_field_spec(spec: str) -> FieldDraft:
    """Parse ``name:TYPE[:pk][:notnull][:unique][:auto][:default=VALUE]``.

    Raises
    ------
    click.BadParameter
        If the spec is malformed.
    """
    parts = spec.split(":")
    if len(parts) < 2 or not parts[0].strip():
        raise click.BadParameter(f"expected name:TYPE[:flags], got {spec!r}")
    try:
        column_type = ColumnType.parse(parts[1])
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    draft = FieldDraft(name=parts[0].strip(), type=column_type)
    for flag in parts[2:]:
        key = flag.strip().lower()
        if key == "pk":
            draft.is_primary = True
            draft.is_null = False
        elif key == "notnull":
            draft.is_null = False
        elif key == "unique":
            draft.is_unique = True
        elif key == "auto":
            draft.auto_increment = True
        elif key.startswith("default="):
            draft.default = flag.strip()[len("default="):]
        else:
            raise click.BadParameter(f"unknown field flag {flag!r} in {spec!r}")
    return draft


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="sqlmaker")
@click.option(
    "--project",
    "-p",
    envvar="SQLMAKER_PROJECT",
    default=DEFAULT_PROJECT_FILE,
    show_default=True,
    help="Project file to read and update (env: SQLMAKER_PROJECT).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
@click.pass_context
def cli(ctx: click.Context, project: str, verbose: bool) -> None:
    """Relational schema designer: tables, relationships, DDL."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    ctx.ensure_object(dict)
    ctx.obj["project"] = project


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from sqlmaker import __version__

    table = RichTable(show_header=False, box=None)
    table.add_row("[bold]sqlmaker[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# init command
# ---------------------------------------------------------------------------


@cli.command(name="init")
@click.option("--dialect", type=_DIALECT_CHOICE, default="postgres", help="Project dialect")
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing project")
@click.pass_context
def init_command(ctx: click.Context, dialect: str, force: bool) -> None:
    """Create an empty project file."""
    path = _project_path(ctx)
    if path.exists() and not force:
        _fail(f"{path} already exists (use --force to overwrite)")
    write_project(SchemaState(dialect=Dialect(dialect.lower())), path)
    console.print(f"[green]Created[/green] {path}")


# ---------------------------------------------------------------------------
# show command
# ---------------------------------------------------------------------------


def _flags(f: Field) -> str:
    flags = []
    if f.is_primary:
        flags.append("PK")
    if f.is_foreign_key:
        flags.append("FK")
    if not f.is_null and not f.is_primary:
        flags.append("NOT NULL")
    if f.is_unique:
        flags.append("UNIQUE")
    if f.auto_increment:
        flags.append("AUTO")
    return " ".join(flags)


@cli.command(name="show")
@click.pass_context
def show_command(ctx: click.Context) -> None:
    """List tables, fields and relationships."""
    store = _load_store(ctx)

    if not store.tables:
        console.print("[dim]No tables yet[/dim]")
    for table in store.tables:
        view = RichTable(title=f"{table.name} ({len(table.fields)} fields)", show_lines=False)
        view.add_column("Field", style="bold")
        view.add_column("Type")
        view.add_column("Flags")
        view.add_column("Default")
        for f in table.fields:
            view.add_row(f.name, f.type.value, _flags(f), f.default)
        console.print(view)

    if store.relationships:
        names = {t.id: t.name for t in store.tables}
        rels = RichTable(title="Relationships")
        rels.add_column("Id", style="dim")
        rels.add_column("Parent")
        rels.add_column("Child")
        rels.add_column("Type")
        for r in store.relationships:
            rels.add_row(
                r.id,
                names.get(r.parent_table_id, "—"),
                names.get(r.child_table_id, "—"),
                r.type.name,
            )
        console.print(rels)
    else:
        console.print("[dim]No relationships yet[/dim]")

    console.print(
        f"\nTables: {len(store.tables)} • Relationships: {len(store.relationships)}"
    )


# ---------------------------------------------------------------------------
# table commands
# ---------------------------------------------------------------------------


@cli.group(name="table")
def table_group() -> None:
    """Add, rename, edit or delete tables."""


@table_group.command(name="add")
@click.argument("name")
@click.option(
    "--field",
    "-f",
    "field_specs",
    multiple=True,
    help="name:TYPE[:pk][:notnull][:unique][:auto][:default=VALUE] (repeatable)",
)
@click.pass_context
def table_add_command(ctx: click.Context, name: str, field_specs: tuple[str, ...]) -> None:
    """Create table NAME.

    Without --field the table gets an auto-increment integer primary key
    named id.
    """
    store = _load_store(ctx)
    draft = store.new_table_draft()
    draft.name = name
    if field_specs:
        draft.fields = [parse_field_spec(spec) for spec in field_specs]
    try:
        table = store.create_table(draft)
    except SchemaError as exc:
        _fail(str(exc))
    _save_store(ctx, store)
    console.print(f"[green]Table created[/green] {table.name} ({len(table.fields)} field(s))")


@table_group.command(name="rename")
@click.argument("name")
@click.argument("new_name")
@click.pass_context
def table_rename_command(ctx: click.Context, name: str, new_name: str) -> None:
    """Rename table NAME to NEW_NAME."""
    store = _load_store(ctx)
    table = _table_or_exit(store, name)
    draft = store.edit_table_draft(table.id)
    draft.name = new_name
    try:
        store.update_table(table.id, draft)
    except SchemaError as exc:
        _fail(str(exc))
    _save_store(ctx, store)
    console.print(f"[green]Table updated[/green] {table.name} → {new_name.strip()}")


@table_group.command(name="add-field")
@click.argument("name")
@click.argument("field_spec")
@click.pass_context
def table_add_field_command(ctx: click.Context, name: str, field_spec: str) -> None:
    """Append a field to table NAME.

    FIELD_SPEC is name:TYPE[:pk][:notnull][:unique][:auto][:default=VALUE].
    """
    store = _load_store(ctx)
    table = _table_or_exit(store, name)
    parsed = parse_field_spec(field_spec)
    draft = store.edit_table_draft(table.id)
    added = draft.add_field(parsed.name, parsed.type)
    draft.update_field(
        added.id,
        is_primary=parsed.is_primary,
        is_null=parsed.is_null,
        is_unique=parsed.is_unique,
        auto_increment=parsed.auto_increment,
        default=parsed.default,
    )
    try:
        store.update_table(table.id, draft)
    except SchemaError as exc:
        _fail(str(exc))
    _save_store(ctx, store)
    console.print(f"[green]Table updated[/green] {table.name}: added {parsed.name}")


@table_group.command(name="drop-field")
@click.argument("name")
@click.argument("field_name")
@click.pass_context
def table_drop_field_command(ctx: click.Context, name: str, field_name: str) -> None:
    """Remove field FIELD_NAME from table NAME."""
    store = _load_store(ctx)
    table = _table_or_exit(store, name)
    target = table.field_named(field_name)
    if target is None:
        _fail(f"Table {table.name!r} has no field named {field_name!r}")
    draft = store.edit_table_draft(table.id)
    draft.remove_field(target.id)
    try:
        store.update_table(table.id, draft)
    except SchemaError as exc:
        _fail(str(exc))
    _save_store(ctx, store)
    console.print(f"[green]Table updated[/green] {table.name}: removed {target.name}")


@table_group.command(name="rm")
@click.argument("name")
@click.pass_context
def table_rm_command(ctx: click.Context, name: str) -> None:
    """Delete table NAME and its relationships."""
    store = _load_store(ctx)
    table = _table_or_exit(store, name)
    store.delete_table(table.id)
    _save_store(ctx, store)
    console.print(f'[green]Deleted[/green] table "{table.name}" and related relationships')


# ---------------------------------------------------------------------------
# rel commands
# ---------------------------------------------------------------------------


@cli.group(name="rel")
def rel_group() -> None:
    """Add or delete relationships."""


@rel_group.command(name="add")
@click.argument("parent")
@click.argument("child")
@click.option(
    "--type",
    "rel_type",
    type=_REL_TYPE_CHOICE,
    default="one_to_many",
    show_default=True,
    help="Relationship type",
)
@click.option("--child-field", default="", help="Foreign-key column name on CHILD")
@click.pass_context
def rel_add_command(
    ctx: click.Context, parent: str, child: str, rel_type: str, child_field: str
) -> None:
    """Relate PARENT to CHILD (table names)."""
    store = _load_store(ctx)
    parent_table = _table_or_exit(store, parent)
    child_table = _table_or_exit(store, child)
    draft = RelationshipDraft(
        parent_table_id=parent_table.id,
        child_table_id=child_table.id,
        type=RelationshipType[rel_type.upper()],
        child_field=child_field,
    )
    try:
        relationship = store.create_relationship(draft)
    except SchemaError as exc:
        _fail(str(exc))
    _save_store(ctx, store)
    if relationship.join_table_id is not None:
        join = store.get_table(relationship.join_table_id)
        console.print(f'[green]Created join table[/green] "{join.name}"')
    else:
        console.print(
            f"[green]Relationship saved[/green] {parent_table.name}.{relationship.parent_field}"
            f" → {child_table.name}.{relationship.child_field}"
        )
    console.print(f"[dim]id: {relationship.id}[/dim]")


@rel_group.command(name="rm")
@click.argument("relationship_id")
@click.pass_context
def rel_rm_command(ctx: click.Context, relationship_id: str) -> None:
    """Delete relationship RELATIONSHIP_ID and undo its schema changes."""
    store = _load_store(ctx)
    try:
        store.delete_relationship(relationship_id)
    except SchemaError as exc:
        _fail(str(exc))
    _save_store(ctx, store)
    console.print("[green]Deleted relationship[/green]")


# ---------------------------------------------------------------------------
# dialect command
# ---------------------------------------------------------------------------


@cli.command(name="dialect")
@click.argument("dialect", type=_DIALECT_CHOICE)
@click.pass_context
def dialect_command(ctx: click.Context, dialect: str) -> None:
    """Set the project's SQL dialect."""
    store = _load_store(ctx)
    store.dialect = Dialect(dialect.lower())
    _save_store(ctx, store)
    console.print(f"[green]Dialect set to[/green] {store.dialect.value}")


# ---------------------------------------------------------------------------
# ddl command
# ---------------------------------------------------------------------------


@cli.command(name="ddl")
@click.option("--dialect", type=_DIALECT_CHOICE, default=None, help="Override the project dialect")
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
@click.pass_context
def ddl_command(ctx: click.Context, dialect: str | None, output: str | None) -> None:
    """Print or write the CREATE TABLE script."""
    from sqlmaker.project import generate_ddl, write_schema

    store = _load_store(ctx)
    chosen = Dialect(dialect.lower()) if dialect else None
    if output:
        path = write_schema(store.state, output, chosen)
        console.print(f"[green]Schema written to[/green] {path}")
    else:
        click.echo(generate_ddl(store.state, chosen))


# ---------------------------------------------------------------------------
# export command
# ---------------------------------------------------------------------------


@cli.command(name="export")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
@click.pass_context
def export_command(ctx: click.Context, output_format: str, output: str | None) -> None:
    """Dump the project as JSON or YAML."""
    from sqlmaker.model.serializer import ProjectSerializer

    store = _load_store(ctx)
    serializer = ProjectSerializer()
    if output_format.lower() == "json":
        text = serializer.to_json(store.state, indent=2)
        lang = "json"
    else:
        text = serializer.to_yaml(store.state)
        lang = "yaml"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Project written to[/green] {output}")
    else:
        console.print(Syntax(text, lang, line_numbers=False))


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.pass_context
def check_command(ctx: click.Context) -> None:
    """Report foreign keys whose target table no longer exists."""
    from sqlmaker.validator import check_schema

    store = _load_store(ctx)
    diagnostics = check_schema(store.state)
    if not diagnostics:
        console.print("[green]OK[/green] no issues found")
        return

    table = RichTable(title="Schema check", show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=8)
    table.add_column("Subject")
    table.add_column("Message")
    for d in diagnostics:
        table.add_row(
            f"[yellow]{d.severity.name}[/yellow]",
            d.code,
            d.subject,
            d.message + (f"\n[dim]hint: {d.suggestion}[/dim]" if d.suggestion else ""),
        )
    console.print(table)
    console.print(f"\n[bold]{len(diagnostics)}[/bold] warning(s)")


if __name__ == "__main__":
    cli()
