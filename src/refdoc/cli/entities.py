"""Entity commands: show, list and source."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from ..reference import Reference
from ..reference_list import ReferenceList
from . import app
from ._common import console, export_argument, fail, open_factory


def _lookup(factory, record_id: int) -> Reference:
    reference = factory.resolve(record_id)
    if reference is None:
        fail(f"No reference with id {record_id}")
    return reference


def _format_value(value) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value) if value else ""
    return str(value)


@app.command()
def show(
    ctx: typer.Context,
    export: Path = export_argument(),
    record_id: int = typer.Argument(..., help="Record id"),
    full: bool = typer.Option(False, "--full", help="Include uses, used-by and methods"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Show one reference entity."""
    factory = open_factory(ctx, export)
    reference = _lookup(factory, record_id)
    data = reference.full_data() if full else reference.basic_data()

    if json_output:
        print(json.dumps(data, indent=2))
        return

    table = Table(title=f"{reference.title} ({reference.type})", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in data.items():
        if key in ("uses", "used_by", "methods"):
            value = ", ".join(str(item.get("signature", {}).get("name", "")) for item in value)
        table.add_row(key, Text(_format_value(value)))
    console.print(table)


@app.command("list")
def list_references(
    ctx: typer.Context,
    export: Path = export_argument(),
    type_: Optional[str] = typer.Option(None, "--type", "-t", help="Only this record type"),
    search: str = typer.Option("", "--search", "-s", help="Title substring"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Maximum rows"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List reference entities, ordered by title."""
    factory = open_factory(ctx, export)
    criteria = {"search": search, "orderby": "title", "limit": limit}
    if type_:
        criteria["type"] = type_
    references = ReferenceList(factory, criteria)

    if json_output:
        print(references.to_json(indent=2))
        return

    table = Table(title=f"{references.found} references")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Type", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Summary")
    for reference in references:
        table.add_row(
            str(reference.id), reference.type, Text(reference.title), Text(reference.summary)
        )
    console.print(table)


@app.command()
def source(
    ctx: typer.Context,
    export: Path = export_argument(),
    record_id: int = typer.Argument(..., help="Record id"),
    root: Optional[Path] = typer.Option(
        None, "--root", "-r", help="Source root (default: configured source_root)", file_okay=False
    ),
    force: bool = typer.Option(False, "--force", help="Re-read the source file"),
    plain: bool = typer.Option(False, "--plain", help="No syntax highlighting"),
):
    """Print the source code of a function, method or class."""
    overrides = {"source_root": str(root)} if root else {}
    factory = open_factory(ctx, export, **overrides)
    reference = _lookup(factory, record_id)

    if not reference.has_source_code():
        fail(f"{reference.type} references have no source code")

    code = reference.source_code(force_parse=force)
    if not code:
        fail(f"No source code available for {reference.title}")

    if plain:
        print(code, end="")
        return
    console.print(
        Syntax(code, "php", line_numbers=True, start_line=max(reference.start_line, 1))
    )
