"""Shared CLI helpers."""

from pathlib import Path
import typer
from rich.console import Console

from ..config import RefdocConfig, load_config
from ..exceptions import RefdocError
from ..reference import ReferenceFactory
from ..store import load_export

console = Console()


def resolve_config(ctx: typer.Context, **overrides) -> RefdocConfig:
    """Build configuration from the global CLI options."""
    obj = ctx.obj or {}
    if obj.get("verbose"):
        overrides["verbose"] = True
    if obj.get("quiet"):
        overrides["quiet"] = True
    try:
        return load_config(config_file=obj.get("config"), **overrides)
    except RefdocError as e:
        fail(e)


def open_factory(ctx: typer.Context, export: Path, **overrides) -> ReferenceFactory:
    """Load an export and wrap it in a factory."""
    config = resolve_config(ctx, **overrides)
    try:
        store = load_export(export)
    except RefdocError as e:
        fail(e)
    return ReferenceFactory(store, config)


def fail(error: Exception, code: int = 1) -> None:
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(code)


def export_argument() -> Path:
    return typer.Argument(..., help="Parser export (JSON)", exists=True, dir_okay=False)
