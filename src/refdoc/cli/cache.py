"""Source cache commands."""

import typer
from rich.table import Table

from ..cache import SourceCache
from . import app
from ._common import console, resolve_config


def _source_cache(ctx: typer.Context) -> SourceCache:
    config = resolve_config(ctx)
    return SourceCache(
        cache_dir=config.cache_dir,
        ttl_hours=config.cache_ttl_hours,
        enabled=config.cache_enabled,
    )


@app.command("cache-info")
def cache_info(ctx: typer.Context):
    """Show where extracted source snippets are cached and how many there are."""
    with _source_cache(ctx) as cache:
        stats = cache.stats()

    table = Table(title="Source cache", show_header=False)
    table.add_column("key", style="cyan")
    table.add_column("value")
    if not stats.get("enabled"):
        table.add_row("Status", "[red]Disabled[/red]")
    else:
        table.add_row("Status", "[green]Enabled[/green]")
        table.add_row("Directory", str(stats.get("directory", "N/A")))
        table.add_row("Snippets", str(stats.get("size", 0)))
        table.add_row("Size", f"{stats.get('volume', 0)} bytes")
        if "error" in stats:
            table.add_row("Error", f"[red]{stats['error']}[/red]")
    console.print(table)


@app.command("cache-clear")
def cache_clear(ctx: typer.Context):
    """Drop all cached source snippets."""
    with _source_cache(ctx) as cache:
        if not cache.enabled:
            console.print("[yellow]Cache is disabled[/yellow]")
            return
        removed = cache.clear()
    console.print(f"[green]Cache cleared[/green] ({removed} snippets removed)")
