"""CLI entry point. Registers all subcommands."""

from pathlib import Path
from typing import Optional

import typer

from ._common import console, resolve_config

app = typer.Typer(
    name="refdoc",
    help="refdoc - inspect API reference entities from a parser export",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """
    Inspect reference entities (functions, hooks, classes, methods).

    [bold cyan]Examples:[/bold cyan]

      refdoc show export.json 42 --full

      refdoc list export.json --type hook --search title

      refdoc source export.json 42
    """
    from ..logging_config import setup_logging

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if version:
        from .. import __version__

        console.print(f"[bold cyan]refdoc[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    settings = resolve_config(ctx)
    setup_logging(
        verbose=settings.verbosity == "verbose",
        quiet=settings.verbosity == "quiet",
        log_file=str(log_file) if log_file else None,
    )

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


# Import subcommands to register them
from .entities import show as _show, list_references as _list, source as _source  # noqa: F401, E402
from .cache import cache_info as _cache_info, cache_clear as _cache_clear  # noqa: F401, E402


def main() -> None:
    app()
