"""
VoucherView Typer CLI Application

Command-line access to the same components the GUI uses: search a JSON
file of records, preview the windowing math and manage the durable cache.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from voucherview.cli.error_handler import handle_cli_error
from voucherview.cli.json_formatter import format_json_output
from voucherview.config import Settings, load_settings
from voucherview.core.query import QueryEngine
from voucherview.core.viewport import compute_visible_range, total_height
from voucherview.services import CacheStore, FileDurableStore, JsonFileCollectionSource
from voucherview.shared.constants import CLICommands, CLIDefaults, CLIHelp, ViewportDefaults
from voucherview.shared.logging import setup_structured_logger
from voucherview.shared.models.record import Record

__version__ = CLIDefaults.VERSION

console = Console()

app = typer.Typer(
    name=CLIDefaults.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)
cache_app = typer.Typer(help=CLIHelp.CACHE_HELP, no_args_is_help=True)
app.add_typer(cache_app, name=CLICommands.CACHE)


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=CLIHelp.CONFIG_HELP,
        dir_okay=False,
    ),
    log_level: str = typer.Option(CLIDefaults.LOG_LEVEL, "--log-level", help=CLIHelp.LOG_LEVEL_HELP),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help=CLIHelp.VERSION_HELP,
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Load settings and configure logging for every command."""
    try:
        settings = load_settings(config)
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, "main-callback")) from e

    setup_structured_logger(
        level=log_level,
        log_file=settings.logging.file,
        use_rich_console=settings.logging.rich_console,
    )
    ctx.obj = settings


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings()


def _echo_json(command: str, data: Any) -> None:
    typer.echo(format_json_output(success=True, command=command, data=data).decode("utf-8"))


def _records_table(records: list[Record]) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Voucher")
    table.add_column("Customer")
    table.add_column("Phone")
    table.add_column("Amount", justify="right")
    table.add_column("Date")
    for record in records:
        values = record.display_values()
        table.add_row(
            values["voucher_number"],
            values["customer_name"],
            values["phone_model"],
            values["amount"],
            values["date"],
        )
    return table


@app.command(CLICommands.SEARCH, help=CLIHelp.SEARCH_HELP)
def search_command(
    ctx: typer.Context,
    records_file: Path = typer.Argument(
        ...,
        help=CLIHelp.SEARCH_RECORDS_HELP,
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    query: str = typer.Argument(..., help=CLIHelp.SEARCH_QUERY_HELP),
    fields: list[str] | None = typer.Option(None, "--field", "-f", help=CLIHelp.SEARCH_FIELD_HELP),
    ceiling: int | None = typer.Option(None, "--ceiling", min=1, help=CLIHelp.SEARCH_CEILING_HELP),
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_OUTPUT_HELP),
) -> None:
    """Search a records file; an empty query lists every record."""
    settings = _settings(ctx)
    update: dict[str, Any] = {}
    if fields:
        update["search_fields"] = tuple(fields)
    if ceiling is not None:
        update["result_ceiling"] = ceiling
    query_settings = settings.query.model_copy(update=update)

    async def _run() -> tuple[list[Record], bool]:
        source = JsonFileCollectionSource({query_settings.collection_id: records_file})
        engine = QueryEngine(CacheStore(settings.cache), source, query_settings)
        result = await engine.run(query)
        if not result.active:
            return await engine.load_collection(), False
        return list(result.records), result.truncated

    try:
        records, truncated = asyncio.run(_run())
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, CLICommands.SEARCH, json_output=json_output)) from e

    if json_output:
        _echo_json(
            CLICommands.SEARCH,
            {
                "query": query,
                "count": len(records),
                "truncated": truncated,
                "records": [record.model_dump(mode="json", by_alias=True) for record in records],
            },
        )
        return

    if not records:
        console.print(f'[yellow]No voucher matches "{query.strip()}"[/yellow]')
        return
    console.print(_records_table(records))
    suffix = f" (showing first {query_settings.result_ceiling})" if truncated else ""
    console.print(f"[green]{len(records)} vouchers found{suffix}[/green]")


@app.command(CLICommands.WINDOW, help=CLIHelp.WINDOW_HELP)
def window_command(
    count: int = typer.Option(..., "--count", min=0, help="Number of items in the list"),
    scroll_top: float = typer.Option(0.0, "--scroll-top", help="Scroll offset in pixels"),
    container_height: float = typer.Option(..., "--container-height", min=0, help="Viewport height in pixels"),
    item_height: float = typer.Option(ViewportDefaults.ITEM_HEIGHT, "--item-height", help="Row height in pixels"),
    buffer: int = typer.Option(ViewportDefaults.BUFFER_SIZE, "--buffer", min=0, help="Rows beyond each edge"),
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_OUTPUT_HELP),
) -> None:
    """Print the rendered index range for the given geometry."""
    try:
        visible = compute_visible_range(scroll_top, container_height, item_height, count, buffer)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--item-height") from e

    data = {
        "start": visible.start,
        "end": visible.end,
        "rendered": len(visible),
        "empty": visible.is_empty,
        "offset": 0.0 if visible.is_empty else visible.start * item_height,
        "total_height": total_height(count, item_height),
    }
    if json_output:
        _echo_json(CLICommands.WINDOW, data)
        return

    if visible.is_empty:
        console.print("Empty list: nothing to render")
        return
    console.print(f"Render items {visible.start}..{visible.end} ({len(visible)} rows)")
    console.print(f"Block offset: {data['offset']:g}px, total height: {data['total_height']:g}px")


def _open_cache(settings: Settings, cache_dir: Path | None) -> tuple[CacheStore, FileDurableStore]:
    directory = cache_dir or Path(settings.cache.durable_dir or CLIDefaults.DEFAULT_CACHE_DIR)
    durable = FileDurableStore(directory)
    return CacheStore(settings.cache, durable=durable), durable


@cache_app.command(CLICommands.CACHE_STATS)
def cache_stats_command(
    ctx: typer.Context,
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help=CLIHelp.CACHE_DIR_HELP, file_okay=False),
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_OUTPUT_HELP),
) -> None:
    """Show durable entries and which of them are still valid."""
    settings = _settings(ctx)
    try:
        cache, durable = _open_cache(settings, cache_dir)
        namespace = cache.namespace
        stored = [key[len(namespace) :] for key in durable.keys(namespace)]
        valid = [key for key in stored if cache.has(key)]
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, CLICommands.CACHE_STATS, json_output=json_output)) from e

    stats = cache.stats()
    if json_output:
        _echo_json(
            CLICommands.CACHE_STATS,
            {
                "directory": str(durable.directory),
                "stored": len(stored),
                "valid": len(valid),
                "max_entries": stats.max_size,
                "keys": valid,
            },
        )
        return

    table = Table(title=f"Cache {durable.directory}", show_header=True, header_style="bold cyan")
    table.add_column("Key")
    table.add_column("Status")
    for key in stored:
        table.add_row(key, "valid" if key in valid else "expired")
    console.print(table)
    console.print(f"{len(valid)} valid of {len(stored)} stored (max {stats.max_size})")


@cache_app.command(CLICommands.CACHE_CLEAR)
def cache_clear_command(
    ctx: typer.Context,
    cache_dir: Path | None = typer.Option(None, "--cache-dir", help=CLIHelp.CACHE_DIR_HELP, file_okay=False),
) -> None:
    """Remove every durable entry in the cache namespace."""
    settings = _settings(ctx)
    try:
        cache, durable = _open_cache(settings, cache_dir)
        removed = len(durable.keys(cache.namespace))
        cache.clear()
    except Exception as e:  # noqa: BLE001
        raise typer.Exit(handle_cli_error(e, CLICommands.CACHE_CLEAR)) from e
    console.print(f"Removed {removed} cache entries from {durable.directory}")


@app.command(CLICommands.GUI, help=CLIHelp.GUI_HELP)
def gui_command(
    ctx: typer.Context,
    records_file: Path = typer.Argument(
        ...,
        help=CLIHelp.SEARCH_RECORDS_HELP,
        exists=True,
        dir_okay=False,
        readable=True,
    ),
) -> None:
    """Open the windowed record list."""
    # Qt is only loaded when the window is requested
    from voucherview.gui import run_gui

    raise typer.Exit(run_gui(_settings(ctx), records_file))
