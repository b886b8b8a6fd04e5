"""Shared CLI utilities for DB Browser."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dbbrowser.config import ConnectionDescriptor, EngineKind, get_config
from dbbrowser.db import ConnectionManager, QueryResult

# Single console instance reused across CLI modules
console = Console()

MAX_CELL_WIDTH = 50
MAX_DISPLAY_ROWS = 1000

OUTPUT_FORMATS = ["table", "json"]


def configure_logging(level: str) -> None:
    """Route library logging through rich at the given level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


def print_status(message: str, style: str) -> None:
    """Print a status line whose text may come from the database."""
    console.print(f"[{style}]{escape(message)}[/{style}]")


def print_exception(message: str, error: Exception, verbose: bool = False) -> None:
    """Render a formatted exception message.

    Args:
        message: Friendly context message to display before the exception.
        error: Original exception instance.
        verbose: When True, render the full traceback for debugging.
    """
    print_status(f"{message}: {error}", "red")
    if verbose:
        console.print_exception()


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


def load_manager(ctx: click.Context, connection: Optional[str] = None) -> ConnectionManager:
    """Load the configured connections, selecting the requested one."""
    config = get_config(ctx.obj.get('config'))
    manager = ConnectionManager.from_config(config)
    if connection:
        manager.select(connection)
    return manager


def describe_target(descriptor: ConnectionDescriptor) -> str:
    if descriptor.file_path and descriptor.engine == EngineKind.SQLITE:
        return descriptor.file_path
    target = descriptor.server or ""
    if descriptor.port:
        target += f":{descriptor.port}"
    if descriptor.database:
        target += f"/{descriptor.database}"
    return target


def _clip(value: Optional[str]) -> str:
    if value is None:
        return "NULL"
    if len(value) > MAX_CELL_WIDTH:
        value = value[:MAX_CELL_WIDTH - 3] + "..."
    return escape(value)


def result_table(result: QueryResult) -> Table:
    """Render a tabular payload, capping cell width and row count."""
    table = Table(show_header=True, header_style="bold magenta")
    for column in result.columns or []:
        table.add_column(escape(column), overflow="fold")
    for row in (result.rows or [])[:MAX_DISPLAY_ROWS]:
        table.add_row(*[_clip(value) for value in row])
    return table
