"""Ad-hoc query command."""

from __future__ import annotations

from typing import Optional

import click

from dbbrowser.browser import QueryExecutor
from dbbrowser.cli.utils import (
    MAX_DISPLAY_ROWS,
    OUTPUT_FORMATS,
    console,
    load_manager,
    print_json,
    print_status,
    result_table,
)
from dbbrowser.exceptions import ConfigurationError


@click.command(name="query")
@click.argument("statement", required=False)
@click.option("--connection", "-c", help="Connection to run against (default: default connection)")
@click.option("--file", "-f", "sql_file", type=click.File("r"), help="Read the statement from a file")
@click.option("--output", "-o", "output_format", type=click.Choice(OUTPUT_FORMATS), default="table",
              help="Output format")
@click.pass_context
def query_command(
    ctx: click.Context,
    statement: Optional[str],
    connection: Optional[str],
    sql_file,
    output_format: str,
) -> None:
    """▶️  Execute a single SQL statement."""
    if sql_file is not None:
        statement = sql_file.read()

    try:
        manager = load_manager(ctx, connection)
    except ConfigurationError as exc:
        print_status(f"Configuration Error: {exc}", "red")
        raise SystemExit(1) from exc

    executor = QueryExecutor(manager)
    with console.status("Executing query..."):
        result = executor.execute(statement or "")

    if result is None:
        print_status(executor.status_message, "red")
        raise SystemExit(1)

    if output_format == "json":
        print_json(result.to_dict())
        if not result.is_success:
            raise SystemExit(1)
        return

    if not result.is_success:
        print_status(executor.status_message, "red")
        raise SystemExit(1)

    if result.has_data:
        if result.row_count:
            console.print(result_table(result))
            if result.row_count > MAX_DISPLAY_ROWS:
                console.print(f"[dim]... showing first {MAX_DISPLAY_ROWS} of {result.row_count} rows[/dim]")
        else:
            console.print("[yellow]No results[/yellow]")

    print_status(executor.status_message, "green")
    print_status(executor.execution_time_message, "dim")
