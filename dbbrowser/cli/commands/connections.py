"""Connection listing and testing commands."""

from __future__ import annotations

from typing import Optional

import click
from rich.markup import escape
from rich.table import Table

from dbbrowser.browser import QueryExecutor
from dbbrowser.cli.utils import console, describe_target, load_manager, print_status
from dbbrowser.exceptions import ConfigurationError


@click.group(name="connections")
def connections_group() -> None:
    """🔌 Configured connections."""
    pass


@connections_group.command(name="list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """List configured connections."""
    try:
        manager = load_manager(ctx)
    except ConfigurationError as exc:
        print_status(f"Configuration Error: {exc}", "red")
        raise SystemExit(1) from exc

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Engine", style="green")
    table.add_column("Target", style="white")
    table.add_column("Default", style="blue")

    for descriptor in manager:
        is_default = "✓" if descriptor is manager.selected else ""
        table.add_row(
            escape(descriptor.name), descriptor.engine.value, escape(describe_target(descriptor)), is_default
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(manager)} connection(s)[/dim]")


@connections_group.command(name="test")
@click.option("--connection", "-c", help="Connection to test (default: all)")
@click.pass_context
def test_command(ctx: click.Context, connection: Optional[str]) -> None:
    """Test one or all configured connections."""
    try:
        manager = load_manager(ctx, connection)
    except ConfigurationError as exc:
        print_status(f"Configuration Error: {exc}", "red")
        raise SystemExit(1) from exc

    console.print("[bold blue]Testing Connections[/bold blue]\n")
    targets = [manager.selected] if connection else manager.connections
    executor = QueryExecutor(manager)
    failures = 0

    for descriptor in targets:
        manager.selected = descriptor
        success = executor.test_connection()
        failures += 0 if success else 1
        status_color = "green" if success else "red"
        console.print(f"Connection: [cyan]{escape(descriptor.name)}[/cyan] ({descriptor.engine.value})")
        console.print(f"Status: [{status_color}]{escape(executor.status_message)}[/{status_color}]\n")

    if failures:
        raise SystemExit(1)
