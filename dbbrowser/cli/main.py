"""Main CLI entry point for DB Browser."""

from __future__ import annotations

import click

from dbbrowser import __version__
from dbbrowser.cli.commands.configuration import config_group
from dbbrowser.cli.commands.connections import connections_group
from dbbrowser.cli.commands.query import query_command
from dbbrowser.cli.commands.tree import tree_command
from dbbrowser.cli.utils import configure_logging, console
from dbbrowser.config import EnvironmentSettings


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version information")
@click.option("--config", type=click.Path(exists=True), help="Path to configuration file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, version: bool, config: str, verbose: bool) -> None:
    """DB Browser - browse schemas and run SQL across SQL Server, PostgreSQL, MySQL and SQLite."""
    ctx.ensure_object(dict)
    ctx.obj.update({"config": config, "verbose": verbose})

    settings = EnvironmentSettings()
    configure_logging("DEBUG" if verbose or settings.debug else settings.log_level)

    if version:
        console.print(f"DB Browser v{__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Browsing first, then environment tools.
COMMAND_REGISTRY = [
    connections_group,
    tree_command,
    query_command,
    config_group,
]

for command in COMMAND_REGISTRY:
    cli.add_command(command)


if __name__ == "__main__":
    cli()
