"""Schema tree command."""

from __future__ import annotations

from typing import Optional, Tuple

import click
from rich.markup import escape
from rich.tree import Tree

from dbbrowser.browser import SchemaTreeBuilder
from dbbrowser.cli.utils import OUTPUT_FORMATS, console, load_manager, print_exception, print_json, print_status
from dbbrowser.db import ObjectKind, SchemaObject
from dbbrowser.exceptions import ConfigurationError

KIND_STYLES = {
    ObjectKind.DATABASE: "bold blue",
    ObjectKind.FOLDER: "yellow",
    ObjectKind.TABLE: "cyan",
    ObjectKind.VIEW: "green",
    ObjectKind.STORED_PROCEDURE: "magenta",
    ObjectKind.FUNCTION: "magenta",
    ObjectKind.COLUMN: "dim",
}


@click.command(name="tree")
@click.option("--connection", "-c", help="Connection to browse (default: default connection)")
@click.option("--expand", "-e", "paths", multiple=True,
              help="Node path to expand, e.g. main/Tables/users (repeatable)")
@click.option("--all", "expand_all", is_flag=True, help="Expand every folder, table and view")
@click.option("--output", "-o", "output_format", type=click.Choice(OUTPUT_FORMATS), default="table",
              help="Output format")
@click.pass_context
def tree_command(
    ctx: click.Context,
    connection: Optional[str],
    paths: Tuple[str, ...],
    expand_all: bool,
    output_format: str,
) -> None:
    """🌳 Browse the schema tree of a connection."""
    try:
        manager = load_manager(ctx, connection)
        descriptor = manager.selected
        if descriptor is None:
            raise ConfigurationError("No connections configured")
    except ConfigurationError as exc:
        print_status(f"Configuration Error: {exc}", "red")
        raise SystemExit(1) from exc

    builder = SchemaTreeBuilder(descriptor)
    missing = []
    try:
        with console.status("Loading database objects..."):
            builder.build()
            if expand_all:
                builder.expand_all()
            missing = [path for path in paths if builder.expand_path(path) is None]
    except Exception as exc:
        print_exception("Error browsing schema", exc, ctx.obj.get('verbose', False))
        raise SystemExit(1) from exc

    if output_format == "json":
        print_json({
            'connection': descriptor.name,
            'engine': descriptor.engine.value,
            'status': builder.status_message,
            'databases': [node.to_dict() for node in builder.nodes],
        })
        return

    for path in missing:
        print_status(f"No node found at '{path}'", "yellow")

    root = Tree(f"[bold]{escape(descriptor.name)}[/bold] ({descriptor.engine.value})")
    for node in builder.nodes:
        _add_branch(root, node)
    console.print(root)
    console.print()
    print_status(builder.status_message, "dim")


def _add_branch(parent: Tree, node: SchemaObject) -> None:
    style = KIND_STYLES.get(node.kind, "white")
    label = f"[{style}]{escape(node.qualified_name)}[/{style}]"
    if node.kind == ObjectKind.FOLDER and node.is_loaded:
        label += f" [dim]({len(node.children)})[/dim]"
    # collapsed branches keep their fetched children out of view
    branch = parent.add(label, expanded=node.is_expanded or node.kind == ObjectKind.DATABASE)
    for child in node.children:
        _add_branch(branch, child)
