"""Tests for lazy schema tree population."""

from __future__ import annotations

import threading
from typing import List
from unittest.mock import MagicMock

import pytest

from dbbrowser.browser.tree import FOLDER_NAMES, SchemaTreeBuilder
from dbbrowser.config.models import ConnectionDescriptor, EngineKind
from dbbrowser.db.base import BaseAdapter, IntrospectionResult
from dbbrowser.db.models import LoadState, ObjectKind, SchemaObject


def table(name: str, schema: str = "dbo") -> SchemaObject:
    return SchemaObject(name=name, schema=schema, kind=ObjectKind.TABLE)


@pytest.fixture()
def adapter() -> MagicMock:
    adapter = MagicMock(spec=BaseAdapter)
    adapter.list_databases.return_value = IntrospectionResult(["Sales", "HR"])
    adapter.list_tables.side_effect = lambda descriptor, database: IntrospectionResult(
        [table(f"{database.lower()}_orders"), table(f"{database.lower()}_customers")]
    )
    adapter.list_views.side_effect = lambda descriptor, database: IntrospectionResult(
        [SchemaObject(name="v_totals", kind=ObjectKind.VIEW)]
    )
    adapter.list_stored_procedures.return_value = IntrospectionResult(
        [SchemaObject(name="usp_refresh", kind=ObjectKind.STORED_PROCEDURE)]
    )
    adapter.list_columns.side_effect = lambda descriptor, database, table_name: IntrospectionResult(
        [SchemaObject(name="id (int)", kind=ObjectKind.COLUMN)]
    )
    return adapter


@pytest.fixture()
def builder(adapter: MagicMock) -> SchemaTreeBuilder:
    factory = MagicMock()
    factory.for_descriptor.return_value = adapter
    descriptor = ConnectionDescriptor(name="server", engine=EngineKind.SQLSERVER, server="sql1")
    return SchemaTreeBuilder(descriptor, factory=factory)


def folder(builder: SchemaTreeBuilder, database: int, name: str) -> SchemaObject:
    return next(child for child in builder.nodes[database].children if child.name == name)


def test_build_creates_database_nodes_with_three_folders(builder: SchemaTreeBuilder) -> None:
    nodes = builder.build()

    assert [node.name for node in nodes] == ["Sales", "HR"]
    for node in nodes:
        assert node.kind == ObjectKind.DATABASE
        assert [child.name for child in node.children] == list(FOLDER_NAMES)
        assert all(child.kind == ObjectKind.FOLDER for child in node.children)
        assert all(child.children == [] for child in node.children)
        assert all(child.state == LoadState.UNLOADED for child in node.children)
    assert builder.status_message == "Loaded 2 database(s)"


def test_build_replaces_previous_nodes(builder: SchemaTreeBuilder) -> None:
    builder.build()
    builder.build()

    assert len(builder.nodes) == 2


def test_build_with_no_databases(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    adapter.list_databases.return_value = IntrospectionResult.failed(OSError("refused"))

    assert builder.build() == []
    assert builder.status_message == "Loaded 0 database(s)"


def test_expand_tables_folder_uses_owning_database(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()
    tables = folder(builder, 1, "Tables")

    children = builder.expand(tables)

    assert [child.name for child in children] == ["hr_orders", "hr_customers"]
    assert tables.state == LoadState.LOADED
    assert all(child.parent is tables for child in children)
    adapter.list_tables.assert_called_once_with(builder.descriptor, "HR")


def test_expand_views_and_procedures(builder: SchemaTreeBuilder) -> None:
    builder.build()

    views = builder.expand(folder(builder, 0, "Views"))
    procedures = builder.expand(folder(builder, 0, "Stored Procedures"))

    assert [view.kind for view in views] == [ObjectKind.VIEW]
    assert [procedure.name for procedure in procedures] == ["usp_refresh"]


def test_folder_re_expansion_is_idempotent(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()
    tables = folder(builder, 0, "Tables")

    first = list(builder.expand(tables))
    second = list(builder.expand(tables))

    assert first == second
    assert len(tables.children) == 2
    assert adapter.list_tables.call_count == 2


def test_expand_table_loads_columns_once(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()
    orders = builder.expand(folder(builder, 0, "Tables"))[0]

    builder.expand(orders)
    builder.expand(orders)

    assert [column.name for column in orders.children] == ["id (int)"]
    adapter.list_columns.assert_called_once_with(builder.descriptor, "Sales", "sales_orders")


def test_expand_view_loads_columns(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()
    view = builder.expand(folder(builder, 0, "Views"))[0]

    builder.expand(view)

    assert view.has_children
    adapter.list_columns.assert_called_once_with(builder.descriptor, "Sales", "v_totals")


def test_expand_table_without_parent_is_noop(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()
    orphan = table("orphan")

    children = builder.expand(orphan)

    assert children == []
    assert orphan.state == LoadState.UNLOADED
    adapter.list_columns.assert_not_called()


def test_expand_database_and_column_nodes_is_noop(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()

    builder.expand(builder.nodes[0])
    builder.expand(SchemaObject(name="id (int)", kind=ObjectKind.COLUMN))

    assert [child.name for child in builder.nodes[0].children] == list(FOLDER_NAMES)
    adapter.list_columns.assert_not_called()


def test_fetch_exception_leaves_tree_unchanged(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()
    tables = folder(builder, 0, "Tables")
    builder.expand(tables)
    before = list(tables.children)
    adapter.list_tables.side_effect = RuntimeError("catalog exploded")

    builder.expand(tables)

    assert tables.children == before
    assert builder.status_message == "Error: catalog exploded"


def test_degraded_fetch_reported_in_status(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()
    adapter.list_views.side_effect = None
    adapter.list_views.return_value = IntrospectionResult.failed(OSError("timeout"))
    views = folder(builder, 0, "Views")

    builder.expand(views)

    assert views.children == []
    assert builder.status_message == "Could not load Views: timeout"


def test_build_failure_sets_status(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    adapter.list_databases.side_effect = RuntimeError("boom")

    assert builder.build() == []
    assert builder.status_message == "Error loading objects: boom"


def test_find_parent_database_searches_two_levels(builder: SchemaTreeBuilder) -> None:
    builder.build()
    tables = folder(builder, 0, "Tables")
    orders = builder.expand(tables)[0]
    builder.expand(orders)
    column = orders.children[0]

    assert builder.find_parent_database(tables) is builder.nodes[0]
    assert builder.find_parent_database(orders) is builder.nodes[0]
    assert builder.find_parent_database(column) is None


def test_find_node_and_expand_path(builder: SchemaTreeBuilder) -> None:
    builder.build()

    node = builder.expand_path("HR/Tables/dbo.hr_orders")

    assert node is not None
    assert node.name == "hr_orders"
    assert node.has_children
    assert builder.find_node("HR/Tables/hr_orders") is node
    assert builder.find_node("HR/Nope") is None
    assert builder.expand_path("Missing/Tables") is None


def test_expand_all(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()

    builder.expand_all()

    assert all(child.is_loaded for database in builder.nodes for child in database.children)
    # two tables and one view per database
    assert adapter.list_columns.call_count == 6


def test_invalidate_allows_refetch(builder: SchemaTreeBuilder, adapter: MagicMock) -> None:
    builder.build()
    orders = builder.expand(folder(builder, 0, "Tables"))[0]
    builder.expand(orders)

    builder.invalidate(orders)
    assert orders.state == LoadState.UNLOADED
    builder.expand(orders)

    assert adapter.list_columns.call_count == 2
    assert orders.is_loaded


def test_concurrent_folder_expansion(builder: SchemaTreeBuilder) -> None:
    builder.build()
    folders: List[SchemaObject] = [child for database in builder.nodes for child in database.children]

    threads = [threading.Thread(target=builder.expand, args=(node,)) for node in folders]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert all(node.is_loaded for node in folders)


def test_sqlite_tree_end_to_end(sqlite_descriptor: ConnectionDescriptor) -> None:
    builder = SchemaTreeBuilder(sqlite_descriptor)
    builder.build()

    users = builder.expand_path("main/Tables/users")
    procedures = builder.expand_path("main/Stored Procedures")

    assert [node.name for node in builder.nodes] == ["main"]
    assert [column.name for column in users.children] == ["id (INTEGER)", "name (TEXT)", "email (TEXT)"]
    assert procedures.children == []
    assert procedures.is_loaded


def test_to_dict_reflects_load_and_expansion(builder: SchemaTreeBuilder) -> None:
    builder.build()
    builder.expand(folder(builder, 0, "Tables"))

    data = builder.nodes[0].to_dict()

    assert data['kind'] == "database"
    tables, views, _ = data['children']
    assert tables['state'] == "loaded"
    assert tables['is_expanded'] is True
    assert [child['name'] for child in tables['children']] == ["sales_orders", "sales_customers"]
    assert tables['children'][0]['schema'] == "dbo"
    assert views == {
        'name': "Views", 'schema': "", 'kind': "folder", 'state': "unloaded",
        'is_expanded': False, 'children': [],
    }
