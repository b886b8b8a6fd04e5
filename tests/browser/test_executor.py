"""Tests for the query executor's validation and status messages."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from dbbrowser.browser.executor import QueryExecutor
from dbbrowser.config.models import ConnectionDescriptor, EngineKind
from dbbrowser.db.base import BaseAdapter, QueryResult
from dbbrowser.db.connection import ConnectionManager
from dbbrowser.exceptions import UnsupportedEngineError


@pytest.fixture()
def adapter() -> MagicMock:
    return MagicMock(spec=BaseAdapter)


@pytest.fixture()
def executor(adapter: MagicMock) -> QueryExecutor:
    manager = ConnectionManager()
    manager.add(ConnectionDescriptor(name="pg", engine=EngineKind.POSTGRESQL, server="db1"))
    factory = MagicMock()
    factory.for_descriptor.return_value = adapter
    return QueryExecutor(manager, factory=factory)


def test_requires_selected_connection(adapter: MagicMock) -> None:
    factory = MagicMock()
    executor = QueryExecutor(ConnectionManager(), factory=factory)

    assert executor.execute("SELECT 1") is None
    assert executor.status_message == "Please select a connection"
    factory.for_descriptor.assert_not_called()


@pytest.mark.parametrize("statement", ["", "   ", "\n\t"])
def test_requires_statement(executor: QueryExecutor, adapter: MagicMock, statement: str) -> None:
    assert executor.execute(statement) is None
    assert executor.status_message == "Please enter a query"
    adapter.execute_query.assert_not_called()


def test_tabular_result(executor: QueryExecutor, adapter: MagicMock) -> None:
    expected = QueryResult(columns=["n"], rows=[["1"], ["2"]], rows_affected=2, execution_time=0.0125)
    adapter.execute_query.return_value = expected

    result = executor.execute("SELECT n FROM t")

    assert result is expected
    assert executor.status_message == "Query returned 2 row(s)"
    assert executor.execution_time_message == "Execution time: 12.50ms"
    adapter.execute_query.assert_called_once_with(executor.manager.selected, "SELECT n FROM t")
    assert not executor.is_executing


def test_write_result(executor: QueryExecutor, adapter: MagicMock) -> None:
    adapter.execute_query.return_value = QueryResult(rows_affected=4, execution_time=0.001)

    executor.execute("DELETE FROM t")

    assert executor.status_message == "Query executed successfully. 4 row(s) affected"


def test_error_result(executor: QueryExecutor, adapter: MagicMock) -> None:
    adapter.execute_query.return_value = QueryResult(error_message="relation \"t\" does not exist")

    result = executor.execute("SELECT * FROM t")

    assert not result.is_success
    assert executor.status_message == 'Error: relation "t" does not exist'


def test_failure_clears_previous_execution_time(executor: QueryExecutor, adapter: MagicMock) -> None:
    adapter.execute_query.return_value = QueryResult(columns=["n"], rows=[["1"]], execution_time=0.002)
    executor.execute("SELECT 1")
    assert executor.execution_time_message == "Execution time: 2.00ms"

    adapter.execute_query.return_value = QueryResult(error_message="boom", execution_time=0.5)
    executor.execute("SELECT nope")

    assert executor.execution_time_message == ""

    executor.execute("  ")
    assert executor.execution_time_message == ""


def test_resolution_failure_is_reported() -> None:
    manager = ConnectionManager()
    manager.add(ConnectionDescriptor(name="x", engine=EngineKind.SQLITE, file_path="x.db"))
    factory = MagicMock()
    factory.for_descriptor.side_effect = UnsupportedEngineError("oracle")

    executor = QueryExecutor(manager, factory=factory)

    assert executor.execute("SELECT 1") is None
    assert executor.status_message == "Error: Database type oracle is not supported"


def test_test_connection_messages(executor: QueryExecutor, adapter: MagicMock) -> None:
    adapter.test_connection.return_value = True
    assert executor.test_connection() is True
    assert executor.status_message == "Connection successful!"

    adapter.test_connection.return_value = False
    assert executor.test_connection() is False
    assert executor.status_message == "Connection failed. Please check your settings."


def test_test_connection_without_selection() -> None:
    executor = QueryExecutor(ConnectionManager())

    assert executor.test_connection() is False
    assert executor.status_message == "Please select a connection"


def test_sqlite_round_trip(sqlite_descriptor: ConnectionDescriptor) -> None:
    manager = ConnectionManager([sqlite_descriptor])
    manager.select("sample")
    executor = QueryExecutor(manager)

    result = executor.execute("SELECT COUNT(*) AS n FROM users")

    assert result.rows == [["2"]]
    assert executor.status_message == "Query returned 1 row(s)"


class TestConnectionManager:
    """Session-scoped connection collection."""

    def test_add_new_selects_placeholder(self) -> None:
        manager = ConnectionManager()

        first = manager.add_new()
        second = manager.add_new()

        assert first.name == "New Connection 1"
        assert second.name == "New Connection 2"
        assert second.engine == EngineKind.SQLSERVER
        assert second.server == "localhost"
        assert manager.selected is second
        assert [c.name for c in manager] == ["New Connection 1", "New Connection 2"]

    def test_get_by_name_or_id_and_remove(self) -> None:
        manager = ConnectionManager()
        descriptor = manager.add(ConnectionDescriptor(name="a", engine=EngineKind.SQLITE, file_path="a.db"))

        assert manager.get("a") is descriptor
        assert manager.get(descriptor.id) is descriptor

        manager.remove("a")
        assert len(manager) == 0
        assert manager.selected is None

    def test_get_adapter_requires_selection(self) -> None:
        with pytest.raises(Exception, match="No connection selected"):
            ConnectionManager().get_adapter()
