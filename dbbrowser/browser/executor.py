"""Query execution and connection testing on the selected connection."""

import logging
from typing import Optional, Type

from dbbrowser.db.base import QueryResult
from dbbrowser.db.connection import AdapterFactory, ConnectionManager

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Runs statements against the connection selected in a ConnectionManager.

    Results are returned unchanged; the executor only derives the status
    strings a front end displays.
    """

    def __init__(
        self,
        manager: ConnectionManager,
        factory: Type[AdapterFactory] = AdapterFactory,
    ) -> None:
        self.manager = manager
        self._factory = factory
        self.status_message = "Ready"
        self.execution_time_message = ""
        self.is_executing = False

    def execute(self, statement: str) -> Optional[QueryResult]:
        """Execute one statement on the selected connection.

        Returns:
            The adapter's QueryResult, or None when validation failed and no
            adapter call was made.
        """
        self.execution_time_message = ""
        descriptor = self.manager.selected
        if descriptor is None:
            self.status_message = "Please select a connection"
            return None

        if not statement or not statement.strip():
            self.status_message = "Please enter a query"
            return None

        self.is_executing = True
        self.status_message = "Executing query..."
        try:
            adapter = self._factory.for_descriptor(descriptor)
            result = adapter.execute_query(descriptor, statement)
        except Exception as e:
            logger.error("Query execution on '%s' failed: %s", descriptor.display_name, e)
            self.status_message = f"Error: {e}"
            return None
        finally:
            self.is_executing = False

        self.status_message = self.describe(result)
        if result.is_success:
            self.execution_time_message = f"Execution time: {result.execution_time_ms:.2f}ms"
        return result

    @staticmethod
    def describe(result: QueryResult) -> str:
        if not result.is_success:
            return f"Error: {result.error_message}"
        if result.has_data:
            return f"Query returned {result.row_count} row(s)"
        return f"Query executed successfully. {result.rows_affected} row(s) affected"

    def test_connection(self) -> bool:
        """Test the selected connection, updating the status message."""
        descriptor = self.manager.selected
        if descriptor is None:
            self.status_message = "Please select a connection"
            return False

        self.status_message = "Testing connection..."
        try:
            success = self._factory.for_descriptor(descriptor).test_connection(descriptor)
        except Exception as e:
            logger.error("Connection test on '%s' failed: %s", descriptor.display_name, e)
            success = False

        self.status_message = (
            "Connection successful!" if success
            else "Connection failed. Please check your settings."
        )
        return success
