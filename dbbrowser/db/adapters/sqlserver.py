"""SQL Server database adapter."""

from typing import Any, Dict

from dbbrowser.config.models import ConnectionDescriptor, EngineKind
from dbbrowser.db.base import BaseAdapter, SqlWithParams


class SqlServerAdapter(BaseAdapter):
    """SQL Server adapter over pyodbc."""

    engine = EngineKind.SQLSERVER

    def _get_engine_options(self, descriptor: ConnectionDescriptor) -> Dict[str, Any]:
        """Get SQL Server-specific engine options."""
        return {
            'connect_args': {
                # pyodbc login timeout; the statement timeout is set on connect
                'timeout': descriptor.options.get('login_timeout', 15),
            }
        }

    def _on_connect(self, dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.timeout = self.statement_timeout

    def _databases_query(self) -> SqlWithParams:
        # database_id 1-4 are master, tempdb, model and msdb
        return "SELECT name FROM sys.databases WHERE database_id > 4 ORDER BY name", {}

    def _tables_query(self, database: str) -> SqlWithParams:
        return """
        SELECT TABLE_SCHEMA, TABLE_NAME
        FROM INFORMATION_SCHEMA.TABLES
        WHERE TABLE_TYPE = 'BASE TABLE'
          AND TABLE_SCHEMA NOT IN ('sys', 'INFORMATION_SCHEMA')
        ORDER BY TABLE_SCHEMA, TABLE_NAME
        """, {}

    def _views_query(self, database: str) -> SqlWithParams:
        return """
        SELECT TABLE_SCHEMA, TABLE_NAME
        FROM INFORMATION_SCHEMA.VIEWS
        WHERE TABLE_SCHEMA NOT IN ('sys', 'INFORMATION_SCHEMA')
        ORDER BY TABLE_SCHEMA, TABLE_NAME
        """, {}

    def _procedures_query(self, database: str) -> SqlWithParams:
        return """
        SELECT ROUTINE_SCHEMA, ROUTINE_NAME
        FROM INFORMATION_SCHEMA.ROUTINES
        WHERE ROUTINE_TYPE = 'PROCEDURE'
          AND ROUTINE_SCHEMA NOT IN ('sys', 'INFORMATION_SCHEMA')
        ORDER BY ROUTINE_SCHEMA, ROUTINE_NAME
        """, {}

    def _columns_query(self, database: str, table_name: str) -> SqlWithParams:
        return """
        SELECT COLUMN_NAME, DATA_TYPE
        FROM INFORMATION_SCHEMA.COLUMNS
        WHERE TABLE_NAME = :table_name
        ORDER BY ORDINAL_POSITION
        """, {'table_name': table_name}
