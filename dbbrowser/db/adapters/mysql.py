"""MySQL database adapter."""

from typing import Any, Dict

from dbbrowser.config.models import ConnectionDescriptor, EngineKind
from dbbrowser.db.base import BaseAdapter, SqlWithParams


class MySQLAdapter(BaseAdapter):
    """MySQL adapter over PyMySQL.

    MySQL databases are schemas, so every catalog query filters on the
    database name rather than excluding system schemas.
    """

    engine = EngineKind.MYSQL

    def _get_engine_options(self, descriptor: ConnectionDescriptor) -> Dict[str, Any]:
        """Get MySQL-specific engine options."""
        return {
            'connect_args': {
                'connect_timeout': descriptor.options.get('connect_timeout', 10),
                'read_timeout': self.statement_timeout,
                'write_timeout': self.statement_timeout,
            }
        }

    def _databases_query(self) -> SqlWithParams:
        return """
        SELECT schema_name
        FROM information_schema.schemata
        WHERE schema_name NOT IN ('mysql', 'information_schema', 'performance_schema', 'sys')
        ORDER BY schema_name
        """, {}

    def _tables_query(self, database: str) -> SqlWithParams:
        return """
        SELECT TABLE_SCHEMA, TABLE_NAME
        FROM information_schema.tables
        WHERE TABLE_TYPE = 'BASE TABLE' AND TABLE_SCHEMA = :database
        ORDER BY TABLE_NAME
        """, {'database': database}

    def _views_query(self, database: str) -> SqlWithParams:
        return """
        SELECT TABLE_SCHEMA, TABLE_NAME
        FROM information_schema.views
        WHERE TABLE_SCHEMA = :database
        ORDER BY TABLE_NAME
        """, {'database': database}

    def _procedures_query(self, database: str) -> SqlWithParams:
        # Procedures and functions are listed together
        return """
        SELECT ROUTINE_SCHEMA, ROUTINE_NAME
        FROM information_schema.routines
        WHERE ROUTINE_SCHEMA = :database
        ORDER BY ROUTINE_NAME
        """, {'database': database}

    def _columns_query(self, database: str, table_name: str) -> SqlWithParams:
        return """
        SELECT COLUMN_NAME, DATA_TYPE
        FROM information_schema.columns
        WHERE TABLE_NAME = :table_name AND TABLE_SCHEMA = :database
        ORDER BY ORDINAL_POSITION
        """, {'table_name': table_name, 'database': database}
