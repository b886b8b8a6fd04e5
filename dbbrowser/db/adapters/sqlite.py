"""SQLite database adapter."""

from typing import Any, Dict, List, Sequence

from dbbrowser.config.models import ConnectionDescriptor, EngineKind
from dbbrowser.db.base import BaseAdapter, IntrospectionResult, SqlWithParams
from dbbrowser.db.models import ObjectKind, SchemaObject

MAIN_DATABASE = "main"


class SQLiteAdapter(BaseAdapter):
    """SQLite adapter over the standard library driver.

    A SQLite file is a single database, exposed as the synthetic ``main``
    entry. Objects carry no schema and there are no stored procedures.
    """

    engine = EngineKind.SQLITE

    def _get_engine_options(self, descriptor: ConnectionDescriptor) -> Dict[str, Any]:
        """Get SQLite-specific engine options."""
        return {
            'connect_args': {
                'check_same_thread': False,
                'timeout': self.statement_timeout,
            }
        }

    def list_databases(self, descriptor: ConnectionDescriptor) -> List[str]:
        # a file holds one database; attached ones are not browsed
        return IntrospectionResult([MAIN_DATABASE])

    def _scope(self, descriptor: ConnectionDescriptor, database: str) -> ConnectionDescriptor:
        return descriptor

    def _tables_query(self, database: str) -> SqlWithParams:
        return """
        SELECT name
        FROM sqlite_master
        WHERE type = 'table' AND name NOT LIKE 'sqlite_%'
        ORDER BY name
        """, {}

    def _views_query(self, database: str) -> SqlWithParams:
        return """
        SELECT name
        FROM sqlite_master
        WHERE type = 'view'
        ORDER BY name
        """, {}

    def _columns_query(self, database: str, table_name: str) -> SqlWithParams:
        return f"PRAGMA table_info({_quote_identifier(table_name)})", {}

    @staticmethod
    def _column_from_row(row: Sequence[Any]) -> SchemaObject:
        # table_info rows: cid, name, type, notnull, dflt_value, pk
        return SchemaObject(name=f"{row[1]} ({row[2]})", kind=ObjectKind.COLUMN)


def _quote_identifier(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'
