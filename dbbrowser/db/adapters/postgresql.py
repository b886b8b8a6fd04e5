"""PostgreSQL database adapter."""

from typing import Any, Dict

from dbbrowser.config.models import ConnectionDescriptor, EngineKind
from dbbrowser.db.base import BaseAdapter, SqlWithParams
from dbbrowser.db.models import ObjectKind

SYSTEM_SCHEMAS = "('pg_catalog', 'information_schema')"


class PostgreSQLAdapter(BaseAdapter):
    """PostgreSQL adapter over psycopg2."""

    engine = EngineKind.POSTGRESQL
    procedure_kind = ObjectKind.FUNCTION

    def _get_engine_options(self, descriptor: ConnectionDescriptor) -> Dict[str, Any]:
        """Get PostgreSQL-specific engine options."""
        return {
            'connect_args': {
                'connect_timeout': descriptor.options.get('connect_timeout', 10),
                'application_name': descriptor.options.get('application_name', 'dbbrowser'),
                'options': f"-c statement_timeout={self.statement_timeout * 1000}",
            }
        }

    def _databases_query(self) -> SqlWithParams:
        return "SELECT datname FROM pg_database WHERE datistemplate = false ORDER BY datname", {}

    def _tables_query(self, database: str) -> SqlWithParams:
        return f"""
        SELECT table_schema, table_name
        FROM information_schema.tables
        WHERE table_type = 'BASE TABLE' AND table_schema NOT IN {SYSTEM_SCHEMAS}
        ORDER BY table_schema, table_name
        """, {}

    def _views_query(self, database: str) -> SqlWithParams:
        return f"""
        SELECT table_schema, table_name
        FROM information_schema.views
        WHERE table_schema NOT IN {SYSTEM_SCHEMAS}
        ORDER BY table_schema, table_name
        """, {}

    def _procedures_query(self, database: str) -> SqlWithParams:
        return f"""
        SELECT routine_schema, routine_name
        FROM information_schema.routines
        WHERE routine_type = 'FUNCTION' AND routine_schema NOT IN {SYSTEM_SCHEMAS}
        ORDER BY routine_schema, routine_name
        """, {}

    def _columns_query(self, database: str, table_name: str) -> SqlWithParams:
        return """
        SELECT column_name, data_type
        FROM information_schema.columns
        WHERE table_name = :table_name
        ORDER BY ordinal_position
        """, {'table_name': table_name}
