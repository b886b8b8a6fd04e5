"""Database connectivity, introspection and query execution."""

from dbbrowser.db.base import (
    BaseAdapter,
    QueryResult,
    IntrospectionResult,
    is_read_statement,
)
from dbbrowser.db.models import ObjectKind, LoadState, SchemaObject
from dbbrowser.db.connection import AdapterFactory, ConnectionManager
from dbbrowser.db.adapters import (
    SqlServerAdapter,
    PostgreSQLAdapter,
    MySQLAdapter,
    SQLiteAdapter,
)

__all__ = [
    # Base classes
    "BaseAdapter",
    "QueryResult",
    "IntrospectionResult",
    "is_read_statement",
    # Schema model
    "ObjectKind",
    "LoadState",
    "SchemaObject",
    # Adapter resolution
    "AdapterFactory",
    "ConnectionManager",
    # Database adapters
    "SqlServerAdapter",
    "PostgreSQLAdapter",
    "MySQLAdapter",
    "SQLiteAdapter",
]
