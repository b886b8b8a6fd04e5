"""Database adapters for the supported engines."""

from dbbrowser.db.adapters.sqlserver import SqlServerAdapter
from dbbrowser.db.adapters.postgresql import PostgreSQLAdapter
from dbbrowser.db.adapters.mysql import MySQLAdapter
from dbbrowser.db.adapters.sqlite import SQLiteAdapter

__all__ = [
    "SqlServerAdapter",
    "PostgreSQLAdapter",
    "MySQLAdapter",
    "SQLiteAdapter",
]
