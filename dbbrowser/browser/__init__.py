"""Schema browsing and query execution on top of the adapters."""

from dbbrowser.browser.tree import (
    SchemaTreeBuilder,
    TABLES_FOLDER,
    VIEWS_FOLDER,
    PROCEDURES_FOLDER,
    FOLDER_NAMES,
)
from dbbrowser.browser.executor import QueryExecutor

__all__ = [
    "SchemaTreeBuilder",
    "QueryExecutor",
    "TABLES_FOLDER",
    "VIEWS_FOLDER",
    "PROCEDURES_FOLDER",
    "FOLDER_NAMES",
]
