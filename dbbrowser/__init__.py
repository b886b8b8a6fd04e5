"""DB Browser: schema browsing and ad-hoc querying across SQL engines.

DB Browser provides:
- A uniform adapter contract over SQL Server, PostgreSQL, MySQL and SQLite
- Lazy, on-demand schema tree population
- Single-statement query execution with timing and error capture
- YAML-based connection configuration
- A small CLI for testing connections, browsing and querying
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Core exports
from dbbrowser.exceptions import (
    DBBrowserError,
    ConfigurationError,
    DatabaseError,
    UnsupportedEngineError,
)

__all__ = [
    "__version__",
    "DBBrowserError",
    "ConfigurationError",
    "DatabaseError",
    "UnsupportedEngineError",
]
