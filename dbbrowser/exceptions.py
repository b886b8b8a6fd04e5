"""Core exceptions for DB Browser."""

from typing import Any, Dict, Optional


class DBBrowserError(Exception):
    """Base exception for all DB Browser errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DBBrowserError):
    """Raised when a configuration file or connection descriptor is invalid."""
    pass


class UnsupportedEngineError(ConfigurationError):
    """Raised when an engine kind has no adapter or connection-string rule."""

    def __init__(self, engine: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Database type {engine} is not supported", details)
        self.engine = engine


class DatabaseError(DBBrowserError):
    """Raised when there's an error connecting to or querying a database."""

    def __init__(
        self,
        message: str,
        engine: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, details)
        self.engine = engine
