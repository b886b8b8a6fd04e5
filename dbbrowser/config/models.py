"""Pydantic models for DB Browser configuration and connection descriptors."""

import logging
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    Field,
    field_validator,
    model_validator,
    AliasChoices,
    ConfigDict,
    PrivateAttr,
)
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from dbbrowser.exceptions import ConfigurationError, UnsupportedEngineError

logger = logging.getLogger(__name__)

DEFAULT_POSTGRESQL_PORT = 5432
DEFAULT_MYSQL_PORT = 3306
DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"

class EngineKind(str, Enum):
    """Supported database engines."""
    SQLSERVER = "sqlserver"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class ConnectionDescriptor(BaseModel):
    """Describes how to reach one database instance.

    Which fields are meaningful depends on ``engine``: ``file_path`` is only
    read for SQLite, ``integrated_security`` and ``trust_server_certificate``
    only for SQL Server, and everything except ``file_path`` is ignored for
    SQLite.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    engine: EngineKind = Field(validation_alias=AliasChoices("engine", "type"))
    server: str = Field(default="", validation_alias=AliasChoices("server", "host"))
    port: Optional[int] = None
    database: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    file_path: Optional[str] = Field(default=None, validation_alias=AliasChoices("file_path", "path"))
    integrated_security: bool = False
    # Set to false to validate the server certificate
    trust_server_certificate: bool = True
    options: Dict[str, Any] = Field(default_factory=dict)
    _trust_warned: bool = PrivateAttr(default=False)

    @field_validator('port')
    def validate_port(cls, v):
        """Validate port number range."""
        if v is not None and (v < 1 or v > 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def with_database(self, database: str) -> "ConnectionDescriptor":
        """Return a copy of this descriptor scoped to another database."""
        return self.model_copy(update={"database": database})

    def build_connection_string(self) -> str:
        """Build the engine-specific connection string.

        Returns:
            Connection string in the engine's native key/value syntax.

        Raises:
            UnsupportedEngineError: If the engine kind is not recognized.
            ConfigurationError: If a SQLite descriptor has no file path.
        """
        engine = self.engine
        if engine == EngineKind.SQLSERVER:
            server = f"{self.server},{self.port}" if self.port else self.server
            parts = [f"Server={server};Database={self.database or ''};"]
            if self.integrated_security:
                parts.append("Integrated Security=true;")
            else:
                parts.append(f"User Id={self.username or ''};Password={self.password or ''};")
            if self.trust_server_certificate:
                self._warn_trusted_certificate()
                parts.append("TrustServerCertificate=true;")
            return "".join(parts)

        if engine == EngineKind.POSTGRESQL:
            return (
                f"Host={self.server};Port={self.port or DEFAULT_POSTGRESQL_PORT};"
                f"Database={self.database or ''};Username={self.username or ''};"
                f"Password={self.password or ''}"
            )

        if engine == EngineKind.MYSQL:
            return (
                f"Server={self.server};Port={self.port or DEFAULT_MYSQL_PORT};"
                f"Database={self.database or ''};Uid={self.username or ''};"
                f"Pwd={self.password or ''}"
            )

        if engine == EngineKind.SQLITE:
            return f"Data Source={self._require_file_path()}"

        raise UnsupportedEngineError(engine)

    def to_url(self) -> URL:
        """Build the SQLAlchemy URL the adapters connect with.

        Raises:
            UnsupportedEngineError: If the engine kind is not recognized.
            ConfigurationError: If a SQLite descriptor has no file path.
        """
        engine = self.engine
        if engine == EngineKind.SQLSERVER:
            query = {"driver": str(self.options.get("driver", DEFAULT_ODBC_DRIVER))}
            if self.trust_server_certificate:
                self._warn_trusted_certificate()
                query["TrustServerCertificate"] = "yes"
            if self.integrated_security:
                query["Trusted_Connection"] = "yes"
            return URL.create(
                "mssql+pyodbc",
                username=None if self.integrated_security else (self.username or None),
                password=None if self.integrated_security else (self.password or None),
                host=self.server or None,
                port=self.port,
                database=self.database or None,
                query=query,
            )

        if engine == EngineKind.POSTGRESQL:
            return URL.create(
                "postgresql+psycopg2",
                username=self.username or None,
                password=self.password or None,
                host=self.server or None,
                port=self.port or DEFAULT_POSTGRESQL_PORT,
                database=self.database or None,
            )

        if engine == EngineKind.MYSQL:
            return URL.create(
                "mysql+pymysql",
                username=self.username or None,
                password=self.password or None,
                host=self.server or None,
                port=self.port or DEFAULT_MYSQL_PORT,
                database=self.database or None,
                query={"charset": str(self.options.get("charset", "utf8mb4"))},
            )

        if engine == EngineKind.SQLITE:
            return URL.create("sqlite", database=self._require_file_path())

        raise UnsupportedEngineError(engine)

    def _require_file_path(self) -> str:
        if not self.file_path:
            raise ConfigurationError(
                f"SQLite connection '{self.display_name}' requires a file path"
            )
        return self.file_path

    def _warn_trusted_certificate(self) -> None:
        if self._trust_warned:
            return
        self._trust_warned = True
        logger.warning(
            "Connection '%s' trusts the SQL Server certificate without validation; "
            "set trust_server_certificate: false to validate it",
            self.display_name,
        )


class BrowserConfig(BaseModel):
    """Main configuration model for DB Browser."""
    connections: List[ConnectionDescriptor] = Field(default_factory=list)
    default_connection: Optional[str] = None

    @model_validator(mode='after')
    def validate_connection_names(self):
        """Ensure connection names are unique."""
        seen = set()
        for connection in self.connections:
            if not connection.name:
                raise ValueError("Every connection requires a 'name'")
            if connection.name in seen:
                raise ValueError(f"Duplicate connection name '{connection.name}'")
            seen.add(connection.name)
        return self

    @model_validator(mode='after')
    def validate_default_connection(self):
        """Ensure default_connection exists, or default to the first connection."""
        names = [connection.name for connection in self.connections]
        if self.default_connection and self.default_connection not in names:
            raise ValueError(f"default_connection '{self.default_connection}' not found in connections")
        if not self.default_connection and names:
            self.default_connection = names[0]
        return self

    def get_connection(self, name: Optional[str] = None) -> ConnectionDescriptor:
        """Look up a connection by name, falling back to the default.

        Raises:
            ConfigurationError: If no such connection is configured.
        """
        name = name or self.default_connection
        for connection in self.connections:
            if connection.name == name:
                return connection
        available = [connection.name for connection in self.connections]
        raise ConfigurationError(
            f"Connection '{name}' not found in configuration. "
            f"Available connections: {available}"
        )


class EnvironmentSettings(BaseSettings):
    """Environment-specific settings."""
    log_level: str = Field(default="WARNING")
    debug: bool = Field(default=False)
    config_file: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(env_prefix="DBBROWSER_", case_sensitive=False)
