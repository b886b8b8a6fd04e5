"""Adapter factory and the session's connection collection."""

import logging
from typing import Dict, List, Optional, Type, Union

from dbbrowser.config.models import BrowserConfig, ConnectionDescriptor, EngineKind
from dbbrowser.db.base import BaseAdapter
from dbbrowser.db.adapters.sqlserver import SqlServerAdapter
from dbbrowser.db.adapters.postgresql import PostgreSQLAdapter
from dbbrowser.db.adapters.mysql import MySQLAdapter
from dbbrowser.db.adapters.sqlite import SQLiteAdapter
from dbbrowser.exceptions import ConfigurationError, UnsupportedEngineError

logger = logging.getLogger(__name__)


class AdapterFactory:
    """Factory resolving the adapter for an engine kind."""

    _adapters: Dict[EngineKind, Type[BaseAdapter]] = {
        EngineKind.SQLSERVER: SqlServerAdapter,
        EngineKind.POSTGRESQL: PostgreSQLAdapter,
        EngineKind.MYSQL: MySQLAdapter,
        EngineKind.SQLITE: SQLiteAdapter,
    }

    @classmethod
    def resolve(cls, engine: Union[EngineKind, str]) -> BaseAdapter:
        """Create an adapter for the given engine kind.

        Args:
            engine: Engine kind or its string value.

        Returns:
            A new adapter instance.

        Raises:
            UnsupportedEngineError: If the engine kind is not one of the four supported ones.
        """
        try:
            kind = EngineKind(engine)
        except ValueError:
            raise UnsupportedEngineError(engine) from None

        adapter_class = cls._adapters.get(kind)
        if adapter_class is None:
            raise UnsupportedEngineError(engine)
        return adapter_class()

    @classmethod
    def for_descriptor(cls, descriptor: ConnectionDescriptor) -> BaseAdapter:
        return cls.resolve(descriptor.engine)

    @classmethod
    def supported_engines(cls) -> List[EngineKind]:
        """Get list of supported engine kinds."""
        return list(cls._adapters.keys())


class ConnectionManager:
    """Ordered, session-scoped collection of connection descriptors.

    Tracks which descriptor is selected; nothing is persisted.
    """

    def __init__(self, connections: Optional[List[ConnectionDescriptor]] = None) -> None:
        self._connections: List[ConnectionDescriptor] = list(connections or [])
        self.selected: Optional[ConnectionDescriptor] = None

    @classmethod
    def from_config(cls, config: BrowserConfig) -> "ConnectionManager":
        manager = cls(config.connections)
        if config.default_connection:
            manager.select(config.default_connection)
        return manager

    @property
    def connections(self) -> List[ConnectionDescriptor]:
        return list(self._connections)

    def add(self, descriptor: ConnectionDescriptor, select: bool = True) -> ConnectionDescriptor:
        """Append a descriptor, optionally making it the selected one."""
        self._connections.append(descriptor)
        logger.debug("Added connection '%s' (%s)", descriptor.display_name, descriptor.engine.value)
        if select:
            self.selected = descriptor
        return descriptor

    def add_new(self) -> ConnectionDescriptor:
        """Add a placeholder SQL Server connection on localhost and select it."""
        descriptor = ConnectionDescriptor(
            name=f"New Connection {len(self._connections) + 1}",
            engine=EngineKind.SQLSERVER,
            server="localhost",
        )
        return self.add(descriptor)

    def remove(self, name_or_id: str) -> None:
        descriptor = self.get(name_or_id)
        self._connections.remove(descriptor)
        if self.selected is descriptor:
            self.selected = None

    def get(self, name_or_id: str) -> ConnectionDescriptor:
        """Find a descriptor by name or id.

        Raises:
            ConfigurationError: If no descriptor matches.
        """
        for descriptor in self._connections:
            if name_or_id in (descriptor.name, descriptor.id):
                return descriptor
        available = [descriptor.display_name for descriptor in self._connections]
        raise ConfigurationError(
            f"Connection '{name_or_id}' not found. Available connections: {available}"
        )

    def select(self, name_or_id: str) -> ConnectionDescriptor:
        self.selected = self.get(name_or_id)
        return self.selected

    def get_adapter(self, descriptor: Optional[ConnectionDescriptor] = None) -> BaseAdapter:
        """Resolve the adapter for a descriptor, defaulting to the selected one."""
        descriptor = descriptor or self.selected
        if descriptor is None:
            raise ConfigurationError("No connection selected")
        return AdapterFactory.for_descriptor(descriptor)

    def __len__(self) -> int:
        return len(self._connections)

    def __iter__(self):
        return iter(self._connections)
