"""Lazy, on-demand population of the schema object tree."""

import logging
import threading
from typing import Callable, Dict, List, Optional, Type

from dbbrowser.config.models import ConnectionDescriptor
from dbbrowser.db.base import BaseAdapter
from dbbrowser.db.connection import AdapterFactory
from dbbrowser.db.models import LoadState, ObjectKind, SchemaObject

logger = logging.getLogger(__name__)

TABLES_FOLDER = "Tables"
VIEWS_FOLDER = "Views"
PROCEDURES_FOLDER = "Stored Procedures"
FOLDER_NAMES = (TABLES_FOLDER, VIEWS_FOLDER, PROCEDURES_FOLDER)

Fetcher = Callable[[BaseAdapter, ConnectionDescriptor, str, SchemaObject], List[SchemaObject]]

_FOLDER_FETCHERS: Dict[str, Fetcher] = {
    TABLES_FOLDER: lambda adapter, descriptor, database, node: adapter.list_tables(descriptor, database),
    VIEWS_FOLDER: lambda adapter, descriptor, database, node: adapter.list_views(descriptor, database),
    PROCEDURES_FOLDER: lambda adapter, descriptor, database, node: adapter.list_stored_procedures(descriptor, database),
}


def _fetch_columns(adapter: BaseAdapter, descriptor: ConnectionDescriptor, database: str,
                   node: SchemaObject) -> List[SchemaObject]:
    return adapter.list_columns(descriptor, database, node.name)


class SchemaTreeBuilder:
    """Builds and incrementally expands the object tree of one connection.

    Database nodes are created by ``build`` with their three folders already
    attached. Folder, table and view children are fetched the first time the
    node is expanded and cached afterwards; folders re-fetch on every
    expansion. A lock guards the node list so expansions may run from
    several threads.
    """

    def __init__(
        self,
        descriptor: ConnectionDescriptor,
        factory: Type[AdapterFactory] = AdapterFactory,
    ) -> None:
        self.descriptor = descriptor
        self._factory = factory
        self.nodes: List[SchemaObject] = []
        self.status_message = "Ready"
        self._lock = threading.RLock()

    def _adapter(self) -> BaseAdapter:
        return self._factory.for_descriptor(self.descriptor)

    def build(self) -> List[SchemaObject]:
        """Create one database node per database the connection exposes."""
        with self._lock:
            self.nodes.clear()
            self.status_message = "Loading database objects..."

            try:
                databases = self._adapter().list_databases(self.descriptor)
            except Exception as e:
                logger.warning("Loading databases failed for '%s': %s", self.descriptor.display_name, e)
                self.status_message = f"Error loading objects: {e}"
                return self.nodes

            for database in databases:
                self.nodes.append(self._database_node(database))

            self.status_message = f"Loaded {len(databases)} database(s)"
            return self.nodes

    @staticmethod
    def _database_node(name: str) -> SchemaObject:
        node = SchemaObject(name=name, kind=ObjectKind.DATABASE, state=LoadState.LOADED)
        for folder in FOLDER_NAMES:
            node.add_child(SchemaObject(name=folder, kind=ObjectKind.FOLDER))
        return node

    def expand(self, node: SchemaObject) -> List[SchemaObject]:
        """Populate a node's children on first expansion.

        Folders always re-fetch; tables and views fetch their columns once.
        Nodes whose database cannot be located are left untouched. Fetch
        errors become the status message and leave the node unchanged.

        Returns:
            The node's children after expansion.
        """
        if node.has_children and not node.is_folder:
            node.is_expanded = True
            return node.children

        fetch = self._fetcher_for(node)
        if fetch is None:
            return node.children

        with self._lock:
            parent = self.find_parent_database(node)
        if parent is None:
            logger.debug("No owning database found for '%s'; skipping expansion", node.name)
            return node.children

        try:
            children = fetch(self._adapter(), self.descriptor, parent.name, node)
        except Exception as e:
            logger.warning("Expanding '%s' failed: %s", node.name, e)
            self.status_message = f"Error: {e}"
            return node.children

        if getattr(children, "degraded", False):
            self.status_message = f"Could not load {node.name}: {children.error}"

        with self._lock:
            node.replace_children(children)
            node.is_expanded = True
        return node.children

    @staticmethod
    def _fetcher_for(node: SchemaObject) -> Optional[Fetcher]:
        if node.kind == ObjectKind.FOLDER:
            return _FOLDER_FETCHERS.get(node.name)
        if node.kind in (ObjectKind.TABLE, ObjectKind.VIEW):
            return _fetch_columns
        return None

    def find_parent_database(self, node: SchemaObject) -> Optional[SchemaObject]:
        """Find the database owning a node.

        Looks at direct children of each database and at the children of its
        folders; deeper nodes are not searched.
        """
        for database in self.nodes:
            if any(child is node for child in database.children):
                return database
            for folder in database.children:
                if any(child is node for child in folder.children):
                    return database
        return None

    def find_node(self, path: str) -> Optional[SchemaObject]:
        """Resolve a slash-separated path such as ``main/Tables/users``.

        Object segments match either the bare or the schema-qualified name.
        """
        segments = [segment for segment in path.split("/") if segment]
        candidates = self.nodes
        node = None
        for segment in segments:
            node = _match(candidates, segment)
            if node is None:
                return None
            candidates = node.children
        return node

    def expand_path(self, path: str) -> Optional[SchemaObject]:
        """Expand every node along a path, returning the last one."""
        segments = [segment for segment in path.split("/") if segment]
        candidates = self.nodes
        node = None
        for segment in segments:
            node = _match(candidates, segment)
            if node is None:
                return None
            self.expand(node)
            candidates = node.children
        return node

    def expand_all(self) -> None:
        """Expand every folder and every table or view below it."""
        for database in list(self.nodes):
            for folder in list(database.children):
                for child in list(self.expand(folder)):
                    self.expand(child)

    def invalidate(self, node: SchemaObject) -> None:
        """Return a node to the unloaded state so it is fetched again."""
        with self._lock:
            node.invalidate()


def _match(candidates: List[SchemaObject], segment: str) -> Optional[SchemaObject]:
    for candidate in candidates:
        if segment in (candidate.name, candidate.qualified_name):
            return candidate
    return None
