"""Schema object model shared by the adapters and the tree builder."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional


class ObjectKind(str, Enum):
    """Kinds of nodes in the schema tree."""
    SERVER = "server"
    DATABASE = "database"
    FOLDER = "folder"
    TABLE = "table"
    VIEW = "view"
    STORED_PROCEDURE = "stored_procedure"
    FUNCTION = "function"
    COLUMN = "column"


class LoadState(str, Enum):
    """Child cache state of a node."""
    UNLOADED = "unloaded"
    LOADED = "loaded"


@dataclass(eq=True)
class SchemaObject:
    """One entry in the browsable catalog tree.

    Children are either empty and ``UNLOADED`` or fully fetched and ``LOADED``.
    """

    name: str
    kind: ObjectKind
    schema: str = ""
    children: List["SchemaObject"] = field(default_factory=list)
    state: LoadState = LoadState.UNLOADED
    is_expanded: bool = False
    parent: Optional["SchemaObject"] = field(default=None, repr=False, compare=False)

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def is_loaded(self) -> bool:
        return self.state == LoadState.LOADED

    @property
    def is_folder(self) -> bool:
        return self.kind == ObjectKind.FOLDER

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.name}" if self.schema else self.name

    def add_child(self, child: "SchemaObject") -> "SchemaObject":
        child.parent = self
        self.children.append(child)
        return child

    def replace_children(self, children: Iterable["SchemaObject"]) -> None:
        """Swap in a freshly fetched child list and mark the node loaded."""
        self.children.clear()
        for child in children:
            self.add_child(child)
        self.state = LoadState.LOADED

    def invalidate(self) -> None:
        """Drop cached children so the next expansion fetches them again."""
        self.children.clear()
        self.state = LoadState.UNLOADED
        self.is_expanded = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'schema': self.schema,
            'kind': self.kind.value,
            'state': self.state.value,
            'is_expanded': self.is_expanded,
            'children': [child.to_dict() for child in self.children],
        }
