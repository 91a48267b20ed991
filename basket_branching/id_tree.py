"""
Identifier tree: an ordered, append-only tree over opaque string ids.

Every id is unique across the whole tree. Lookups by id, parent lookups
and child appends are all O(1) through two indexes kept next to the
structure itself.
"""

from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from .errors import (
    DuplicateIdError,
    InvalidIdError,
    NodeNotFoundError,
    ParentNotFoundError,
)

# visit(node, depth, parent) -> False to stop the walk
Visitor = Callable[["IdNode", int, Optional["IdNode"]], Optional[bool]]


class IdNode(BaseModel):
    """A structural node. Child order is insertion order."""

    id: str = Field(..., frozen=True)
    children: List["IdNode"] = Field(default_factory=list)


class IdTree:
    """
    Ordered tree of unique ids.

    Nodes are created only through append_child and are never removed or
    moved. The root id is fixed at construction.
    """

    def __init__(self, root_id: str):
        """
        Create a tree with a single root node.

        Args:
            root_id: Id of the root node (must be non-empty)
        """
        if not isinstance(root_id, str) or not root_id:
            raise InvalidIdError("Root id must be a non-empty string.")

        self._root = IdNode(id=root_id)
        self._index: Dict[str, IdNode] = {root_id: self._root}
        self._parents: Dict[str, str] = {}

    @property
    def root(self) -> IdNode:
        return self._root

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def has(self, node_id: str) -> bool:
        return node_id in self._index

    def find(self, node_id: str) -> Optional[IdNode]:
        return self._index.get(node_id)

    def parent_of(self, node_id: str) -> Optional[str]:
        """Parent id of a node; None for the root and for unknown ids."""
        return self._parents.get(node_id)

    def find_parent(self, node_id: str) -> Optional[IdNode]:
        parent_id = self._parents.get(node_id)
        if parent_id is None:
            return None
        return self._index[parent_id]

    def children_of(self, node_id: str) -> List[str]:
        node = self._index.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return [child.id for child in node.children]

    def append_child(self, parent_id: str, child_id: str) -> IdNode:
        """
        Append a new child under parent_id (enforces a tree-wide unique child_id).

        Args:
            parent_id: Id of an existing node
            child_id: Id for the new node

        Returns:
            The new node
        """
        parent = self._index.get(parent_id)
        if parent is None:
            raise ParentNotFoundError(parent_id)
        if not isinstance(child_id, str) or not child_id:
            raise InvalidIdError("Child id must be a non-empty string.")
        if child_id in self._index:
            raise DuplicateIdError(child_id)

        child = IdNode(id=child_id)
        parent.children.append(child)
        self._index[child_id] = child
        self._parents[child_id] = parent_id

        return child

    def traverse_depth_first(self, visit: Visitor) -> None:
        """
        Pre-order walk from the root, children in insertion order.

        Uses an explicit stack so depth is not bounded by the interpreter's
        recursion limit. The walk stops as soon as visit returns False.
        """
        # frames: [node, depth, parent, next child index]; -1 = not visited yet
        stack: List[list] = [[self._root, 0, None, -1]]

        while stack:
            frame = stack[-1]
            node, depth, parent, i = frame

            if i == -1:
                if visit(node, depth, parent) is False:
                    return
                frame[3] = i = 0

            if i >= len(node.children):
                stack.pop()
                continue

            frame[3] = i + 1
            stack.append([node.children[i], depth + 1, node, -1])

    def to_snapshot(self) -> IdNode:
        """Deep, detached copy of the tree shape (ids and child order)."""
        snapshot = IdNode(id=self._root.id)
        stack = [(self._root, snapshot)]

        while stack:
            source, copy = stack.pop()
            for child in source.children:
                child_copy = IdNode(id=child.id)
                copy.children.append(child_copy)
                stack.append((child, child_copy))

        return snapshot


__all__ = ["IdNode", "IdTree", "Visitor"]
