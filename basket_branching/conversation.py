"""
Conversation tree: branching chat history on top of IdTree.

Layout of the underlying id tree::

    conversation                 <- root, not a turn
     └─ U1                       <- turn
         ├─ U1::part-0:text      <- content fragment (structural)
         ├─ A1                   <- next turn on the main line
         │   └─ A1::part-0:text
         └─ U1::edit             <- branch root (structural)
             └─ U1b              <- alternate continuation

Only turns are ever returned by serialization; fragment and branch-root
nodes exist purely to shape the tree.

All operations run synchronously. Serialization is async only so the
optional validator may be a coroutine; the path is collected before the
first await, so a mutation can never interleave with its collection.
"""

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .errors import (
    AnchorNotFoundError,
    DuplicateTurnError,
    InvalidIdError,
    InvalidPathError,
    NodeNotFoundError,
    ParentNotFoundError,
    TurnNotFoundError,
)
from .id_tree import IdNode, IdTree
from .ids import branch_root_id, first_free_id, fragment_id
from .settings import BranchingSettings
from .types import fragment_kind, fragments_of, turn_id_of

logger = logging.getLogger(__name__)

# validator(turns) -> anything; may be a coroutine function
Validator = Callable[[List[Any]], Any]


class ConversationTree:
    """
    Branching conversation history.

    Turns are appended under the default tail unless an explicit parent is
    given. begin_branch() opens an alternate continuation under an existing
    node and moves the default tail there.
    """

    def __init__(
        self,
        root_id: Optional[str] = None,
        validator: Optional[Validator] = None,
        settings: Optional[BranchingSettings] = None,
    ):
        """
        Initialize an empty conversation.

        Args:
            root_id: Id of the structural root (default: settings.root_id)
            validator: Default validator run over serialized turns (optional)
            settings: Id-derivation settings (default: BranchingSettings())
        """
        self.settings = settings or BranchingSettings()
        self.tree = IdTree(root_id if root_id is not None else self.settings.root_id)
        self.validator = validator
        self._turns: Dict[str, Any] = {}
        self.last_default_parent_id: str = self.tree.root.id

    @property
    def root_id(self) -> str:
        return self.tree.root.id

    def has(self, node_id: str) -> bool:
        return self.tree.has(node_id)

    def is_turn(self, node_id: str) -> bool:
        return node_id in self._turns

    def get_turn(self, turn_id: str) -> Any:
        try:
            return self._turns[turn_id]
        except KeyError:
            raise TurnNotFoundError(turn_id) from None

    def turn_ids(self) -> List[str]:
        """Registered turn ids, in insertion order."""
        return list(self._turns)

    def _free_id(self, base: str) -> str:
        return first_free_id(base, self.tree.has, self.settings.suffix_separator)

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def add_turn(self, turn: Any, parent_id: Optional[str] = None) -> IdNode:
        """
        Append a turn and one structural child per content fragment.

        Args:
            turn: Turn payload exposing ``id`` and ``parts``
            parent_id: Attachment point (default: the current default tail)

        Returns:
            The new turn node
        """
        turn_id = turn_id_of(turn)
        if not isinstance(turn_id, str) or not turn_id:
            raise InvalidIdError("Turn id must be a non-empty string.")
        if self.tree.has(turn_id):
            raise DuplicateTurnError(turn_id)

        target = parent_id if parent_id is not None else self.last_default_parent_id
        if not self.tree.has(target):
            raise ParentNotFoundError(target)

        fragments = fragments_of(turn)
        node = self.tree.append_child(target, turn_id)

        s = self.settings
        for index, fragment in enumerate(fragments):
            base = fragment_id(turn_id, index, fragment_kind(fragment), s.id_separator, s.fragment_prefix)
            self.tree.append_child(turn_id, self._free_id(base))

        self._turns[turn_id] = turn
        self.last_default_parent_id = turn_id

        logger.debug(
            "Added turn %s under %s (%d fragments)", turn_id, target, len(fragments)
        )
        return node

    def begin_branch(self, anchor_id: str, label: Optional[str] = None) -> str:
        """
        Open a new branch root as the last child of anchor_id.

        Subsequent add_turn() calls without a parent land inside the branch.

        Args:
            anchor_id: Existing node to fork from
            label: Branch label used in the derived id (default from settings)

        Returns:
            Id of the new branch root
        """
        if not self.tree.has(anchor_id):
            raise AnchorNotFoundError(anchor_id)

        base = branch_root_id(
            anchor_id, label or self.settings.default_branch_label, self.settings.id_separator
        )
        branch_id = self._free_id(base)
        self.tree.append_child(anchor_id, branch_id)
        self.last_default_parent_id = branch_id

        logger.debug("Began branch %s under %s", branch_id, anchor_id)
        return branch_id

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def get_root_path(self, target_id: str) -> List[str]:
        """Ids from the first node below the root down to target_id, inclusive."""
        if not self.tree.has(target_id):
            raise NodeNotFoundError(target_id)

        path: List[str] = []
        current: Optional[str] = target_id
        while current is not None and current != self.root_id:
            path.append(current)
            current = self.tree.parent_of(current)

        path.reverse()
        return path

    def _collect_path(self, node_path: Sequence[str]) -> List[Any]:
        turns = []
        expected_parent = self.root_id
        for node_id in node_path:
            if self.tree.parent_of(node_id) != expected_parent:
                raise InvalidPathError(node_id, expected_parent)
            if node_id in self._turns:
                turns.append(self._turns[node_id])
            expected_parent = node_id
        return turns

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    async def _finish(self, turns: List[Any], validate: Union[Validator, bool, None]) -> List[Any]:
        if validate is False:
            return turns
        validator = self.validator if validate is None or validate is True else validate
        if validator is None:
            return turns

        result = validator(turns)
        if inspect.isawaitable(result):
            await result
        return turns

    async def serialize_from_node_path(
        self, node_path: Sequence[str], validate: Union[Validator, bool, None] = None
    ) -> List[Any]:
        """
        Turns along an explicit node path, in path order.

        The path must start at a direct child of the root and step one
        child at a time. Structural nodes on the path are skipped.

        Args:
            node_path: Node ids, root child first
            validate: Validator for this call; False disables, None uses the default
        """
        turns = self._collect_path(node_path)
        return await self._finish(turns, validate)

    async def serialize_to_node(
        self, target_id: str, validate: Union[Validator, bool, None] = None
    ) -> List[Any]:
        """Turns on the root path of target_id."""
        turns = self._collect_path(self.get_root_path(target_id))
        return await self._finish(turns, validate)

    async def serialize_by_ids(
        self, turn_ids: Sequence[str], validate: Union[Validator, bool, None] = None
    ) -> List[Any]:
        """Turns looked up directly by id, in the given order. No path checks."""
        turns = [self.get_turn(turn_id) for turn_id in turn_ids]
        return await self._finish(turns, validate)

    def render_tree(self, indent: str = "  ") -> str:
        """Indented id outline of the whole tree, one node per line."""
        lines: List[str] = []

        def visit(node: IdNode, depth: int, parent: Optional[IdNode]) -> bool:
            marker = "" if node.id in self._turns or parent is None else "~"
            lines.append(f"{indent * depth}{marker}{node.id}")
            return True

        self.tree.traverse_depth_first(visit)
        return "\n".join(lines)


__all__ = ["ConversationTree", "Validator"]
