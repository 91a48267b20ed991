"""
basket-branching: branching conversation history with path serialization.
"""

from .conversation import ConversationTree, Validator
from .errors import (
    AnchorNotFoundError,
    ConversationTreeError,
    DuplicateIdError,
    DuplicateTurnError,
    InvalidIdError,
    InvalidPathError,
    NodeNotFoundError,
    ParentNotFoundError,
    TurnNotFoundError,
)
from .id_tree import IdNode, IdTree
from .ids import branch_root_id, first_free_id, fragment_id
from .settings import BranchingSettings, SettingsManager
from .types import ChatTurn, TurnLike, validate_chat_turns

__all__ = [
    # Trees
    "IdNode",
    "IdTree",
    "ConversationTree",
    "Validator",
    # Ids
    "first_free_id",
    "fragment_id",
    "branch_root_id",
    # Turns
    "ChatTurn",
    "TurnLike",
    "validate_chat_turns",
    # Settings
    "BranchingSettings",
    "SettingsManager",
    # Errors
    "ConversationTreeError",
    "InvalidIdError",
    "DuplicateIdError",
    "DuplicateTurnError",
    "ParentNotFoundError",
    "AnchorNotFoundError",
    "NodeNotFoundError",
    "TurnNotFoundError",
    "InvalidPathError",
]
