"""
Errors raised by the identifier tree and the conversation tree.

Every failure is scoped to the call that raised it; the tree is left
exactly as it was before the call.
"""

from typing import Optional


class ConversationTreeError(Exception):
    """Base class for all tree errors."""

    pass


class InvalidIdError(ConversationTreeError, ValueError):
    """An id is empty or otherwise unusable."""

    pass


class DuplicateIdError(ConversationTreeError):
    """An append targets an id that already exists somewhere in the tree."""

    def __init__(self, node_id: str, message: Optional[str] = None):
        self.node_id = node_id
        super().__init__(message or f'Duplicate id "{node_id}".')


class DuplicateTurnError(DuplicateIdError):
    """A turn was inserted under an id already present in the tree."""

    def __init__(self, turn_id: str):
        super().__init__(turn_id, f'Turn id "{turn_id}" is already used in the conversation.')


class _MissingIdError(ConversationTreeError, LookupError):
    label = "Node"

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f'{self.label} "{node_id}" not found.')


class ParentNotFoundError(_MissingIdError):
    """The attachment point of an append does not exist."""

    label = "Parent"


class AnchorNotFoundError(_MissingIdError):
    """A branch was requested under an id that does not exist."""

    label = "Anchor"


class NodeNotFoundError(_MissingIdError):
    """A path target or lookup id does not exist."""

    label = "Node"


class TurnNotFoundError(_MissingIdError):
    """No turn payload is registered under the requested id."""

    label = "Turn"


class InvalidPathError(ConversationTreeError):
    """A node path is not a valid root-to-descendant walk."""

    def __init__(self, node_id: str, expected_parent: str):
        self.node_id = node_id
        self.expected_parent = expected_parent
        super().__init__(
            f'Invalid path: node "{node_id}" is not a child of "{expected_parent}".'
        )


__all__ = [
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
