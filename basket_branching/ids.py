"""
Deterministic id derivation for structural nodes.

Fragment and branch-root ids are built from the ids they hang off, so a
given sequence of inserts always yields the same ids. When a derived id is
already taken, a numeric suffix is appended and incremented until a free
id is found.
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


def first_free_id(base: str, is_taken: Callable[[str], bool], suffix_separator: str = "-") -> str:
    """
    Return base if free, else base + separator + n for the lowest free n >= 1.

    Args:
        base: Preferred id
        is_taken: Predicate telling whether an id is already in use
        suffix_separator: Text placed between base and the numeric suffix

    Returns:
        The first id not reported as taken
    """
    if not is_taken(base):
        return base

    n = 1
    while is_taken(f"{base}{suffix_separator}{n}"):
        n += 1

    candidate = f"{base}{suffix_separator}{n}"
    logger.debug("Derived id %r taken, using %r", base, candidate)
    return candidate


def fragment_id(turn_id: str, index: int, kind: str, separator: str = "::", prefix: str = "part") -> str:
    """Base id for the index-th content fragment of a turn, e.g. ``U1::part-0:text``."""
    return f"{turn_id}{separator}{prefix}-{index}:{kind}"


def branch_root_id(anchor_id: str, label: str, separator: str = "::") -> str:
    """Base id for a branch root under an anchor, e.g. ``A1::edit``."""
    return f"{anchor_id}{separator}{label}"


__all__ = ["first_free_id", "fragment_id", "branch_root_id"]
