"""
Command line entry point: replay a script of turns and print a conversation path.

Script format (JSON list)::

    [
      {"op": "add", "turn": {"id": "U1", "role": "user", "parts": [...]}},
      {"op": "add", "turn": {...}, "parent": "U1"},
      {"op": "branch", "anchor": "A1", "label": "edit"}
    ]
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

from .conversation import ConversationTree
from .errors import ConversationTreeError
from .settings import SettingsManager
from .types import validate_chat_turns

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Log to stderr; LOG_LEVEL overrides the WARNING default."""
    fmt = "%(asctime)s %(name)s: %(levelname)s: %(message)s"
    level = logging.WARNING
    log_level_name = (os.environ.get("LOG_LEVEL") or "").upper()
    if log_level_name:
        named_level = getattr(logging, log_level_name, None)
        if isinstance(named_level, int):
            level = named_level
    logging.basicConfig(level=level, format=fmt, stream=sys.stderr)


# op name -> keys that must be present
REQUIRED_KEYS = {
    "add": ("turn",),
    "branch": ("anchor",),
}


def replay(conversation: ConversationTree, operations: List[dict]) -> None:
    """Apply add/branch operations in order."""
    for i, op in enumerate(operations):
        if not isinstance(op, dict):
            raise ValueError(f"Operation {i}: expected an object, got {type(op).__name__}")
        kind = op.get("op")
        if not isinstance(kind, str) or kind not in REQUIRED_KEYS:
            raise ValueError(f"Operation {i}: unknown op {kind!r}")
        missing = [key for key in REQUIRED_KEYS[kind] if key not in op]
        if missing:
            raise ValueError(f"Operation {i}: {kind!r} is missing {', '.join(missing)}")

        if kind == "add":
            conversation.add_turn(op["turn"], op.get("parent"))
        else:
            conversation.begin_branch(op["anchor"], op.get("label"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="basket-branching",
        description="Replay a branching conversation script and print one line of it.",
    )
    parser.add_argument("script", type=Path, help="JSON list of add/branch operations")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--to", dest="target", help="Print the conversation up to this node")
    target.add_argument("--path", help="Comma-separated node path to print")
    parser.add_argument("--tree", action="store_true", help="Print the tree outline instead")
    parser.add_argument("--validate", action="store_true", help="Validate output turns against the chat schema")
    parser.add_argument("--config-dir", type=Path, default=None, help="Settings directory")
    return parser


async def run(args: argparse.Namespace) -> Any:
    settings = SettingsManager(args.config_dir).load()
    conversation = ConversationTree(
        settings=settings,
        validator=validate_chat_turns if args.validate else None,
    )

    with open(args.script, "r", encoding="utf-8") as f:
        operations = json.load(f)
    if not isinstance(operations, list):
        raise ValueError("Script must be a JSON list of operations")
    replay(conversation, operations)

    if args.tree:
        return conversation.render_tree()
    if args.path:
        return await conversation.serialize_from_node_path(
            [p.strip() for p in args.path.split(",") if p.strip()]
        )
    target = args.target or conversation.last_default_parent_id
    if target == conversation.root_id:
        return []
    return await conversation.serialize_to_node(target)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    setup_logging()
    args = build_parser().parse_args(argv)

    try:
        result = asyncio.run(run(args))
    except (ConversationTreeError, ValueError, OSError) as e:
        logger.debug("Replay failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
