"""
Shared pytest fixtures for basket-branching tests.
"""

from typing import Any, Dict

import pytest

from basket_branching import ConversationTree


def make_text(turn_id: str, role: str, text: str) -> Dict[str, Any]:
    """A dict turn with a single text part."""
    return {"id": turn_id, "role": role, "parts": [{"type": "text", "text": text}]}


def ids(turns) -> list:
    return [t["id"] if isinstance(t, dict) else t.id for t in turns]


@pytest.fixture
def conversation():
    """Empty conversation rooted at "conv"."""
    return ConversationTree("conv")


@pytest.fixture
def linear_conversation(conversation):
    """
    conv -> U1 -> A1, one text part each.
    """
    conversation.add_turn(make_text("U1", "user", "hi"))
    conversation.add_turn(make_text("A1", "assistant", "hello"))
    return conversation


# Configure pytest markers
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for component interaction")
