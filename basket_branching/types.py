"""
Turn payload types.

The conversation tree only needs a turn to have an ``id`` and an ordered
sequence of ``parts``, each with a kind tag. Anything shaped like that works,
attribute-style objects and plain dicts alike. ChatTurn is a concrete
pydantic schema for callers that want one, and validate_chat_turns can be
plugged in as the serialization validator.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import (
    Annotated,
    Any,
    Dict,
    List,
    Literal,
    Optional,
    Protocol,
    Sequence,
    Union,
    runtime_checkable,
)

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

DEFAULT_FRAGMENT_KIND = "part"


@runtime_checkable
class TurnLike(Protocol):
    """Anything with a unique id and an ordered sequence of content parts."""

    id: str
    parts: Sequence[Any]


# ============================================================================
# Content Parts
# ============================================================================

class TextPart(BaseModel):
    """Plain text block."""
    type: Literal["text"] = "text"
    text: str


class ReasoningPart(BaseModel):
    """Reasoning/thinking block produced by the model."""
    type: Literal["reasoning"] = "reasoning"
    text: str
    signature: Optional[str] = None


class ToolCallPart(BaseModel):
    """Tool invocation requested by the assistant."""
    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str = Field(..., alias="toolCallId")
    tool_name: str = Field(..., alias="toolName")
    arguments: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)


class ToolResultPart(BaseModel):
    """Result returned for an earlier tool call."""
    type: Literal["tool-result"] = "tool-result"
    tool_call_id: str = Field(..., alias="toolCallId")
    tool_name: str = Field(..., alias="toolName")
    output: Any = None
    is_error: bool = Field(False, alias="isError")

    model_config = ConfigDict(populate_by_name=True)


class FilePart(BaseModel):
    """File or image attachment."""
    type: Literal["file"] = "file"
    media_type: str = Field(..., alias="mediaType")
    url: str
    filename: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


Part = Annotated[
    Union[TextPart, ReasoningPart, ToolCallPart, ToolResultPart, FilePart],
    Field(discriminator="type"),
]


# ============================================================================
# Turns
# ============================================================================

class ChatTurn(BaseModel):
    """One message of the conversation."""
    id: str = Field(..., min_length=1)
    role: Literal["user", "assistant", "system"]
    parts: List[Part] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None


_chat_turns_adapter = TypeAdapter(List[ChatTurn])


def validate_chat_turns(turns: Sequence[Any]) -> List[ChatTurn]:
    """
    Validate turns against the ChatTurn schema.

    Accepts ChatTurn instances or plain dicts. Raises pydantic's
    ValidationError on the first invalid list.
    """
    return _chat_turns_adapter.validate_python(
        [t.model_dump(by_alias=True) if isinstance(t, BaseModel) else t for t in turns]
    )


# ============================================================================
# Duck-typed accessors
# ============================================================================

def _read(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def turn_id_of(turn: Any) -> Optional[str]:
    return _read(turn, "id")


def fragments_of(turn: Any) -> List[Any]:
    parts = _read(turn, "parts")
    if parts is None:
        return []
    return list(parts)


def fragment_kind(fragment: Any) -> str:
    """Kind tag of a fragment: its ``kind``, else its ``type``, else "part"."""
    for name in ("kind", "type"):
        value = _read(fragment, name)
        if value:
            return str(value)
    return DEFAULT_FRAGMENT_KIND


__all__ = [
    "TurnLike",
    "TextPart",
    "ReasoningPart",
    "ToolCallPart",
    "ToolResultPart",
    "FilePart",
    "Part",
    "ChatTurn",
    "validate_chat_turns",
    "turn_id_of",
    "fragments_of",
    "fragment_kind",
]
