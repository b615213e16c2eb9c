"""Per-generation streaming state.

A :class:`StreamState` is created by :meth:`StreamEngine.start` for exactly one
generation and passed explicitly through every engine call. The engine keeps
no reference to it, so one engine instance can serve concurrent generations.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..models import Message


@dataclass
class ToolCallBuffer:
    """Accumulator for one tool call.

    ``id`` and ``name`` are set once; ``arguments`` stays ``None`` until a
    fragment supplies argument text (possibly the empty string).
    """

    id: Optional[str] = None
    name: Optional[str] = None
    arguments: Optional[str] = None


@dataclass
class MessageFrame:
    role: Optional[str] = None
    generation_id: Optional[str] = None


@dataclass
class StreamState:
    """Mutable state of one in-flight generation.

    Attributes:
        message_stack: In-progress messages by index.
        text: Text fragments per message index, in arrival order.
        tool_calls: Buffers keyed by ``(message index, tool-call index)``.
        open: True between OPEN and CLOSE.
        opened: OPEN has been emitted (never reset).
        closed: CLOSE has been emitted.
        aborted: CLOSE was forced by abort.
    """

    message_stack: Dict[int, MessageFrame] = field(default_factory=dict)
    text: Dict[int, List[str]] = field(default_factory=dict)
    tool_calls: Dict[Tuple[int, int], ToolCallBuffer] = field(default_factory=dict)
    open: bool = False
    opened: bool = False
    closed: bool = False
    aborted: bool = False
    finish_reason: Optional[str] = None
    generation_id: Optional[str] = None
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    updates: int = 0
    final_messages: Optional[Dict[int, Message]] = None

    def frame(self, index: int) -> MessageFrame:
        if index not in self.message_stack:
            self.message_stack[index] = MessageFrame()
            self.text[index] = []
        return self.message_stack[index]

    def tool_buffer(self, index: int, tool_index: int) -> ToolCallBuffer:
        self.frame(index)
        key = (index, tool_index)
        if key not in self.tool_calls:
            self.tool_calls[key] = ToolCallBuffer()
        return self.tool_calls[key]

    def tool_buffers_for(self, index: int) -> List[ToolCallBuffer]:
        return [buf for (msg_idx, _), buf in sorted(self.tool_calls.items()) if msg_idx == index]


__all__ = ["StreamState", "ToolCallBuffer", "MessageFrame"]
