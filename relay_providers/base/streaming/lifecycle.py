"""Lifecycle events delivered to stream broadcasters."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from ..models import Message
from .chunk_ops import ToolCallDelta


class LifecycleKind(str, Enum):
    OPEN = "open"
    UPDATE = "update"
    CLOSE = "close"


@dataclass(frozen=True)
class StreamEvent:
    """One lifecycle transition.

    Attributes:
        kind: OPEN, UPDATE or CLOSE.
        message: Cumulative snapshot of the message at ``index``. On CLOSE it
            is the finalized message (tool arguments parsed).
        delta: Text fragment carried by an UPDATE, if any.
        tool_deltas: Tool-call fragments carried by an UPDATE, in chunk order.
        index: Message index the event refers to.
        aborted: True on a CLOSE forced by abort.
    """

    kind: LifecycleKind
    message: Message
    delta: Optional[str] = None
    tool_deltas: Tuple[ToolCallDelta, ...] = ()
    index: int = 0
    aborted: bool = False


Broadcaster = Callable[[StreamEvent], object]

__all__ = ["LifecycleKind", "StreamEvent", "Broadcaster"]
