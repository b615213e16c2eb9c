"""Streaming package for the provider layer.

Exposes the reconstruction engine, its per-generation state, the tool-call
merger, lifecycle events, and the session driver under one namespace.
"""

from .chunk_ops import (
    ChunkOp,
    Ignored,
    MetadataDelta,
    RoleMarker,
    Terminal,
    TextDelta,
    ToolCallDelta,
    UsageDelta,
)
from .engine import StreamEngine, Translator
from .lifecycle import Broadcaster, LifecycleKind, StreamEvent
from .session import StreamResult, StreamSession
from .stream_state import MessageFrame, StreamState, ToolCallBuffer
from .tool_call_merger import ArgumentOutcome, finalize_arguments, merge_tool_fragment

__all__ = [
    "ChunkOp",
    "Ignored",
    "MetadataDelta",
    "RoleMarker",
    "Terminal",
    "TextDelta",
    "ToolCallDelta",
    "UsageDelta",
    "StreamEngine",
    "Translator",
    "Broadcaster",
    "LifecycleKind",
    "StreamEvent",
    "StreamResult",
    "StreamSession",
    "MessageFrame",
    "StreamState",
    "ToolCallBuffer",
    "ArgumentOutcome",
    "finalize_arguments",
    "merge_tool_fragment",
]
