"""Normalized operations decoded from provider stream chunks.

Each provider family supplies a translator turning one raw chunk (a decoded
SSE/event-stream payload) into an iterable of these operations. The engine only
ever sees operations, which keeps it independent of any wire format.

``ToolCallDelta.arguments`` keeps three states apart: ``None`` (this fragment
says nothing about arguments), ``""`` (explicitly empty), or text to append.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class RoleMarker:
    """Explicit role announcement for message ``index``."""

    index: int
    role: str


@dataclass(frozen=True)
class TextDelta:
    index: int
    text: str


@dataclass(frozen=True)
class ToolCallDelta:
    """Fragment of tool call ``tool_index`` inside message ``index``.

    ``final`` marks a provider "done" event that repeats the complete argument
    string; it only fills a buffer that is still unpopulated or empty.
    """

    index: int
    tool_index: int
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: Optional[str] = None
    final: bool = False


@dataclass(frozen=True)
class UsageDelta:
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


@dataclass(frozen=True)
class MetadataDelta:
    generation_id: Optional[str] = None
    finish_reason: Optional[str] = None


@dataclass(frozen=True)
class Terminal:
    """End-of-content / end-of-response signal."""

    finish_reason: Optional[str] = None


@dataclass(frozen=True)
class Ignored:
    """Informational event carrying no content (ping, signature, citation...)."""

    event_type: str


ChunkOp = Union[RoleMarker, TextDelta, ToolCallDelta, UsageDelta, MetadataDelta, Terminal, Ignored]

__all__ = [
    "RoleMarker",
    "TextDelta",
    "ToolCallDelta",
    "UsageDelta",
    "MetadataDelta",
    "Terminal",
    "Ignored",
    "ChunkOp",
]
