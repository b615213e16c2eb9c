"""Anthropic streaming helpers.

Purpose:
- Translate Messages API stream events (SSE payloads, or the inner events of
  Bedrock's event stream) into engine chunk operations.

Event mapping:
- ``message_start``: generation id, role marker, input usage.
- ``content_block_start``: opens a text block (with any initial text) or a
  ``tool_use`` block (id and name; the empty ``input`` placeholder is not
  treated as arguments).
- ``content_block_delta``: ``text_delta`` -> text, ``input_json_delta`` ->
  argument fragment; thinking, signature and citation deltas are absorbed.
- ``message_delta``: stop reason and output usage.
- ``message_stop``: terminal.
- ``ping`` and ``content_block_stop``: absorbed.
- ``error``: raises.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, Mapping

from ..base.errors import ErrorCode, ProviderApiError, RateLimitError
from ..base.streaming import (
    ChunkOp,
    Ignored,
    MetadataDelta,
    RoleMarker,
    Terminal,
    TextDelta,
    ToolCallDelta,
    UsageDelta,
)

ANTHROPIC_EVENT_TYPES = frozenset(
    {
        "message_start",
        "content_block_start",
        "content_block_delta",
        "content_block_stop",
        "message_delta",
        "message_stop",
        "ping",
    }
)

_ERROR_CODES = {
    "overloaded_error": ErrorCode.UNAVAILABLE,
    "api_error": ErrorCode.SERVER_ERROR,
    "authentication_error": ErrorCode.AUTH,
    "permission_error": ErrorCode.AUTH,
    "invalid_request_error": ErrorCode.VALIDATION,
    "not_found_error": ErrorCode.NOT_FOUND,
    "request_too_large": ErrorCode.VALIDATION,
}


def anthropic_error(payload: Mapping[str, Any], *, provider: str = "anthropic") -> ProviderApiError:
    """Map an Anthropic ``{"type": "error", "error": {...}}`` payload."""
    err = payload.get("error") if isinstance(payload.get("error"), Mapping) else {}
    kind = str(err.get("type") or "api_error")
    message = str(err.get("message") or kind)
    if kind == "rate_limit_error":
        return RateLimitError(message=message, provider=provider, body=dict(payload))
    code = _ERROR_CODES.get(kind, ErrorCode.SERVER_ERROR)
    return ProviderApiError(
        message=message,
        code=code,
        provider=provider,
        retryable=code is ErrorCode.UNAVAILABLE,
        body=dict(payload),
    )


def translate_stream_chunk(event: Dict[str, Any]) -> Iterator[ChunkOp]:
    """Map one Anthropic stream event to chunk operations."""
    kind = str(event.get("type") or "")
    if kind == "error":
        raise anthropic_error(event)

    if kind == "message_start":
        message = event.get("message") or {}
        if message.get("id"):
            yield MetadataDelta(generation_id=str(message["id"]))
        yield RoleMarker(0, message.get("role") or "assistant")
        usage = message.get("usage") or {}
        if usage:
            yield UsageDelta(input_tokens=usage.get("input_tokens"), output_tokens=usage.get("output_tokens"))
        return

    if kind == "content_block_start":
        block = event.get("content_block") or {}
        index = int(event.get("index") or 0)
        if block.get("type") == "text":
            yield TextDelta(0, block.get("text") or "")
        elif block.get("type") == "tool_use":
            initial = block.get("input")
            yield ToolCallDelta(
                0,
                index,
                id=block.get("id"),
                name=block.get("name"),
                arguments=json.dumps(initial) if initial else None,
            )
        else:
            yield Ignored(f"{kind}:{block.get('type')}")
        return

    if kind == "content_block_delta":
        delta = event.get("delta") or {}
        index = int(event.get("index") or 0)
        if delta.get("type") == "text_delta":
            yield TextDelta(0, delta.get("text") or "")
        elif delta.get("type") == "input_json_delta":
            yield ToolCallDelta(0, index, arguments=delta.get("partial_json") or "")
        else:
            yield Ignored(f"{kind}:{delta.get('type')}")
        return

    if kind == "message_delta":
        delta = event.get("delta") or {}
        usage = event.get("usage") or {}
        if delta.get("stop_reason"):
            yield MetadataDelta(finish_reason=delta["stop_reason"])
        if usage:
            yield UsageDelta(input_tokens=usage.get("input_tokens"), output_tokens=usage.get("output_tokens"))
        return

    if kind == "message_stop":
        yield Terminal()
        return

    yield Ignored(kind or "unknown")


__all__ = ["ANTHROPIC_EVENT_TYPES", "anthropic_error", "translate_stream_chunk"]
