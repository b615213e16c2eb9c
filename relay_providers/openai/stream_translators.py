"""OpenAI-family stream chunk translators.

Purpose:
    Turn decoded SSE payloads from the chat completions API (also served by
    Azure, OpenRouter and Ollama's ``/v1`` surface) and the Responses API into
    the engine's chunk operations.

Notes:
    - Chat deltas may repeat ``role`` on every chunk (Ollama does); the engine
      only honours the first role marker per message index.
    - Chat ``finish_reason`` ends the generation; the usage-only chunk that
      follows when ``stream_options.include_usage`` is set is still applied.
    - Responses ``*.done`` events repeat complete argument strings and are
      marked ``final`` so they never duplicate streamed fragments.
    - Explicit provider error payloads raise; everything unrecognized is
      passed on as :class:`Ignored`.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping

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
from ..base.tokens import extract_usage


def stream_error(payload: Any, *, provider: str | None = None) -> ProviderApiError:
    """Build the taxonomy error for an in-stream error payload."""
    err = payload.get("error") if isinstance(payload, Mapping) else None
    if not isinstance(err, Mapping):
        err = payload if isinstance(payload, Mapping) else {}
    message = str(err.get("message") or err.get("type") or "stream error")
    kind = str(err.get("type") or err.get("code") or "")
    if "rate_limit" in kind:
        return RateLimitError(message=message, provider=provider, body=payload)
    code = ErrorCode.UNAVAILABLE if "overloaded" in kind else ErrorCode.SERVER_ERROR
    return ProviderApiError(message=message, code=code, provider=provider, body=payload)


def _usage_ops(payload: Mapping[str, Any]) -> List[ChunkOp]:
    usage = extract_usage(payload)
    if usage is None:
        return []
    return [UsageDelta(input_tokens=usage.input_tokens, output_tokens=usage.output_tokens)]


def translate_chat_chunk(chunk: Dict[str, Any]) -> Iterator[ChunkOp]:
    """Translate one ``chat.completion.chunk`` payload."""
    if chunk.get("error"):
        raise stream_error(chunk)
    if chunk.get("id"):
        yield MetadataDelta(generation_id=str(chunk["id"]))
    yield from _usage_ops(chunk)
    for choice in chunk.get("choices") or []:
        index = int(choice.get("index") or 0)
        delta = choice.get("delta") or {}
        if delta.get("role"):
            yield RoleMarker(index, delta["role"])
        if isinstance(delta.get("content"), str):
            yield TextDelta(index, delta["content"])
        for pos, call in enumerate(delta.get("tool_calls") or []):
            fn = call.get("function") or {}
            yield ToolCallDelta(
                index,
                int(call.get("index", pos)),
                id=call.get("id"),
                name=fn.get("name"),
                arguments=fn.get("arguments") if "arguments" in fn else None,
            )
        if choice.get("finish_reason"):
            yield Terminal(finish_reason=choice["finish_reason"])


_RESPONSES_TERMINAL = ("response.completed", "response.done", "response.incomplete")
_RESPONSES_FAILED = ("response.failed", "error")


def translate_responses_event(event: Dict[str, Any]) -> Iterator[ChunkOp]:
    """Translate one Responses API streaming event."""
    kind = str(event.get("type") or "")
    if kind in _RESPONSES_FAILED:
        response = event.get("response")
        raise stream_error(response if isinstance(response, Mapping) and response.get("error") else event)

    if kind == "response.created":
        response = event.get("response") or {}
        if response.get("id"):
            yield MetadataDelta(generation_id=str(response["id"]))
        return

    if kind == "response.output_item.added":
        item = event.get("item") or {}
        if item.get("type") == "message":
            yield RoleMarker(0, item.get("role") or "assistant")
        elif item.get("type") == "function_call":
            yield ToolCallDelta(
                0,
                int(event.get("output_index") or 0),
                id=item.get("call_id"),
                name=item.get("name"),
                arguments=item.get("arguments") or None,
            )
        else:
            yield Ignored(f"{kind}:{item.get('type')}")
        return

    if kind == "response.output_text.delta":
        yield TextDelta(0, event.get("delta") or "")
        return

    if kind == "response.function_call_arguments.delta":
        yield ToolCallDelta(0, int(event.get("output_index") or 0), arguments=event.get("delta") or "")
        return

    if kind == "response.function_call_arguments.done":
        yield ToolCallDelta(0, int(event.get("output_index") or 0), arguments=event.get("arguments"), final=True)
        return

    if kind == "response.output_item.done":
        item = event.get("item") or {}
        if item.get("type") == "function_call":
            yield ToolCallDelta(
                0,
                int(event.get("output_index") or 0),
                id=item.get("call_id"),
                name=item.get("name"),
                arguments=item.get("arguments"),
                final=True,
            )
        else:
            yield Ignored(kind)
        return

    if kind in _RESPONSES_TERMINAL:
        response = event.get("response") or {}
        if response.get("id"):
            yield MetadataDelta(generation_id=str(response["id"]))
        yield from _usage_ops(event)
        yield Terminal(finish_reason=response.get("status") or kind.rsplit(".", 1)[-1])
        return

    yield Ignored(kind or "unknown")


def translate_openai_chunk(chunk: Dict[str, Any]) -> Iterator[ChunkOp]:
    """Dispatch on payload shape for adapters serving both API families."""
    kind = str(chunk.get("type") or "")
    if kind.startswith("response.") or kind == "error":
        return translate_responses_event(chunk)
    return translate_chat_chunk(chunk)


__all__ = [
    "stream_error",
    "translate_chat_chunk",
    "translate_responses_event",
    "translate_openai_chunk",
]
