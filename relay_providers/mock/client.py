"""Deterministic mock provider for offline testing.

Purpose
-------
Provide a provider that runs the complete generation pipeline (adapter,
transport, streaming engine, tool-choice clearing, exception handling)
without network traffic. Replies are canned and rendered as chat completions
wire payloads by an in-memory transport, so tests exercise the same parsing
and reconstruction code paths as real providers.

Reply sources (first match wins)
--------------------------------
1. ``replies``: a queue consumed one reply per generation.
2. ``catalog``: mapping from the last user message (exact, then lowercase,
   then ``"*"``) to a reply.
3. An empty assistant message.

A reply is a string, a mapping (``content``, ``actions``, ``usage``,
``chunk_size``), a :class:`MockReply`, or an exception instance, which is
raised by the transport.

Recording
---------
Every completed generation is appended to the injected
:class:`GenerationRecorder` with the prompt snapshot, the response, and the
lifecycle events when streamed.
"""

from __future__ import annotations

import json
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence

from ..base.adapter_kind import AdapterKind
from ..base.models import Prompt, Response, WireRequest
from ..base.provider import AdapterBuilder, BaseProvider, PreparedCall
from ..base.streaming import Broadcaster, StreamEvent
from ..openai.chat_adapter import ChatAdapter

MOCK_BASE_URL = "mock://local"


@dataclass
class MockReply:
    """Canned assistant turn.

    ``actions`` entries are mappings with ``name`` and optionally ``id`` and
    ``params``; ``params`` absent means the call carries no arguments at all,
    ``{}`` means explicitly empty arguments. ``arguments`` may be given
    instead of ``params`` to inject raw (possibly malformed) text.
    """

    content: str = ""
    actions: List[Dict[str, Any]] = field(default_factory=list)
    usage: Optional[Dict[str, int]] = None
    chunk_size: int = 16


def coerce_reply(value: Any) -> Any:
    if isinstance(value, (MockReply, BaseException)):
        return value
    if value is None:
        return MockReply()
    if isinstance(value, str):
        return MockReply(content=value)
    if isinstance(value, Mapping):
        return MockReply(
            content=str(value.get("content") or ""),
            actions=[dict(a) for a in value.get("actions") or []],
            usage=dict(value["usage"]) if value.get("usage") else None,
            chunk_size=int(value.get("chunk_size") or 16),
        )
    raise TypeError(f"unsupported mock reply: {type(value).__name__}")


def _chunk_text(text: str, chunk_size: int = 16) -> List[str]:
    """Split text into readable chunks for deterministic streaming."""
    if not text:
        return []
    return [text[i : i + chunk_size] for i in range(0, len(text), chunk_size)]


def _arguments_text(action: Mapping[str, Any]) -> Optional[str]:
    if "arguments" in action:
        return action["arguments"]
    if "params" not in action or action["params"] is None:
        return None
    return json.dumps(action["params"]) if action["params"] else ""


def _prompt_key(body: Mapping[str, Any]) -> str:
    for message in reversed(body.get("messages") or []):
        if message.get("role") == "user" and isinstance(message.get("content"), str):
            return message["content"].strip() or "*"
    return "*"


@dataclass
class Generation:
    """One recorded generation."""

    prompt: Optional[Prompt]
    response: Response
    streamed: bool = False
    events: List[StreamEvent] = field(default_factory=list)


class GenerationRecorder:
    """Thread-safe list of recorded generations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generations: List[Generation] = []

    def record(self, generation: Generation) -> None:
        with self._lock:
            self._generations.append(generation)

    @property
    def generations(self) -> List[Generation]:
        with self._lock:
            return list(self._generations)

    @property
    def last(self) -> Optional[Generation]:
        with self._lock:
            return self._generations[-1] if self._generations else None

    def clear(self) -> None:
        with self._lock:
            self._generations.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._generations)


class MockTransport:
    """In-memory transport rendering replies as chat completions payloads."""

    def __init__(self, replies: Optional[Sequence[Any]] = None, catalog: Optional[Mapping[str, Any]] = None) -> None:
        self._replies = [coerce_reply(r) for r in replies or ()]
        self._catalog = dict(catalog or {})
        self._counter = 0
        self._lock = threading.Lock()
        self.requests: List[WireRequest] = []

    def queue(self, *replies: Any) -> None:
        with self._lock:
            self._replies.extend(coerce_reply(r) for r in replies)

    def _select(self, request: WireRequest) -> MockReply:
        with self._lock:
            self.requests.append(request)
            self._counter += 1
            reply = self._replies.pop(0) if self._replies else None
        if reply is None:
            key = _prompt_key(request.body)
            reply = coerce_reply(
                self._catalog.get(key) or self._catalog.get(key.lower()) or self._catalog.get("*")
            )
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def _tool_calls(self, reply: MockReply) -> List[Dict[str, Any]]:
        calls = []
        for pos, action in enumerate(reply.actions):
            fn: Dict[str, Any] = {"name": action["name"]}
            arguments = _arguments_text(action)
            if arguments is not None:
                fn["arguments"] = arguments
            calls.append({"id": action.get("id") or f"call_{pos}", "type": "function", "function": fn})
        return calls

    def send(self, request: WireRequest) -> Dict[str, Any]:
        reply = self._select(request)
        message: Dict[str, Any] = {"role": "assistant", "content": reply.content or None}
        calls = self._tool_calls(reply)
        if calls:
            message["tool_calls"] = calls
        payload: Dict[str, Any] = {
            "id": f"mock-{self._counter}",
            "object": "chat.completion",
            "model": request.body.get("model"),
            "choices": [{"index": 0, "message": message, "finish_reason": "tool_calls" if calls else "stop"}],
        }
        if reply.usage:
            payload["usage"] = dict(reply.usage)
        return payload

    @contextmanager
    def stream(self, request: WireRequest) -> Iterator[Iterator[Dict[str, Any]]]:
        reply = self._select(request)
        yield iter(self._chunks(reply, f"mock-{self._counter}"))

    def _chunks(self, reply: MockReply, gen_id: str) -> List[Dict[str, Any]]:
        def chunk(delta: Dict[str, Any], finish: Optional[str] = None) -> Dict[str, Any]:
            return {"id": gen_id, "object": "chat.completion.chunk", "choices": [{"index": 0, "delta": delta, "finish_reason": finish}]}

        chunks = [chunk({"role": "assistant", "content": ""})]
        chunks.extend(chunk({"content": piece}) for piece in _chunk_text(reply.content, reply.chunk_size))
        for pos, call in enumerate(self._tool_calls(reply)):
            head: Dict[str, Any] = {"index": pos, "id": call["id"], "type": "function", "function": {"name": call["function"]["name"]}}
            arguments = call["function"].get("arguments")
            if arguments == "":
                head["function"]["arguments"] = ""
            chunks.append(chunk({"tool_calls": [head]}))
            for piece in _chunk_text(arguments or "", reply.chunk_size):
                chunks.append(chunk({"tool_calls": [{"index": pos, "function": {"arguments": piece}}]}))
        chunks.append(chunk({}, "tool_calls" if reply.actions else "stop"))
        if reply.usage:
            chunks.append({"id": gen_id, "object": "chat.completion.chunk", "choices": [], "usage": dict(reply.usage)})
        return chunks


class MockProvider(BaseProvider):
    """Provider returning canned replies through the full pipeline."""

    provider_name = "mock"

    def __init__(
        self,
        *,
        replies: Optional[Sequence[Any]] = None,
        catalog: Optional[Mapping[str, Any]] = None,
        recorder: Optional[GenerationRecorder] = None,
        model: str = "mock-gpt",
        **kwargs: Any,
    ) -> None:
        kwargs.setdefault("transport", MockTransport(replies, catalog))
        super().__init__(model=model, **kwargs)
        self.recorder = recorder if recorder is not None else GenerationRecorder()

    @property
    def mock_transport(self) -> MockTransport:
        return self.transport  # type: ignore[return-value]

    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:
        return {AdapterKind.CHAT: self.chat_adapter}

    def chat_adapter(self, prompt: Optional[Prompt] = None) -> ChatAdapter:
        return ChatAdapter(
            provider=self.provider_name,
            base_url=MOCK_BASE_URL,
            model=self.config.get("model"),
            require_api_key=False,
        )

    def _generate(self, call: PreparedCall) -> Response:
        response = super()._generate(call)
        self.recorder.record(Generation(prompt=response.prompt, response=response))
        return response

    def _stream(self, call: PreparedCall, broadcaster: Optional[Broadcaster], cancel_token: Any) -> Response:
        events: List[StreamEvent] = []

        def tee(event: StreamEvent) -> None:
            events.append(event)
            if broadcaster is not None:
                broadcaster(event)

        response = super()._stream(call, tee, cancel_token)
        self.recorder.record(Generation(prompt=response.prompt, response=response, streamed=True, events=events))
        return response


__all__ = ["MockProvider", "MockReply", "MockTransport", "GenerationRecorder", "Generation", "coerce_reply"]
