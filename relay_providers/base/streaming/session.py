"""One streaming generation driven end to end.

:class:`StreamSession` owns the :class:`StreamState` of a single generation,
forwards every lifecycle event to the caller's broadcaster, and exposes the
caller-driven ``abort``. The broadcaster runs synchronously on the thread
feeding chunks, so a slow broadcaster only slows its own generation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from ..cancellation import CancellationToken
from ..models import Message, Usage
from .engine import StreamEngine
from .lifecycle import Broadcaster, LifecycleKind, StreamEvent
from .stream_state import StreamState


@dataclass
class StreamResult:
    """Outcome of a streamed generation."""

    message: Message
    messages: Dict[int, Message]
    usage: Optional[Usage] = None
    finish_reason: Optional[str] = None
    generation_id: Optional[str] = None
    aborted: bool = False
    events: List[StreamEvent] = field(default_factory=list)

    def count(self, kind: LifecycleKind) -> int:
        return sum(1 for e in self.events if e.kind is kind)


class StreamSession:
    """Feed chunks of one generation through a :class:`StreamEngine`."""

    def __init__(self, engine: StreamEngine, broadcaster: Optional[Broadcaster] = None) -> None:
        self._engine = engine
        self._broadcaster = broadcaster
        self._state: StreamState = engine.start()
        self._events: List[StreamEvent] = []

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def events(self) -> List[StreamEvent]:
        return list(self._events)

    @property
    def closed(self) -> bool:
        return self._state.closed

    def feed(self, chunk: Dict[str, Any]) -> List[StreamEvent]:
        return self._emit(self._engine.feed(self._state, chunk))

    def abort(self, reason: Optional[str] = None) -> List[StreamEvent]:
        """Force CLOSE now; idempotent."""
        return self._emit(self._engine.abort(self._state, reason))

    def finish(self) -> List[StreamEvent]:
        """Signal end of transport stream (CLOSE if not already closed)."""
        return self._emit(self._engine.end_of_stream(self._state))

    def run(
        self,
        chunks: Iterable[Dict[str, Any]],
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> StreamResult:
        """Consume ``chunks`` until CLOSE, exhaustion, or cancellation."""
        for chunk in chunks:
            if cancel_token is not None and cancel_token.cancelled:
                self.abort(cancel_token.reason or "cancelled")
                break
            self.feed(chunk)
        else:
            if cancel_token is not None and cancel_token.cancelled:
                self.abort(cancel_token.reason or "cancelled")
        self.finish()
        return self.result()

    def result(self) -> StreamResult:
        messages = self._engine.finalize(self._state)
        primary = messages[min(messages)]
        return StreamResult(
            message=primary,
            messages=messages,
            usage=self._engine.usage(self._state),
            finish_reason=self._state.finish_reason,
            generation_id=self._state.generation_id,
            aborted=self._state.aborted,
            events=list(self._events),
        )

    def _emit(self, events: List[StreamEvent]) -> List[StreamEvent]:
        for event in events:
            self._events.append(event)
            if self._broadcaster is not None:
                self._broadcaster(event)
        return events


__all__ = ["StreamSession", "StreamResult"]
