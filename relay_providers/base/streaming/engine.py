"""Streaming reconstruction engine.

Purpose
-------
Turn a provider's chunk sequence into canonical lifecycle events and final
canonical messages. The state machine per generation is::

    IDLE -> OPEN -> UPDATE* -> CLOSE

- OPEN fires once, on the first chunk carrying content or an explicit role
  marker.
- Every content-bearing chunk (including the one that opened) yields one
  UPDATE with the cumulative snapshot and the chunk's delta.
- CLOSE fires once, on the terminal chunk, on end of stream, or on abort.
  Later terminal chunks and double aborts are no-ops. ``open`` is reset.
- Informational chunks (ping, signature, citation, thinking...) are absorbed.

Design
------
The engine is stateless between calls: every method receives the
generation's :class:`StreamState`. Chunk decoding is delegated to a
provider-family ``translator`` (raw chunk -> iterable of chunk operations).

Failure semantics
-----------------
Unknown events and empty/missing/malformed tool arguments never raise.
Translators may raise :class:`~relay_providers.base.errors.ProviderApiError`
for explicit provider error events.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import MALFORMED_ARGUMENTS, Action, Message, Usage
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
from .lifecycle import LifecycleKind, StreamEvent
from .stream_state import StreamState
from .tool_call_merger import ArgumentOutcome, finalize_arguments, merge_tool_fragment

Translator = Callable[[Dict[str, Any]], Iterable[ChunkOp]]


class StreamEngine:
    """Per-provider-family reconstruction engine (shareable across generations)."""

    def __init__(
        self,
        translator: Translator,
        *,
        provider: str,
        model: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._translator = translator
        self._ctx = LogContext(provider=provider, model=model)
        self._logger = logger or get_logger("streaming")

    def start(self) -> StreamState:
        """Create the state of a new generation (IDLE)."""
        return StreamState()

    # ------------------------------------------------------------------
    # Transitions

    def feed(self, state: StreamState, chunk: Dict[str, Any]) -> List[StreamEvent]:
        """Apply one raw chunk and return the lifecycle events it produced."""
        ops = list(self._translator(chunk))
        if state.closed:
            for op in ops:
                if isinstance(op, UsageDelta):
                    self._apply_usage(state, op)
            return []

        events: List[StreamEvent] = []
        marker = False
        content_index: Optional[int] = None
        text_delta: Optional[str] = None
        tool_deltas: List[ToolCallDelta] = []
        terminal = False

        for op in ops:
            if isinstance(op, RoleMarker):
                frame = state.frame(op.index)
                if frame.role is None:
                    frame.role = op.role
                marker = True
            elif isinstance(op, TextDelta):
                if not op.text:
                    continue
                state.frame(op.index)
                state.text[op.index].append(op.text)
                text_delta = op.text if text_delta is None else text_delta + op.text
                content_index = op.index if content_index is None else content_index
            elif isinstance(op, ToolCallDelta):
                if merge_tool_fragment(state.tool_buffer(op.index, op.tool_index), op):
                    tool_deltas.append(op)
                    content_index = op.index if content_index is None else content_index
            elif isinstance(op, UsageDelta):
                self._apply_usage(state, op)
            elif isinstance(op, MetadataDelta):
                if op.generation_id and state.generation_id is None:
                    state.generation_id = op.generation_id
                if op.finish_reason:
                    state.finish_reason = op.finish_reason
            elif isinstance(op, Terminal):
                terminal = True
                if op.finish_reason:
                    state.finish_reason = op.finish_reason
            elif isinstance(op, Ignored):
                log_event(self._logger, "stream.ignored_event", self._ctx, level=logging.DEBUG, event_type=op.event_type)

        if (marker or content_index is not None) and not state.opened:
            index = content_index if content_index is not None else min(state.message_stack, default=0)
            state.opened = True
            state.open = True
            events.append(StreamEvent(LifecycleKind.OPEN, self.snapshot(state, index), index=index))
            normalized_log_event(self._logger, "stream.open", self._ctx, phase="open", emitted=False)

        if content_index is not None:
            state.updates += 1
            events.append(
                StreamEvent(
                    LifecycleKind.UPDATE,
                    self.snapshot(state, content_index),
                    delta=text_delta,
                    tool_deltas=tuple(tool_deltas),
                    index=content_index,
                )
            )

        if terminal:
            events.append(self._close(state, aborted=False))
        return events

    def end_of_stream(self, state: StreamState) -> List[StreamEvent]:
        """Close a generation whose transport ended without a terminal chunk."""
        if state.closed:
            return []
        return [self._close(state, aborted=False)]

    def abort(self, state: StreamState, reason: Optional[str] = None) -> List[StreamEvent]:
        """Force CLOSE without a terminal chunk; a second call is a no-op."""
        if state.closed:
            return []
        log_event(self._logger, "stream.abort", self._ctx, reason=reason, updates=state.updates)
        return [self._close(state, aborted=True)]

    # ------------------------------------------------------------------
    # Views

    def snapshot(self, state: StreamState, index: int = 0) -> Message:
        """Cumulative, unfinalized view of message ``index``.

        Tool calls appear with ``params=None`` and the argument text received
        so far in ``raw_arguments``.
        """
        if state.final_messages is not None and index in state.final_messages:
            return state.final_messages[index]
        frame = state.frame(index)
        actions = [
            Action(id=buf.id, name=buf.name, raw_arguments=buf.arguments, status="streaming")
            for buf in state.tool_buffers_for(index)
        ]
        return Message(
            role=frame.role or "assistant",
            content="".join(state.text.get(index, [])),
            requested_actions=actions,
            generation_id=frame.generation_id or state.generation_id,
        )

    def finalize(self, state: StreamState) -> Dict[int, Message]:
        """Build final messages; argument buffers are parsed exactly once."""
        if state.final_messages is not None:
            return state.final_messages
        finals: Dict[int, Message] = {}
        for index in sorted(state.message_stack):
            frame = state.message_stack[index]
            actions: List[Action] = []
            for buf in state.tool_buffers_for(index):
                params, outcome = finalize_arguments(buf.arguments)
                action = Action(id=buf.id, name=buf.name, params=params)
                if outcome is ArgumentOutcome.MALFORMED:
                    action = Action(
                        id=buf.id,
                        name=buf.name,
                        params=None,
                        status=MALFORMED_ARGUMENTS,
                        raw_arguments=buf.arguments,
                    )
                    log_event(
                        self._logger,
                        "stream.tool_args.malformed",
                        self._ctx,
                        level=logging.WARNING,
                        tool=buf.name,
                        tool_call_id=buf.id,
                        length=len(buf.arguments or ""),
                    )
                actions.append(action)
            finals[index] = Message(
                role=frame.role or "assistant",
                content="".join(state.text.get(index, [])),
                requested_actions=actions,
                generation_id=frame.generation_id or state.generation_id,
            )
        if not finals:
            finals[0] = Message(role="assistant", content="", generation_id=state.generation_id)
        state.final_messages = finals
        return finals

    def usage(self, state: StreamState) -> Optional[Usage]:
        if state.input_tokens is None and state.output_tokens is None:
            return None
        return Usage(input_tokens=state.input_tokens, output_tokens=state.output_tokens)

    # ------------------------------------------------------------------
    # Internals

    @staticmethod
    def _apply_usage(state: StreamState, op: UsageDelta) -> None:
        if op.input_tokens is not None:
            state.input_tokens = op.input_tokens
        if op.output_tokens is not None:
            state.output_tokens = op.output_tokens

    def _close(self, state: StreamState, *, aborted: bool) -> StreamEvent:
        state.closed = True
        state.open = False
        state.aborted = aborted
        finals = self.finalize(state)
        index = min(finals)
        usage = self.usage(state)
        normalized_log_event(
            self._logger,
            "stream.close",
            self._ctx.bind(generation_id=state.generation_id),
            phase="finalize",
            emitted=state.updates > 0,
            tokens=usage.to_dict() if usage else None,
            aborted=aborted,
            finish_reason=state.finish_reason,
        )
        return StreamEvent(LifecycleKind.CLOSE, finals[index], index=index, aborted=aborted)


__all__ = ["StreamEngine", "Translator"]
