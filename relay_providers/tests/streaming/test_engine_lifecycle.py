"""OPEN / UPDATE / CLOSE ordering of the streaming engine."""

from __future__ import annotations

import threading

from relay_providers.base.cancellation import CancellationToken
from relay_providers.base.streaming import (
    Ignored,
    LifecycleKind,
    MetadataDelta,
    RoleMarker,
    StreamEngine,
    StreamSession,
    Terminal,
    TextDelta,
    UsageDelta,
)
from relay_providers.openai.stream_translators import translate_chat_chunk


def _ops_translator(chunk):
    """Chunks in these tests are already lists of operations."""
    return chunk["ops"]


def _engine(translator=_ops_translator):
    return StreamEngine(translator, provider="test", model="m")


def _chat(delta=None, finish=None, **extra):
    chunk = {"id": "chatcmpl-1", "choices": [{"index": 0, "delta": delta or {}, "finish_reason": finish}]}
    chunk.update(extra)
    return chunk


def test_one_open_n_updates_one_close():
    session = StreamSession(_engine(translate_chat_chunk))
    chunks = [
        _chat({"role": "assistant", "content": ""}),
        _chat({"content": "Hel"}),
        _chat({"content": "lo"}),
        _chat({"content": "!"}),
        _chat({}, "stop"),
    ]
    result = session.run(chunks)
    kinds = [e.kind for e in result.events]
    assert kinds == [  # nosec B101
        LifecycleKind.OPEN,
        LifecycleKind.UPDATE,
        LifecycleKind.UPDATE,
        LifecycleKind.UPDATE,
        LifecycleKind.CLOSE,
    ]
    updates = [e for e in result.events if e.kind is LifecycleKind.UPDATE]
    assert [e.message.text for e in updates] == ["Hel", "Hello", "Hello!"]  # nosec B101
    assert [e.delta for e in updates] == ["Hel", "lo", "!"]  # nosec B101
    assert result.message.text == "Hello!" and result.finish_reason == "stop"  # nosec B101
    assert result.generation_id == "chatcmpl-1" and not result.aborted  # nosec B101


def test_first_content_chunk_opens_and_updates():
    session = StreamSession(_engine())
    events = session.feed({"ops": [TextDelta(0, "hi")]})
    assert [e.kind for e in events] == [LifecycleKind.OPEN, LifecycleKind.UPDATE]  # nosec B101
    assert events[0].message.role == "assistant"  # nosec B101


def test_close_is_emitted_once():
    engine = _engine()
    session = StreamSession(engine)
    session.feed({"ops": [TextDelta(0, "a"), Terminal("stop")]})
    assert session.feed({"ops": [Terminal("stop")]}) == []  # nosec B101
    assert session.finish() == []  # nosec B101
    assert session.abort("late") == []  # nosec B101
    assert session.result().count(LifecycleKind.CLOSE) == 1  # nosec B101
    assert not session.state.open and session.state.closed  # nosec B101


def test_end_of_stream_without_terminal_closes():
    session = StreamSession(_engine())
    session.feed({"ops": [TextDelta(0, "partial")]})
    (close,) = session.finish()
    assert close.kind is LifecycleKind.CLOSE and not close.aborted  # nosec B101
    assert close.message.text == "partial"  # nosec B101


def test_abort_is_idempotent_and_marks_result(relay_logs):
    session = StreamSession(_engine())
    session.feed({"ops": [TextDelta(0, "half")]})
    (close,) = session.abort("caller")
    assert close.aborted and close.message.text == "half"  # nosec B101
    assert session.abort("again") == []  # nosec B101
    assert session.result().aborted  # nosec B101
    (event,) = relay_logs.events("stream.abort")
    assert event["reason"] == "caller"  # nosec B101


def test_abort_before_any_content_still_closes():
    session = StreamSession(_engine())
    (close,) = session.abort("timeout")
    assert close.kind is LifecycleKind.CLOSE and close.aborted  # nosec B101
    assert close.message.role == "assistant" and close.message.text == ""  # nosec B101
    assert session.result().count(LifecycleKind.OPEN) == 0  # nosec B101


def test_cancel_token_aborts_between_chunks():
    token = CancellationToken()
    seen = []

    def chunks():
        yield {"ops": [TextDelta(0, "one")]}
        token.cancel("user pressed stop")
        yield {"ops": [TextDelta(0, "two")]}
        yield {"ops": [Terminal("stop")]}

    result = StreamSession(_engine(), seen.append).run(chunks(), cancel_token=token)
    assert result.aborted and result.message.text == "one"  # nosec B101
    assert [e.kind for e in seen][-1] is LifecycleKind.CLOSE  # nosec B101
    assert sum(1 for e in seen if e.kind is LifecycleKind.CLOSE) == 1  # nosec B101


def test_cancel_from_another_thread():
    token = CancellationToken()
    gate = threading.Event()

    def chunks():
        yield {"ops": [TextDelta(0, "a")]}
        gate.wait(timeout=5)
        yield {"ops": [TextDelta(0, "b")]}

    worker = threading.Thread(target=lambda: (token.cancel(), gate.set()))
    session = StreamSession(_engine())
    iterator = chunks()
    session.feed(next(iterator))
    worker.start()
    worker.join()
    result = session.run(iterator, cancel_token=token)
    assert result.aborted and result.message.text == "a"  # nosec B101


def test_repeated_role_markers_do_not_reopen():
    session = StreamSession(_engine(translate_chat_chunk))
    for piece in ("a", "b", "c"):
        session.feed(_chat({"role": "assistant", "content": piece}))
    session.feed(_chat({"role": "assistant", "content": ""}, "stop"))
    result = session.result()
    assert result.count(LifecycleKind.OPEN) == 1 and result.count(LifecycleKind.UPDATE) == 3  # nosec B101
    assert result.message.text == "abc"  # nosec B101


def test_informational_events_are_absorbed():
    session = StreamSession(_engine())
    assert session.feed({"ops": [Ignored("ping")]}) == []  # nosec B101
    assert session.feed({"ops": [MetadataDelta(generation_id="g-1")]}) == []  # nosec B101
    assert not session.state.opened  # nosec B101
    session.feed({"ops": [RoleMarker(0, "assistant")]})
    assert session.state.open and session.result().generation_id == "g-1"  # nosec B101


def test_usage_after_close_is_applied():
    session = StreamSession(_engine(translate_chat_chunk))
    session.feed(_chat({"content": "x"}, "stop"))
    assert session.feed({"id": "chatcmpl-1", "choices": [], "usage": {"prompt_tokens": 4, "completion_tokens": 2}}) == []  # nosec B101
    usage = session.result().usage
    assert usage.input_tokens == 4 and usage.output_tokens == 2 and usage.total_tokens == 6  # nosec B101


def test_usage_deltas_merge_fieldwise():
    session = StreamSession(_engine())
    session.feed({"ops": [UsageDelta(input_tokens=10)]})
    session.feed({"ops": [UsageDelta(output_tokens=3)]})
    assert session.result().usage.total_tokens == 13  # nosec B101


def test_engine_serves_concurrent_generations():
    engine = _engine()
    first, second = engine.start(), engine.start()
    engine.feed(first, {"ops": [TextDelta(0, "left")]})
    engine.feed(second, {"ops": [TextDelta(0, "right")]})
    assert engine.snapshot(first).text == "left" and engine.snapshot(second).text == "right"  # nosec B101


def test_close_log_carries_generation_id(relay_logs):
    session = StreamSession(_engine())
    session.feed({"ops": [MetadataDelta(generation_id="gen-7"), TextDelta(0, "x"), Terminal("stop")]})
    (close,) = relay_logs.events("stream.close")
    assert close["generation_id"] == "gen-7" and close["provider"] == "test"  # nosec B101
    assert close["finish_reason"] == "stop" and close["emitted"] is True  # nosec B101
