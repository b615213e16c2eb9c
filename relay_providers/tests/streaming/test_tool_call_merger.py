from __future__ import annotations

import pytest

from relay_providers.base.streaming import (
    ArgumentOutcome,
    ToolCallBuffer,
    ToolCallDelta,
    finalize_arguments,
    merge_tool_fragment,
)


def _merge(*fragments):
    buf = ToolCallBuffer()
    for fragment in fragments:
        merge_tool_fragment(buf, fragment)
    return buf


def test_fragments_merge_in_arrival_order():
    buf = _merge(
        ToolCallDelta(0, 0, id="call_1", name="get_weather", arguments=""),
        ToolCallDelta(0, 0, arguments='{"ci'),
        ToolCallDelta(0, 0, arguments='ty": "Par'),
        ToolCallDelta(0, 0, arguments='is"}'),
    )
    assert (buf.id, buf.name) == ("call_1", "get_weather")  # nosec B101
    assert finalize_arguments(buf.arguments) == ({"city": "Paris"}, ArgumentOutcome.PARSED)  # nosec B101


def test_id_and_name_are_never_overwritten():
    buf = _merge(
        ToolCallDelta(0, 0, id="call_1", name="first"),
        ToolCallDelta(0, 0, id="call_2", name="second", arguments="{}"),
    )
    assert (buf.id, buf.name, buf.arguments) == ("call_1", "first", "{}")  # nosec B101


def test_merge_reports_changes():
    buf = ToolCallBuffer()
    assert merge_tool_fragment(buf, ToolCallDelta(0, 0, id="c"))  # nosec B101
    assert not merge_tool_fragment(buf, ToolCallDelta(0, 0, id="c"))  # nosec B101
    assert merge_tool_fragment(buf, ToolCallDelta(0, 0, arguments=""))  # nosec B101
    assert not merge_tool_fragment(buf, ToolCallDelta(0, 0, arguments=""))  # nosec B101


def test_final_fragment_only_fills_unpopulated_buffers():
    streamed = _merge(
        ToolCallDelta(0, 0, arguments='{"a": 1}'),
        ToolCallDelta(0, 0, arguments='{"a": 1}', final=True),
    )
    assert streamed.arguments == '{"a": 1}'  # nosec B101

    done_only = _merge(ToolCallDelta(0, 0, name="f"), ToolCallDelta(0, 0, arguments='{"b": 2}', final=True))
    assert done_only.arguments == '{"b": 2}'  # nosec B101

    empty_then_done = _merge(ToolCallDelta(0, 0, arguments=""), ToolCallDelta(0, 0, arguments='{"c": 3}', final=True))
    assert empty_then_done.arguments == '{"c": 3}'  # nosec B101


def test_decoded_object_arguments_are_serialized():
    assert _merge(ToolCallDelta(0, 0, arguments={"x": 1})).arguments == '{"x": 1}'  # nosec B101
    assert _merge(ToolCallDelta(0, 0, arguments={})).arguments == ""  # nosec B101


@pytest.mark.parametrize(
    "raw, params, outcome",
    [
        ('{"k": "v"}', {"k": "v"}, ArgumentOutcome.PARSED),
        ("", {}, ArgumentOutcome.EMPTY),
        ("   ", {}, ArgumentOutcome.EMPTY),
        (None, None, ArgumentOutcome.MISSING),
        ('{"k": ', None, ArgumentOutcome.MALFORMED),
        ("[1, 2]", None, ArgumentOutcome.MALFORMED),
    ],
)
def test_finalize_outcomes(raw, params, outcome):
    assert finalize_arguments(raw) == (params, outcome)  # nosec B101
