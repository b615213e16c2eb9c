from __future__ import annotations

import pytest

from relay_providers.base.models import Message, Prompt
from relay_providers.base.tool_choice import clear_forced_tool_choice, forced_tool_name, should_clear, used_tool_names


def _turn(*names):
    actions = [{"id": f"call_{i}", "name": n, "params": {}} for i, n in enumerate(names)]
    return [Message(role="assistant", content="", requested_actions=actions)]


def _prompt(choice):
    return Prompt(
        messages=[{"role": "user", "content": "go"}],
        actions=[{"name": "a", "parameters": {}}, {"name": "b", "parameters": {}}],
        options={"tool_choice": choice},
    )


@pytest.mark.parametrize(
    "choice, used, cleared",
    [
        ("required", ["a"], True),
        ("required", ["a", "b"], True),
        ("required", [], False),
        ({"name": "a"}, ["a"], True),
        ({"name": "a"}, ["a", "a"], True),
        ({"name": "a"}, ["a", "b"], False),
        ({"name": "a"}, ["b"], False),
        ({"type": "function", "function": {"name": "b"}}, ["b"], True),
        ("auto", ["a"], False),
        ("none", [], False),
    ],
)
def test_clearing_rule(choice, used, cleared):
    prompt = _prompt(choice)
    assert clear_forced_tool_choice(prompt, _turn(*used)) is cleared  # nosec B101
    assert (prompt.options.tool_choice is None) is cleared  # nosec B101


def test_no_choice_is_a_no_op():
    prompt = _prompt(None)
    assert clear_forced_tool_choice(prompt, _turn("a")) is False  # nosec B101


def test_only_assistant_messages_count():
    messages = [Message(role="user", content="call a"), *_turn("a", "b")]
    assert used_tool_names(messages) == ["a", "b"]  # nosec B101
    assert should_clear({"name": "a"}, []) is False  # nosec B101
    assert forced_tool_name("required") is None  # nosec B101
    assert forced_tool_name({"type": "tool", "name": "x"}) == "x"  # nosec B101


def test_clearing_is_logged(relay_logs):
    prompt = _prompt({"name": "a"})
    clear_forced_tool_choice(prompt, _turn("a"))
    (event,) = relay_logs.events("tool_choice.cleared")
    assert event["previous"] == "a" and event["used"] == ["a"]  # nosec B101


def test_generate_clears_forced_choice_for_next_turn(mock_provider):
    mock_provider.mock_transport.queue({"actions": [{"name": "a", "params": {"x": 1}}]}, "done")
    prompt = _prompt("required")
    first = mock_provider.generate(prompt)
    assert first.requested_actions[0].params == {"x": 1}  # nosec B101
    assert prompt.options.tool_choice is None  # nosec B101
    assert first.prompt.options.tool_choice == "required"  # nosec B101
    assert mock_provider.mock_transport.requests[0].body["tool_choice"] == "required"  # nosec B101

    prompt.messages.append(first.message)
    prompt.messages.append(Message(role="tool", content="ok", action_id=first.requested_actions[0].id))
    mock_provider.generate(prompt)
    assert "tool_choice" not in mock_provider.mock_transport.requests[1].body  # nosec B101


def test_required_without_tool_use_is_kept(mock_provider):
    mock_provider.mock_transport.queue("I'd rather not.")
    prompt = _prompt("required")
    mock_provider.generate(prompt)
    assert prompt.options.tool_choice == "required"  # nosec B101
