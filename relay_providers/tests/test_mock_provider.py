"""MockProvider drives the real chat adapter and streaming engine offline."""

from __future__ import annotations

import pytest

from relay_providers.base.errors import ConfigurationError
from relay_providers.base.interfaces import LLMProvider, SupportsStreaming, Transport
from relay_providers.base.models import MALFORMED_ARGUMENTS, Prompt
from relay_providers.base.streaming import LifecycleKind
from relay_providers.mock import MockProvider, MockReply, MockTransport
from relay_providers.mock.client import coerce_reply


def _prompt(text="hello", **options):
    return Prompt(messages=[{"role": "user", "content": text}], options=options)


def test_replies_are_consumed_in_order_then_catalog(recorder):
    provider = MockProvider(
        replies=["first", MockReply(content="second")],
        catalog={"ping": "pong", "*": "fallback"},
        recorder=recorder,
    )
    assert provider.generate(_prompt()).text == "first"  # nosec B101
    assert provider.generate(_prompt()).text == "second"  # nosec B101
    assert provider.generate(_prompt("PING")).text == "pong"  # nosec B101
    assert provider.generate(_prompt("anything")).text == "fallback"  # nosec B101
    assert len(recorder) == 4  # nosec B101
    assert recorder.last.prompt.messages[0].text == "anything"  # nosec B101
    assert not recorder.last.streamed  # nosec B101


def test_empty_reply_when_nothing_matches(mock_provider):
    response = mock_provider.generate(_prompt())
    assert response.text == "" and response.requested_actions == []  # nosec B101
    assert response.message.generation_id == "mock-1"  # nosec B101


def test_request_goes_through_chat_adapter(mock_provider):
    mock_provider.generate(_prompt(temperature=0.1))
    (request,) = mock_provider.mock_transport.requests
    assert request.url == "mock://local/chat/completions"  # nosec B101
    assert request.body["model"] == "mock-gpt" and request.body["temperature"] == 0.1  # nosec B101


def test_action_argument_outcomes(mock_provider):
    mock_provider.mock_transport.queue(
        {
            "actions": [
                {"name": "full", "params": {"city": "Lima"}},
                {"name": "empty", "params": {}},
                {"name": "absent"},
                {"name": "broken", "arguments": '{"city": '},
            ],
            "usage": {"prompt_tokens": 5, "completion_tokens": 7},
        }
    )
    response = mock_provider.generate(_prompt())
    full, empty, absent, broken = response.requested_actions
    assert full.params == {"city": "Lima"}  # nosec B101
    assert empty.params == {}  # nosec B101
    assert absent.params is None and absent.status is None  # nosec B101
    assert broken.params is None and broken.status == MALFORMED_ARGUMENTS  # nosec B101
    assert response.usage.total_tokens == 12  # nosec B101


def test_streamed_generation_records_lifecycle(recorder):
    provider = MockProvider(
        replies=[{"content": "The quick brown fox jumps", "chunk_size": 5, "usage": {"prompt_tokens": 3, "completion_tokens": 5}}],
        recorder=recorder,
    )
    seen = []
    response = provider.generate(_prompt(stream=True, broadcaster=seen.append))
    kinds = [e.kind for e in seen]
    assert kinds[0] is LifecycleKind.OPEN and kinds[-1] is LifecycleKind.CLOSE  # nosec B101
    assert kinds.count(LifecycleKind.OPEN) == 1 and kinds.count(LifecycleKind.CLOSE) == 1  # nosec B101
    assert kinds.count(LifecycleKind.UPDATE) == 5  # nosec B101
    assert "".join(e.delta for e in seen if e.kind is LifecycleKind.UPDATE) == "The quick brown fox jumps"  # nosec B101
    assert response.text == "The quick brown fox jumps"  # nosec B101
    assert response.usage.input_tokens == 3 and response.usage.output_tokens == 5  # nosec B101
    assert response.raw["finish_reason"] == "stop"  # nosec B101

    generation = recorder.last
    assert generation.streamed and [e.kind for e in generation.events] == kinds  # nosec B101
    assert generation.prompt.options.broadcaster is None  # nosec B101


def test_streamed_tool_call_matches_blocking_result(mock_provider):
    reply = {"content": "", "actions": [{"id": "call_w", "name": "get_weather", "params": {"city": "Paris", "unit": "C"}}], "chunk_size": 4}
    mock_provider.mock_transport.queue(reply, reply)
    blocking = mock_provider.generate(_prompt())
    streamed = mock_provider.stream(_prompt())
    assert streamed.requested_actions[0].to_dict() == blocking.requested_actions[0].to_dict()  # nosec B101
    assert streamed.requested_actions[0].params == {"city": "Paris", "unit": "C"}  # nosec B101


def test_exception_reply_propagates_without_handler(mock_provider):
    mock_provider.mock_transport.queue(ConfigurationError(message="no key"))
    with pytest.raises(ConfigurationError):
        mock_provider.generate(_prompt())
    assert len(mock_provider.recorder) == 0  # nosec B101


def test_coerce_reply_rejects_unknown_shapes():
    assert coerce_reply(None).content == ""  # nosec B101
    with pytest.raises(TypeError):
        coerce_reply(42)
    assert isinstance(MockProvider().mock_transport, MockTransport)  # nosec B101


def test_provider_and_transport_protocols():
    provider = MockProvider()
    assert isinstance(provider, LLMProvider) and isinstance(provider, SupportsStreaming)  # nosec B101
    assert isinstance(provider.mock_transport, Transport)  # nosec B101
    assert provider.supports_streaming()  # nosec B101
