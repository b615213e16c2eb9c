from __future__ import annotations

import pytest

from relay_providers.base.adapter_kind import AdapterKind
from relay_providers.base.errors import ErrorCode, ProviderApiError, RateLimitError
from relay_providers.base.models import Prompt
from relay_providers.openai import OpenAIProvider
from relay_providers.openai.responses_adapter import RESPONSES_PATH, ResponsesAdapter, responses_input


@pytest.fixture()
def adapter() -> ResponsesAdapter:
    return ResponsesAdapter(api_key="sk-test", model="gpt-4o-mini", base_url="https://api.openai.com/v1")


def test_request_targets_responses_endpoint(adapter):
    prompt = Prompt(
        instructions="Reply in JSON.",
        messages=[{"role": "user", "content": "weather?"}],
        options={"max_tokens": 128, "json_schema": {"name": "weather", "schema": {"type": "object"}}},
    )
    req = adapter.build_request(prompt)
    assert adapter.kind is AdapterKind.RESPONSES  # nosec B101
    assert req.path == RESPONSES_PATH  # nosec B101
    assert req.url == "https://api.openai.com/v1/responses"  # nosec B101
    body = req.body
    assert body["instructions"] == "Reply in JSON."  # nosec B101
    assert body["max_output_tokens"] == 128  # nosec B101
    assert body["input"] == [{"role": "user", "content": "weather?"}]  # nosec B101
    assert body["text"] == {  # nosec B101
        "format": {"type": "json_schema", "name": "weather", "schema": {"type": "object"}, "strict": True}
    }


def test_parts_map_to_input_items():
    prompt = Prompt(
        messages=[
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "summarize"},
                    {"type": "image", "url": "https://example.org/chart.png"},
                    {"type": "file", "file_id": "file-123", "filename": "report.pdf"},
                ],
            },
            {"role": "assistant", "content": [{"type": "text", "text": "done"}]},
        ]
    )
    items = responses_input(prompt)
    assert items[0]["content"] == [  # nosec B101
        {"type": "input_text", "text": "summarize"},
        {"type": "input_image", "image_url": "https://example.org/chart.png"},
        {"type": "input_file", "file_id": "file-123", "filename": "report.pdf"},
    ]
    assert items[1]["content"] == [{"type": "output_text", "text": "done"}]  # nosec B101


def test_file_and_image_extras_attach_to_last_user_message(adapter):
    prompt = Prompt(
        messages=[{"role": "user", "content": "first"}, {"role": "user", "content": "describe these"}],
        options={"extras": {"input_file_id": "file-9", "input_image_url": "https://x/cat.png"}},
    )
    body = adapter.build_body(prompt)
    assert body["input"][0] == {"role": "user", "content": "first"}  # nosec B101
    assert body["input"][1]["content"] == [  # nosec B101
        {"type": "input_text", "text": "describe these"},
        {"type": "input_file", "file_id": "file-9"},
        {"type": "input_image", "image_url": "https://x/cat.png"},
    ]
    assert "input_file_id" not in body  # nosec B101


def test_tool_history_becomes_function_call_items(adapter):
    prompt = Prompt(
        messages=[
            {"role": "user", "content": "weather?"},
            {"role": "assistant", "requested_actions": [{"id": "call_1", "name": "get_weather", "params": {"city": "Rome"}}]},
            {"role": "tool", "content": "22C", "action_id": "call_1"},
        ],
        actions=[{"name": "get_weather", "parameters": {"type": "object"}}],
        options={"tool_choice": {"type": "function", "function": {"name": "get_weather"}}, "previous_response_id": "resp_0"},
    )
    body = adapter.build_body(prompt, stream=True)
    assert body["input"][1:] == [  # nosec B101
        {"type": "function_call", "call_id": "call_1", "name": "get_weather", "arguments": '{"city": "Rome"}'},
        {"type": "function_call_output", "call_id": "call_1", "output": "22C"},
    ]
    assert body["tools"] == [{"type": "function", "name": "get_weather", "parameters": {"type": "object"}}]  # nosec B101
    assert body["tool_choice"] == {"type": "function", "name": "get_weather"}  # nosec B101
    assert body["previous_response_id"] == "resp_0"  # nosec B101
    assert body["stream"] is True  # nosec B101


def test_parse_output_items(adapter):
    wire = {
        "id": "resp_1",
        "status": "completed",
        "output": [
            {"type": "reasoning", "summary": []},
            {"type": "message", "role": "assistant", "content": [{"type": "output_text", "text": '{"temp": 21}'}]},
            {"type": "function_call", "call_id": "call_7", "name": "lookup", "arguments": ""},
        ],
        "usage": {"input_tokens": 20, "output_tokens": 8, "total_tokens": 28},
    }
    prompt = Prompt(messages=[{"role": "user", "content": "x"}], options={"json_schema": {"type": "object"}})
    response = adapter.parse_response(wire, prompt)
    assert response.text == '{"temp": 21}'  # nosec B101
    assert response.message.parsed == {"temp": 21}  # nosec B101
    assert response.message.generation_id == "resp_1"  # nosec B101
    (action,) = response.requested_actions
    assert action.id == "call_7" and action.params == {}  # nosec B101
    assert response.usage.total_tokens == 28  # nosec B101


def test_failed_status_raises_taxonomy_error(adapter):
    with pytest.raises(RateLimitError):
        adapter.parse_response({"status": "failed", "error": {"type": "rate_limit_exceeded", "message": "slow"}})
    with pytest.raises(ProviderApiError) as ei:
        adapter.parse_response({"id": "resp_2", "status": "completed"})
    assert ei.value.code is ErrorCode.SERVER_ERROR  # nosec B101


def test_openai_provider_picks_family_per_prompt(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    provider = OpenAIProvider()
    plain = Prompt(messages=[{"role": "user", "content": "hi"}])
    structured = Prompt(messages=[{"role": "user", "content": "hi"}], options={"json_schema": {"type": "object"}})
    assert provider.adapter_for(plain).kind is AdapterKind.CHAT  # nosec B101
    assert provider.adapter_for(structured).kind is AdapterKind.RESPONSES  # nosec B101
    assert provider.adapter_for(plain).api_key == "sk-env"  # nosec B101
    assert provider.default_model() == "gpt-4o-mini"  # nosec B101
