"""Adapter kind selection is a pure function of provider key and prompt shape."""

from __future__ import annotations

import pytest

from relay_providers.base.adapter_kind import (
    AdapterKind,
    requires_responses_api,
    select_adapter_kind,
    select_openai_family,
)
from relay_providers.base.errors import UnsupportedFeatureError
from relay_providers.base.factory import ProviderFactory
from relay_providers.base.models import Prompt
from relay_providers.openai.client import OpenAIProvider


def _prompt(**kwargs) -> Prompt:
    kwargs.setdefault("messages", [{"role": "user", "content": "hello"}])
    return Prompt(**kwargs)


@pytest.mark.parametrize(
    "provider, kind",
    [
        ("anthropic", AdapterKind.ANTHROPIC),
        ("bedrock", AdapterKind.BEDROCK),
        ("azure", AdapterKind.AZURE),
        ("ollama", AdapterKind.CHAT),
        ("openrouter", AdapterKind.CHAT),
        ("mock", AdapterKind.CHAT),
        ("auto", AdapterKind.AUTO),
        (" OpenAI ", AdapterKind.CHAT),
        ("groq", AdapterKind.AUTO),
        ("", AdapterKind.AUTO),
    ],
)
def test_provider_keys_map_to_kinds(provider, kind):
    assert select_adapter_kind(provider, _prompt()) is kind  # nosec B101


def test_openai_switches_to_responses_for_schema_parts_and_files():
    assert select_openai_family(_prompt()) is AdapterKind.CHAT  # nosec B101
    schema = _prompt(options={"json_schema": {"type": "object"}})
    assert select_adapter_kind("openai", schema) is AdapterKind.RESPONSES  # nosec B101
    parts = _prompt(messages=[{"role": "user", "content": [{"type": "text", "text": "hi"}]}])
    assert requires_responses_api(parts)  # nosec B101
    data_url = _prompt(messages=[{"role": "user", "content": "data:image/png;base64,AAAA"}])
    assert requires_responses_api(data_url)  # nosec B101
    extras = _prompt(options={"extras": {"input_file_id": "file-1"}})
    assert select_openai_family(extras) is AdapterKind.RESPONSES  # nosec B101


def test_selection_has_no_side_effects():
    prompt = _prompt(options={"tool_choice": "required"})
    before = prompt.to_dict()
    select_adapter_kind("openai", prompt)
    assert prompt.to_dict() == before  # nosec B101


@pytest.mark.parametrize("name", ProviderFactory.supported())
def test_every_provider_serves_its_selected_kind(name):
    provider = ProviderFactory.create(name)
    kind = provider.adapter_kind(_prompt())
    assert kind is select_adapter_kind(name, _prompt())  # nosec B101
    assert kind in provider.adapter_builders()  # nosec B101


def test_openai_dispatch_follows_selected_kind():
    provider = OpenAIProvider(api_key="sk-test")
    schema = _prompt(options={"json_schema": {"type": "object"}})
    assert provider.adapter_for(_prompt()).kind is AdapterKind.CHAT  # nosec B101
    assert provider.adapter_for(schema).kind is AdapterKind.RESPONSES  # nosec B101


def test_missing_builder_raises_unsupported():
    class ChatOnly(OpenAIProvider):
        def adapter_builders(self):
            return {AdapterKind.CHAT: lambda prompt: self.chat_adapter()}

    seen = []
    provider = ChatOnly(api_key="sk-test", exception_handler=seen.append)
    schema = _prompt(options={"json_schema": {"type": "object"}})
    with pytest.raises(UnsupportedFeatureError) as ei:
        provider.generate(schema)
    assert ei.value.operation == "responses" and seen == []  # nosec B101
