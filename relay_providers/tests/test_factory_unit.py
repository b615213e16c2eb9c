from __future__ import annotations

import pytest

import relay_providers
from relay_providers.auto import AutoProvider
from relay_providers.base.errors import ConfigurationError
from relay_providers.base.factory import ProviderFactory, UnknownProviderError, create_provider
from relay_providers.mock import MockProvider
from relay_providers.openai import OpenAIProvider


def test_known_provider_with_overrides():
    provider = ProviderFactory.create("OpenAI", api_key="sk-inline", model="gpt-4.1")
    assert isinstance(provider, OpenAIProvider)  # nosec B101
    assert provider.config["api_key"] == "sk-inline"  # nosec B101
    assert provider.default_model() == "gpt-4.1"  # nosec B101


def test_package_level_create_delegates():
    assert isinstance(relay_providers.create("mock"), MockProvider)  # nosec B101
    assert isinstance(create_provider("mock"), MockProvider)  # nosec B101


def test_unknown_name_falls_back_to_auto(relay_logs):
    provider = ProviderFactory.create("together")
    assert isinstance(provider, AutoProvider)  # nosec B101
    assert provider.requested == "together"  # nosec B101
    events = relay_logs.events("factory.fallback_auto")
    assert events and events[0]["requested"] == "together"  # nosec B101


@pytest.mark.parametrize("name", ["", "   ", None])
def test_empty_name_is_configuration_error(name):
    with pytest.raises(ConfigurationError):
        ProviderFactory.create(name)


def test_broken_registration_raises_unknown_provider(monkeypatch):
    monkeypatch.setitem(ProviderFactory._PROVIDERS, "ghost", {"module": "relay_providers.does_not_exist", "class": "Ghost"})
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create("ghost")
    monkeypatch.setitem(ProviderFactory._PROVIDERS, "hollow", {"module": "relay_providers.mock.client", "class": "Hollow"})
    with pytest.raises(UnknownProviderError):
        ProviderFactory.create("hollow")


def test_bad_constructor_arguments(monkeypatch):
    monkeypatch.setitem(ProviderFactory._PROVIDERS, "strict", {"module": "relay_providers.mock.client", "class": "GenerationRecorder"})
    with pytest.raises(UnknownProviderError) as ei:
        ProviderFactory.create("strict", not_a_kwarg=True)
    assert isinstance(ei.value, ConfigurationError)  # nosec B101


def test_supported_names():
    names = ProviderFactory.supported()
    for expected in ("openai", "anthropic", "bedrock", "azure", "ollama", "openrouter", "auto", "mock", "xai"):
        assert expected in names  # nosec B101
