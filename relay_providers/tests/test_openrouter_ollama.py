from __future__ import annotations

from relay_providers.base.models import Prompt
from relay_providers.ollama.client import OllamaProvider, ollama_base_url
from relay_providers.openrouter.adapter import OpenRouterAdapter, app_headers
from relay_providers.openrouter.client import OpenRouterProvider


def _prompt(**options) -> Prompt:
    return Prompt(messages=[{"role": "user", "content": "hi"}], options=options)


def test_openrouter_headers_and_routing_extras():
    adapter = OpenRouterAdapter(
        api_key="or-key",
        model="anthropic/claude-3.5-sonnet",
        base_url="https://openrouter.ai/api/v1",
        app_url="https://example.app",
        app_title="Example",
    )
    prompt = _prompt(
        extras={
            "fallback_models": ["openai/gpt-4o", "", "mistralai/mixtral-8x7b"],
            "transforms": ["middle-out"],
            "provider": {"order": ["Anthropic"], "allow_fallbacks": False},
        }
    )
    req = adapter.build_request(prompt)
    assert req.url == "https://openrouter.ai/api/v1/chat/completions"  # nosec B101
    assert req.headers == {  # nosec B101
        "HTTP-Referer": "https://example.app",
        "X-Title": "Example",
        "Authorization": "Bearer or-key",
    }
    assert req.body["models"] == ["openai/gpt-4o", "mistralai/mixtral-8x7b"]  # nosec B101
    assert "fallback_models" not in req.body  # nosec B101
    assert req.body["transforms"] == ["middle-out"]  # nosec B101
    assert req.body["provider"]["order"] == ["Anthropic"]  # nosec B101


def test_explicit_models_extra_beats_fallback_alias():
    adapter = OpenRouterAdapter(api_key="k", model="openrouter/auto")
    body = adapter.build_body(_prompt(extras={"models": ["a/b"], "fallback_models": ["c/d"]}))
    assert body["models"] == ["a/b"]  # nosec B101


def test_app_headers_omit_unset_values():
    assert app_headers(None, None) == {}  # nosec B101
    assert app_headers(None, "Title") == {"X-Title": "Title"}  # nosec B101


def test_openrouter_provider_from_env(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "or-env")
    monkeypatch.setenv("OPENROUTER_APP_TITLE", "Relay")
    adapter = OpenRouterProvider().adapter_for(_prompt())
    assert adapter.api_key == "or-env" and adapter.model == "openrouter/auto"  # nosec B101
    assert adapter.headers == {"X-Title": "Relay"}  # nosec B101


def test_ollama_base_url_normalization():
    assert ollama_base_url(None) == "http://localhost:11434/v1"  # nosec B101
    assert ollama_base_url("  ") == "http://localhost:11434/v1"  # nosec B101
    assert ollama_base_url("http://gpu-box:11434/") == "http://gpu-box:11434/v1"  # nosec B101
    assert ollama_base_url("http://gpu-box:11434/v1") == "http://gpu-box:11434/v1"  # nosec B101


def test_ollama_needs_no_key(monkeypatch):
    monkeypatch.setenv("OLLAMA_HOST", "http://127.0.0.1:9999")
    req = OllamaProvider().adapter_for(_prompt()).build_request(_prompt())
    assert req.url == "http://127.0.0.1:9999/v1/chat/completions"  # nosec B101
    assert "Authorization" not in req.headers  # nosec B101
    assert req.body["model"] == "llama3.1"  # nosec B101

    explicit = OllamaProvider(host="http://other:11434")
    assert explicit.adapter_for(_prompt()).base_url == "http://other:11434/v1"  # nosec B101
