"""Configuration merge order: defaults, config file, environment, overrides."""

from __future__ import annotations

import json

from relay_providers.config import (
    DEFAULTS,
    get_auto_rules,
    get_gateway_rules,
    get_model,
    get_provider_config,
    reset_config_cache,
)
from relay_providers.config.env import get_env_var_candidates, is_placeholder, resolve_provider_key


def _use_config_file(monkeypatch, path):
    monkeypatch.setenv("RELAY_PROVIDERS_CONFIG_FILE", str(path))
    reset_config_cache()


def test_defaults_are_returned_as_copies():
    cfg = get_provider_config("anthropic")
    assert cfg["api_version"] == "2023-06-01" and cfg["max_tokens"] == 4096  # nosec B101
    cfg["model"] = "mutated"
    assert DEFAULTS["anthropic"]["model"] != "mutated"  # nosec B101
    assert get_provider_config("nonexistent") == {}  # nosec B101


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4.1-mini")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://proxy.local/v1")
    cfg = get_provider_config("openai")
    assert cfg == {"model": "gpt-4.1-mini", "base_url": "https://proxy.local/v1", "api_key": "sk-env"}  # nosec B101
    assert get_model("openai") == "gpt-4.1-mini"  # nosec B101


def test_overrides_win_but_none_is_ignored(monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "from-env")
    cfg = get_provider_config("OpenAI", {"model": "from-code", "api_key": None})
    assert cfg["model"] == "from-code" and "api_key" not in cfg  # nosec B101


def test_json_config_file(tmp_path, monkeypatch):
    path = tmp_path / "relay.json"
    path.write_text(json.dumps({"ollama": {"model": "qwen2.5", "host": "http://gpu:11434"}}), encoding="utf-8")
    _use_config_file(monkeypatch, path)
    cfg = get_provider_config("ollama")
    assert cfg == {"model": "qwen2.5", "host": "http://gpu:11434"}  # nosec B101
    monkeypatch.setenv("OLLAMA_HOST", "http://env:11434")
    assert get_provider_config("ollama")["host"] == "http://env:11434"  # nosec B101


def test_yaml_config_file_with_rules(tmp_path, monkeypatch):
    path = tmp_path / "relay.yaml"
    path.write_text(
        "azure:\n"
        "  resource: contoso\n"
        "  deployment: gpt-4o\n"
        "bedrock:\n"
        "  region: eu-central-1\n"
        "  rules:\n"
        "    anthropic_version: bedrock-2099-01-01\n"
        "auto:\n"
        "  rules:\n"
        "    - {prefix: internal-, provider: ollama}\n"
        "    - {prefix: broken}\n",
        encoding="utf-8",
    )
    _use_config_file(monkeypatch, path)
    azure = get_provider_config("azure")
    assert azure["resource"] == "contoso" and azure["api_version"] == "2024-10-21"  # nosec B101
    assert get_provider_config("bedrock")["region"] == "eu-central-1"  # nosec B101

    rules = get_gateway_rules("bedrock")
    assert rules["anthropic_version"] == "bedrock-2099-01-01"  # nosec B101
    assert rules["invoke_path"] == "model/{model}/invoke"  # nosec B101
    assert get_gateway_rules("azure") == {}  # nosec B101

    auto_rules = get_auto_rules()
    assert auto_rules[0] == {"prefix": "internal-", "provider": "ollama"}  # nosec B101
    assert {"prefix": "broken"} not in auto_rules  # nosec B101


def test_unreadable_config_file_is_ignored(tmp_path, monkeypatch):
    path = tmp_path / "relay.conf"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    _use_config_file(monkeypatch, path)
    assert get_provider_config("openrouter")["base_url"] == "https://openrouter.ai/api/v1"  # nosec B101


def test_dotenv_fills_missing_and_placeholder_values(tmp_path, monkeypatch):
    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "# local credentials\nANTHROPIC_API_KEY='ak-dotenv'\nOPENAI_API_KEY=sk-dotenv\nOPENROUTER_API_KEY=or-dotenv\nnot a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("RELAY_DOTENV_FILE", str(dotenv))
    monkeypatch.setenv("OPENAI_API_KEY", "sk-real")
    monkeypatch.setenv("OPENROUTER_API_KEY", "placeholder-key")
    reset_config_cache()
    assert get_provider_config("anthropic")["api_key"] == "ak-dotenv"  # nosec B101
    assert get_provider_config("openai")["api_key"] == "sk-real"  # nosec B101
    assert get_provider_config("openrouter")["api_key"] == "or-dotenv"  # nosec B101


def test_credential_aliases(monkeypatch):
    assert list(get_env_var_candidates("azure")) == ["AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ACCESS_TOKEN"]  # nosec B101
    assert resolve_provider_key("ollama") == (None, None)  # nosec B101
    monkeypatch.setenv("AZURE_OPENAI_ACCESS_TOKEN", "tok")
    assert resolve_provider_key("azure") == ("tok", "AZURE_OPENAI_ACCESS_TOKEN")  # nosec B101
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "key")
    assert resolve_provider_key("azure") == ("key", "AZURE_OPENAI_API_KEY")  # nosec B101
    assert is_placeholder(" CHANGEME ") and not is_placeholder("sk-live")  # nosec B101
