"""Pytest configuration for the providers test suite.

Every test runs against a clean configuration: provider credentials and
settings are removed from the environment, ``.env`` loading is pointed at a
missing file, and the config file cache is reset. ``relay_logs`` captures the
structured payloads emitted through the shared ``relay`` logger.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

import pytest

from relay_providers.base.logging import get_logger
from relay_providers.config import reset_config_cache

_PROVIDER_ENV = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_MODEL",
    "ANTHROPIC_BASE_URL",
    "OPENROUTER_API_KEY",
    "OPENROUTER_MODEL",
    "OPENROUTER_BASE_URL",
    "OPENROUTER_APP_URL",
    "OPENROUTER_APP_TITLE",
    "OLLAMA_HOST",
    "OLLAMA_MODEL",
    "OLLAMA_BASE_URL",
    "AZURE_OPENAI_API_KEY",
    "AZURE_OPENAI_ACCESS_TOKEN",
    "AZURE_OPENAI_RESOURCE",
    "AZURE_OPENAI_DEPLOYMENT",
    "AZURE_OPENAI_API_VERSION",
    "AZURE_OPENAI_RESPONSES_API_VERSION",
    "AWS_BEARER_TOKEN_BEDROCK",
    "XAI_API_KEY",
    "GROK_API_KEY",
    "XAI_MODEL",
    "XAI_BASE_URL",
    "XAI_HOST",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "BEDROCK_MODEL",
    "AUTO_MODEL",
    "MOCK_MODEL",
    "RELAY_PROVIDERS_CONFIG_FILE",
    "RELAY_PROVIDERS_LOG_LEVEL",
)


class RelayLogHandler(logging.Handler):
    """Collect records emitted under the ``relay`` logger."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - exercised via tests
        self.records.append(record)

    def events(self, name: Optional[str] = None) -> List[Dict[str, Any]]:
        """Decoded ``log_event`` payloads, optionally filtered by event name."""
        out: List[Dict[str, Any]] = []
        for record in self.records:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if not isinstance(payload, dict):
                continue
            if name is None or payload.get("event") == name:
                payload["_level"] = record.levelno
                out.append(payload)
        return out


@pytest.fixture(autouse=True)
def clean_provider_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Isolate tests from developer credentials and config files."""

    for name in _PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RELAY_DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def relay_logs(monkeypatch: pytest.MonkeyPatch) -> Iterator[RelayLogHandler]:
    """Attach a capturing handler to the shared ``relay`` logger at DEBUG."""

    monkeypatch.setenv("RELAY_PROVIDERS_LOG_LEVEL", "DEBUG")
    base = get_logger()
    handler = RelayLogHandler()
    previous = base.level
    base.addHandler(handler)
    base.setLevel(logging.DEBUG)
    try:
        yield handler
    finally:
        base.removeHandler(handler)
        base.setLevel(previous)


@pytest.fixture()
def recorder():
    from relay_providers.mock import GenerationRecorder

    return GenerationRecorder()


@pytest.fixture()
def mock_provider(recorder):
    """``MockProvider`` wired to the shared ``recorder`` fixture."""

    from relay_providers.mock import MockProvider

    return MockProvider(recorder=recorder)
