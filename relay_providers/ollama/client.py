"""Ollama provider (local daemon, OpenAI-compatible ``/v1`` surface).

Resolution order for the host: explicit ``host`` argument, ``OLLAMA_HOST``,
config file, then ``http://localhost:11434``. No API key is required.

Streaming deltas from Ollama repeat ``role`` on every chunk and may carry
tool arguments as decoded objects; both are absorbed by the shared chat
translator and tool-call merger.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.adapter_kind import AdapterKind
from ..base.models import Prompt
from ..base.provider import AdapterBuilder, BaseProvider
from ..config.defaults import OLLAMA_DEFAULT_HOST
from ..openai.chat_adapter import ChatAdapter

__all__ = ["OllamaProvider", "ollama_base_url"]


def _coerce_non_empty_str(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def ollama_base_url(host: Optional[str]) -> str:
    """Return the ``/v1`` endpoint root for an Ollama host."""
    root = _coerce_non_empty_str(host, OLLAMA_DEFAULT_HOST).rstrip("/")
    return root if root.endswith("/v1") else f"{root}/v1"


class OllamaProvider(BaseProvider):
    """Local Ollama provider."""

    provider_name = "ollama"

    def __init__(self, *, host: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(host=host, **kwargs)

    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:
        return {AdapterKind.CHAT: self.chat_adapter}

    def chat_adapter(self, prompt: Optional[Prompt] = None) -> ChatAdapter:
        return ChatAdapter(
            provider=self.provider_name,
            base_url=self.config.get("base_url") or ollama_base_url(self.config.get("host")),
            api_key=self.config.get("api_key"),
            model=self.config.get("model"),
            require_api_key=False,
        )
