"""OpenAI provider.

Selects between chat completions and the Responses API per prompt via the
pure :func:`~relay_providers.base.adapter_kind.select_adapter_kind`, then
runs the shared :class:`~relay_providers.base.provider.BaseProvider`
pipeline. Configuration comes from ``get_provider_config("openai")``
(``OPENAI_API_KEY``, ``OPENAI_MODEL``, ``OPENAI_BASE_URL``).
"""

from __future__ import annotations

from typing import Dict

from ..base.adapter_kind import AdapterKind
from ..base.provider import AdapterBuilder, BaseProvider
from .chat_adapter import ChatAdapter
from .responses_adapter import ResponsesAdapter

__all__ = ["OpenAIProvider"]


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions / Responses provider."""

    provider_name = "openai"

    def chat_adapter(self) -> ChatAdapter:
        return ChatAdapter(
            provider=self.provider_name,
            base_url=self.config.get("base_url"),
            api_key=self.config.get("api_key"),
            model=self.config.get("model"),
        )

    def responses_adapter(self) -> ResponsesAdapter:
        return ResponsesAdapter(
            provider=self.provider_name,
            base_url=self.config.get("base_url"),
            api_key=self.config.get("api_key"),
            model=self.config.get("model"),
        )

    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:
        return {
            AdapterKind.CHAT: lambda prompt: self.chat_adapter(),
            AdapterKind.RESPONSES: lambda prompt: self.responses_adapter(),
        }
