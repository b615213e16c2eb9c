"""xAI (Grok) provider.

OpenAI-compatible chat completions against ``https://api.x.ai/v1``.
Credentials come from ``XAI_API_KEY`` (or ``GROK_API_KEY``); ``XAI_HOST``
points the provider at another host, ``/v1`` being appended when missing.
The AUTO adapter routes ``grok*`` model ids here.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.adapter_kind import AdapterKind
from ..base.models import Prompt
from ..base.provider import AdapterBuilder, BaseProvider
from ..config.defaults import XAI_DEFAULT_BASE_URL
from ..openai.chat_adapter import ChatAdapter

__all__ = ["XAIProvider", "xai_base_url"]


def xai_base_url(base_url: Optional[str], host: Optional[str]) -> str:
    if base_url:
        return base_url
    if host:
        root = host.rstrip("/")
        return root if root.endswith("/v1") else f"{root}/v1"
    return XAI_DEFAULT_BASE_URL


class XAIProvider(BaseProvider):
    """Grok models over the xAI chat completions API."""

    provider_name = "xai"

    def __init__(self, *, host: Optional[str] = None, **kwargs: Any) -> None:
        if host:
            kwargs["host"] = host
        super().__init__(**kwargs)

    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:
        return {AdapterKind.CHAT: self.chat_adapter}

    def chat_adapter(self, prompt: Optional[Prompt] = None) -> ChatAdapter:
        # An explicit host wins over the default base URL
        base_url = None if self.config.get("host") else self.config.get("base_url")
        return ChatAdapter(
            provider=self.provider_name,
            base_url=xai_base_url(base_url, self.config.get("host")),
            api_key=self.config.get("api_key"),
            model=self.config.get("model"),
        )
