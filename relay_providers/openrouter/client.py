"""OpenRouter provider.

Chat completions against ``https://openrouter.ai/api/v1`` with
``OPENROUTER_API_KEY``. Routing extras and attribution headers are handled by
:class:`OpenRouterAdapter`.
"""

from __future__ import annotations

from typing import Dict, Optional

from ..base.adapter_kind import AdapterKind
from ..base.models import Prompt
from ..base.provider import AdapterBuilder, BaseProvider
from ..config.defaults import OPENROUTER_DEFAULT_BASE_URL
from .adapter import OpenRouterAdapter

__all__ = ["OpenRouterProvider"]


class OpenRouterProvider(BaseProvider):
    """OpenRouter LLM provider."""

    provider_name = "openrouter"

    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:
        return {AdapterKind.CHAT: self.openrouter_adapter}

    def openrouter_adapter(self, prompt: Optional[Prompt] = None) -> OpenRouterAdapter:
        return OpenRouterAdapter(
            provider=self.provider_name,
            base_url=self.config.get("base_url") or OPENROUTER_DEFAULT_BASE_URL,
            api_key=self.config.get("api_key"),
            model=self.config.get("model"),
            app_url=self.config.get("app_url"),
            app_title=self.config.get("app_title"),
        )
