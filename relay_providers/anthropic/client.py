"""Anthropic provider.

Runs the shared :class:`~relay_providers.base.provider.BaseProvider`
pipeline through :class:`AnthropicAdapter`. Configuration comes from
``get_provider_config("anthropic")`` (``ANTHROPIC_API_KEY``,
``ANTHROPIC_MODEL``, ``ANTHROPIC_BASE_URL``, plus ``api_version`` and
``max_tokens`` defaults).
"""

from __future__ import annotations

from typing import Dict, Optional

from ..base.adapter_kind import AdapterKind
from ..base.models import Prompt
from ..base.provider import AdapterBuilder, BaseProvider
from ..config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_DEFAULT_MAX_TOKENS
from .adapter import AnthropicAdapter

__all__ = ["AnthropicProvider"]


class AnthropicProvider(BaseProvider):
    """Anthropic Messages API provider."""

    provider_name = "anthropic"

    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:
        return {AdapterKind.ANTHROPIC: self.anthropic_adapter}

    def anthropic_adapter(self, prompt: Optional[Prompt] = None) -> AnthropicAdapter:
        return AnthropicAdapter(
            provider=self.provider_name,
            base_url=self.config.get("base_url"),
            api_key=self.config.get("api_key"),
            model=self.config.get("model"),
            api_version=self.config.get("api_version") or ANTHROPIC_API_VERSION,
            max_tokens=self.config.get("max_tokens") or ANTHROPIC_DEFAULT_MAX_TOKENS,
        )
