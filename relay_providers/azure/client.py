"""Azure OpenAI provider.

Configuration keys (``get_provider_config("azure")``): ``resource``
(``AZURE_OPENAI_RESOURCE``), ``deployment`` (``AZURE_OPENAI_DEPLOYMENT``),
``api_key`` (``AZURE_OPENAI_API_KEY`` or ``AZURE_OPENAI_ACCESS_TOKEN``),
``api_version`` (``AZURE_OPENAI_API_VERSION``), ``responses_api_version``
(``AZURE_OPENAI_RESPONSES_API_VERSION``) and optional ``base_url``.
"""

from __future__ import annotations

from typing import Dict, Optional

from ..base.adapter_kind import AdapterKind
from ..base.models import Prompt
from ..base.provider import AdapterBuilder, BaseProvider
from .adapter import AzureAdapter

__all__ = ["AzureOpenAIProvider"]


class AzureOpenAIProvider(BaseProvider):
    provider_name = "azure"

    def default_model(self) -> Optional[str]:
        return self.config.get("model") or self.config.get("deployment")

    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:
        return {AdapterKind.AZURE: self.azure_adapter}

    def azure_adapter(self, prompt: Optional[Prompt] = None) -> AzureAdapter:
        return AzureAdapter(
            resource=self.config.get("resource"),
            deployment=self.config.get("deployment"),
            api_key=self.config.get("api_key"),
            api_version=self.config.get("api_version"),
            responses_api_version=self.config.get("responses_api_version"),
            base_url=self.config.get("base_url"),
            provider=self.provider_name,
        )
