"""Bedrock provider (Anthropic models behind AWS Bedrock Runtime).

Configuration: ``AWS_REGION``/``AWS_DEFAULT_REGION`` for the region,
``AWS_BEARER_TOKEN_BEDROCK`` for the API key, ``BEDROCK_MODEL`` for the
default model id, and gateway rules from ``config.get_gateway_rules``.

Token counting, batches and model listing are not routed by the gateway;
the corresponding methods raise ``UnsupportedFeatureError``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.adapter_kind import AdapterKind
from ..base.models import Prompt
from ..base.provider import AdapterBuilder, BaseProvider
from ..config import get_gateway_rules
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS
from .adapter import BedrockAdapter

__all__ = ["BedrockProvider"]


class BedrockProvider(BaseProvider):
    """Anthropic-on-Bedrock provider."""

    provider_name = "bedrock"

    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:
        return {AdapterKind.BEDROCK: self.bedrock_adapter}

    def bedrock_adapter(self, prompt: Optional[Prompt] = None) -> BedrockAdapter:
        rules = get_gateway_rules("bedrock")
        if isinstance(self.config.get("rules"), dict):
            rules |= self.config["rules"]
        return BedrockAdapter(
            region=self.config.get("region"),
            api_key=self.config.get("api_key"),
            model=self.config.get("model"),
            max_tokens=self.config.get("max_tokens") or ANTHROPIC_DEFAULT_MAX_TOKENS,
            rules=rules,
            provider=self.provider_name,
        )

    def count_tokens(self, prompt: Any) -> None:
        model = Prompt.coerce(prompt).options.model or self.default_model() or ""
        self.bedrock_adapter().operation_path("v1/messages/count_tokens", model)

    def create_batch(self, prompts: Any) -> None:
        self.bedrock_adapter().operation_path("v1/messages/batches", self.default_model() or "")

    def list_models(self) -> None:
        self.bedrock_adapter().operation_path("v1/models", self.default_model() or "")
