"""Interfaces parts package: one Protocol per module."""

from .llm_provider import LLMProvider
from .provider_adapter import ProviderAdapter
from .supports_streaming import SupportsStreaming
from .transport import Transport

__all__ = ["LLMProvider", "ProviderAdapter", "SupportsStreaming", "Transport"]
