"""
Provider-agnostic interfaces (Protocols) for the providers layer.

Re-exports the single-class modules under
``relay_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import LLMProvider, ProviderAdapter, SupportsStreaming, Transport

__all__ = ["LLMProvider", "ProviderAdapter", "SupportsStreaming", "Transport"]
