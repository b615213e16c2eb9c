"""Closed set of adapter kinds and the pure selection functions.

Selection depends only on the provider key and the prompt's shape. It has no
side effects and never instantiates an adapter, so it can be unit-tested on
its own.
"""
from __future__ import annotations

from enum import Enum

from .models import Prompt


class AdapterKind(str, Enum):
    """Wire protocol families."""

    CHAT = "chat"
    RESPONSES = "responses"
    ANTHROPIC = "anthropic"
    BEDROCK = "bedrock"
    AZURE = "azure"
    AUTO = "auto"


_PROVIDER_KINDS = {
    "anthropic": AdapterKind.ANTHROPIC,
    "bedrock": AdapterKind.BEDROCK,
    "azure": AdapterKind.AZURE,
    "ollama": AdapterKind.CHAT,
    "openrouter": AdapterKind.CHAT,
    "xai": AdapterKind.CHAT,
    "mock": AdapterKind.CHAT,
    "auto": AdapterKind.AUTO,
}


def requires_responses_api(prompt: Prompt) -> bool:
    """True when chat completions cannot express the prompt.

    That is the case for a structured-output schema, multi-part content, or
    file/image references.
    """
    return (
        prompt.options.structured_output
        or prompt.has_multipart_content
        or prompt.has_file_or_image_input
    )


def select_openai_family(prompt: Prompt) -> AdapterKind:
    """Pick CHAT or RESPONSES for the OpenAI family (also used by Azure)."""
    return AdapterKind.RESPONSES if requires_responses_api(prompt) else AdapterKind.CHAT


def select_adapter_kind(provider: str, prompt: Prompt) -> AdapterKind:
    """Map a provider key and prompt to the adapter kind that will serve it.

    ``openai`` resolves between CHAT and RESPONSES by prompt shape; providers
    without a dedicated adapter resolve to AUTO.
    """
    name = (provider or "").lower().strip()
    if name == "openai":
        return select_openai_family(prompt)
    return _PROVIDER_KINDS.get(name, AdapterKind.AUTO)


__all__ = [
    "AdapterKind",
    "requires_responses_api",
    "select_openai_family",
    "select_adapter_kind",
]
