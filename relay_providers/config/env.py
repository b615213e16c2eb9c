"""relay_providers.config.env
==========================

Centralized environment variable mapping and helpers for provider credentials.

Purpose
-------
- Provide a single source of truth for mapping provider identifiers to their
  corresponding environment variable names (canonical and aliases).
- Offer small utilities to look up provider credentials consistently across
  the relay_providers package.

Design Notes
------------
- Canonical mapping is defined in ``ENV_MAP``. Providers accepting several
  names list them in ``ENV_ALIASES`` with the canonical name first to
  establish precedence (Azure accepts an API key or an access token).
- Ollama is deliberately absent: the local daemon needs no key.

Failure Modes
-------------
- Functions return ``None`` when a provider is unknown or no value is present.
- Helpers never raise on missing providers or unset variables; callers decide
  how to proceed (usually a ``ConfigurationError`` at build time).
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical provider → env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "azure": "AZURE_OPENAI_API_KEY",
    "bedrock": "AWS_BEARER_TOKEN_BEDROCK",
    "xai": "XAI_API_KEY",
}


# Provider → ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "azure": ("AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ACCESS_TOKEN"),
    "xai": ("XAI_API_KEY", "GROK_API_KEY"),
}

# Non-credential settings read from provider-specific variables
# (config field → ordered env var names).
EXTRA_ENV_FIELDS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "azure": {
        "resource": ("AZURE_OPENAI_RESOURCE",),
        "deployment": ("AZURE_OPENAI_DEPLOYMENT",),
        "api_version": ("AZURE_OPENAI_API_VERSION",),
        "responses_api_version": ("AZURE_OPENAI_RESPONSES_API_VERSION",),
    },
    "bedrock": {
        "region": ("AWS_REGION", "AWS_DEFAULT_REGION"),
    },
    "openrouter": {
        "app_url": ("OPENROUTER_APP_URL",),
        "app_title": ("OPENROUTER_APP_TITLE",),
    },
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for a provider."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a provider.

    The canonical name is yielded first, followed by any aliases.
    """
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):  # pragma: no branch - small tuples
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a provider from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty candidate, or
        ``(None, None)`` when nothing is set.
    """
    for name in get_env_var_candidates(provider):
        if val := os.environ.get(name):
            return val, name
    return None, None


def resolve_extra_fields(provider: str) -> Dict[str, str]:
    """Read provider-specific non-credential settings from the environment."""
    out: Dict[str, str] = {}
    for field, names in EXTRA_ENV_FIELDS.get((provider or "").lower(), {}).items():
        for name in names:
            if val := os.environ.get(name):
                out[field] = val
                break
    return out


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "EXTRA_ENV_FIELDS",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
    "resolve_extra_fields",
]
