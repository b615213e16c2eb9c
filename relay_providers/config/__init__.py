"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (models, base URLs, API versions, gateway rules).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by
       RELAY_PROVIDERS_CONFIG_FILE
    3. Environment variables (e.g. OPENAI_MODEL, OPENAI_API_KEY)
    4. In-code overrides passed to helper
* Provide a single call site: ``get_provider_config(provider: str)``.

Environment Variable Conventions
--------------------------------
<PROVIDER>_MODEL, <PROVIDER>_API_KEY, <PROVIDER>_BASE_URL, <PROVIDER>_HOST
e.g. OPENAI_MODEL, OPENROUTER_BASE_URL, OLLAMA_HOST. Credentials also
resolve through :mod:`relay_providers.config.env` (aliases such as
AZURE_OPENAI_ACCESS_TOKEN) and provider-specific settings such as
AZURE_OPENAI_RESOURCE or AWS_REGION.

External Config File (Optional)
-------------------------------
If RELAY_PROVIDERS_CONFIG_FILE is set to a path, JSON is attempted first,
then YAML. Structure example:

```
openai:
  model: gpt-4o-mini
  retry:
    max_attempts: 5
azure:
  resource: my-resource
  deployment: gpt-4o
bedrock:
  region: eu-west-1
  rules:
    anthropic_version: bedrock-2023-05-31
auto:
  rules:
    - {prefix: "my-", provider: ollama}
```

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_model(provider: str) -> str | None
* get_gateway_rules(provider: str) -> dict
* get_auto_rules() -> list[dict]
* reset_config_cache() -> None
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional
import copy
import json
import os

import yaml

from .env import is_placeholder, resolve_extra_fields, resolve_provider_key
from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MAX_TOKENS,
    ANTHROPIC_DEFAULT_MODEL,
    ANTHROPIC_API_VERSION,
    AUTO_RESOLUTION_RULES,
    AZURE_DEFAULT_API_VERSION,
    AZURE_RESPONSES_API_VERSION,
    BEDROCK_DEFAULT_MODEL,
    BEDROCK_DEFAULT_REGION,
    BEDROCK_RULES,
    OLLAMA_DEFAULT_HOST,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENROUTER_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_MODEL,
    XAI_DEFAULT_BASE_URL,
    XAI_DEFAULT_MODEL,
)

# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    "anthropic": {
        "model": ANTHROPIC_DEFAULT_MODEL,
        "base_url": ANTHROPIC_DEFAULT_BASE_URL,
        "api_version": ANTHROPIC_API_VERSION,
        "max_tokens": ANTHROPIC_DEFAULT_MAX_TOKENS,
    },
    "openrouter": {"model": OPENROUTER_DEFAULT_MODEL, "base_url": OPENROUTER_DEFAULT_BASE_URL},
    "ollama": {"model": OLLAMA_DEFAULT_MODEL, "host": OLLAMA_DEFAULT_HOST},
    "xai": {"model": XAI_DEFAULT_MODEL, "base_url": XAI_DEFAULT_BASE_URL},
    "azure": {"api_version": AZURE_DEFAULT_API_VERSION, "responses_api_version": AZURE_RESPONSES_API_VERSION},
    "bedrock": {
        "model": BEDROCK_DEFAULT_MODEL,
        "region": BEDROCK_DEFAULT_REGION,
        "max_tokens": ANTHROPIC_DEFAULT_MAX_TOKENS,
    },
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
    "host": "HOST",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times. Overrides existing environment variables only if their
    current values appear to be placeholders (e.g., contain 'placeholder').
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("RELAY_DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("RELAY_PROVIDERS_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE = data
    return data


def reset_config_cache() -> None:
    """Forget the cached config file and .env state (tests, reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None:
            out[field] = val
    out |= resolve_extra_fields(provider)
    if "api_key" not in out:
        key, _ = resolve_provider_key(provider)
        if key:
            out["api_key"] = key
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = copy.deepcopy(DEFAULTS.get(name, {}))

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


def get_gateway_rules(provider: str = "bedrock") -> Dict[str, Any]:
    """Return gateway rewrite rules: built-ins updated by ``<provider>.rules``."""
    rules = copy.deepcopy(BEDROCK_RULES) if provider == "bedrock" else {}
    section = _load_external_config().get(provider)
    if isinstance(section, dict) and isinstance(section.get("rules"), dict):
        rules |= section["rules"]
    return rules


def get_auto_rules() -> List[Dict[str, str]]:
    """Return AUTO prefix rules; file-supplied ``auto.rules`` take precedence."""
    section = _load_external_config().get("auto")
    extra: List[Dict[str, str]] = []
    if isinstance(section, dict) and isinstance(section.get("rules"), list):
        extra = [r for r in section["rules"] if isinstance(r, dict) and r.get("prefix") and r.get("provider")]
    return extra + copy.deepcopy(AUTO_RESOLUTION_RULES)


__all__ = [
    "get_provider_config",
    "get_model",
    "get_gateway_rules",
    "get_auto_rules",
    "reset_config_cache",
    "DEFAULTS",
]
