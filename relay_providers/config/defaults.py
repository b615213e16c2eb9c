"""relay_providers.config.defaults
===============================

Central place for small, stable default values used across the
relay_providers package. These defaults can be overridden via environment
variables or external configuration, but provide sensible fallbacks for
local development and tests.

Module Purpose
--------------
- Provide a single import location for conservative default constants (no I/O).
- Keep adapters free of magic literals (base URLs, API versions, gateway
  rewrite rules, auto-resolution rules).

This module intentionally avoids importing from other provider packages to
prevent circular dependencies. Only plain constants should live here.
"""

from __future__ import annotations

# ---- Provider-specific sane defaults ----
# OpenAI
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

# Anthropic
ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-20250514"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_API_VERSION = "2023-06-01"
# Anthropic rejects requests without max_tokens
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096

# OpenRouter
OPENROUTER_DEFAULT_MODEL = "openrouter/auto"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

# xAI (Grok, OpenAI-compatible chat completions)
XAI_DEFAULT_MODEL = "grok-2-latest"
XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"

# Ollama (local daemon, OpenAI-compatible surface under /v1)
OLLAMA_DEFAULT_MODEL = "llama3.1"
OLLAMA_DEFAULT_HOST = "http://localhost:11434"

# Azure OpenAI
AZURE_DEFAULT_API_VERSION = "2024-10-21"
AZURE_BASE_URL_TEMPLATE = "https://{resource}.openai.azure.com/openai/deployments/{deployment}"
# The Responses API is not deployment-scoped and needs a preview api-version.
AZURE_RESPONSES_BASE_URL_TEMPLATE = "https://{resource}.openai.azure.com/openai"
AZURE_RESPONSES_API_VERSION = "2025-03-01-preview"

# Bedrock (Anthropic models behind the AWS gateway)
BEDROCK_DEFAULT_MODEL = "anthropic.claude-3-5-sonnet-20241022-v2:0"
BEDROCK_DEFAULT_REGION = "us-east-1"

# Gateway rewrite rules, overridable via the config file section ``bedrock.rules``.
BEDROCK_RULES = {
    "base_url": "https://bedrock-runtime.{region}.amazonaws.com",
    "invoke_path": "model/{model}/invoke",
    "stream_path": "model/{model}/invoke-with-response-stream",
    "anthropic_version": "bedrock-2023-05-31",
    "rename_fields": {"anthropic-beta": "anthropic_beta"},
    "drop_fields": ["model", "stream"],
    "unsupported_operations": [
        "v1/messages/batches",
        "v1/messages/count_tokens",
        "v1/models",
    ],
}

# Model-id prefix rules for the AUTO adapter (first match wins). Ids that
# contain a "/" and match no rule are routed to OpenRouter.
AUTO_RESOLUTION_RULES = [
    {"prefix": "anthropic.", "provider": "bedrock"},
    {"prefix": "us.anthropic.", "provider": "bedrock"},
    {"prefix": "eu.anthropic.", "provider": "bedrock"},
    {"prefix": "apac.anthropic.", "provider": "bedrock"},
    {"prefix": "claude", "provider": "anthropic"},
    {"prefix": "gpt-", "provider": "openai"},
    {"prefix": "chatgpt", "provider": "openai"},
    {"prefix": "o1", "provider": "openai"},
    {"prefix": "o3", "provider": "openai"},
    {"prefix": "o4", "provider": "openai"},
    {"prefix": "grok", "provider": "xai"},
    {"prefix": "llama", "provider": "ollama"},
    {"prefix": "qwen", "provider": "ollama"},
    {"prefix": "mistral", "provider": "ollama"},
    {"prefix": "gemma", "provider": "ollama"},
    {"prefix": "phi", "provider": "ollama"},
]
AUTO_SLASH_PROVIDER = "openrouter"
