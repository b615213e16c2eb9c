"""OpenRouter adapter (OpenAI-compatible chat completions).

OpenRouter-specific request features ride on ``prompt.options.extras``:

- ``models`` (or ``fallback_models``): ordered fallback model list,
- ``transforms``: prompt transforms such as ``["middle-out"]``,
- ``provider``: routing preferences (``order``, ``allow_fallbacks``...).

App attribution headers ``HTTP-Referer`` and ``X-Title`` come from the
``app_url``/``app_title`` configuration keys.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.models import Prompt
from ..openai.chat_adapter import ChatAdapter

ROUTING_EXTRAS = ("models", "transforms", "provider")


def app_headers(app_url: Optional[str], app_title: Optional[str]) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    if app_url:
        headers["HTTP-Referer"] = app_url
    if app_title:
        headers["X-Title"] = app_title
    return headers


class OpenRouterAdapter(ChatAdapter):
    """Chat adapter with OpenRouter routing extras."""

    def __init__(self, *, app_url: Optional[str] = None, app_title: Optional[str] = None, **kwargs: Any) -> None:
        kwargs.setdefault("provider", "openrouter")
        headers = {**app_headers(app_url, app_title), **(kwargs.pop("headers", None) or {})}
        super().__init__(headers=headers, **kwargs)

    def build_body(self, prompt: Prompt, *, stream: bool = False) -> Dict[str, Any]:
        body = super().build_body(prompt, stream=stream)
        fallback = body.pop("fallback_models", None)
        if fallback and "models" not in body:
            body["models"] = list(fallback)
        if isinstance(body.get("models"), (list, tuple)):
            body["models"] = [m for m in body["models"] if m]
        return body


__all__ = ["OpenRouterAdapter", "app_headers", "ROUTING_EXTRAS"]
