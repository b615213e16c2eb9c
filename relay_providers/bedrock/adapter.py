"""Bedrock gateway adapter for Anthropic models.

Purpose:
- Send Anthropic Messages API bodies through AWS Bedrock Runtime. The body is
  built by :class:`~relay_providers.anthropic.adapter.AnthropicAdapter` and
  rewritten according to gateway rules, which are configuration data
  (``config.defaults.BEDROCK_RULES``, overridable via ``bedrock.rules`` in the
  config file).

Rewrite rules:
- Path: ``model/{model}/invoke`` or ``model/{model}/invoke-with-response-stream``
  with the model id URL-encoded.
- ``model`` and ``stream`` are removed from the body.
- ``anthropic_version`` is injected when absent.
- ``anthropic-beta`` is renamed ``anthropic_beta``.
- Batches, token counting and model listing have no gateway route and raise
  ``UnsupportedFeatureError``.

Authentication uses a Bedrock API key as a bearer token
(``AWS_BEARER_TOKEN_BEDROCK``); streamed responses use the AWS event-stream
framing.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from ..anthropic.adapter import MESSAGES_PATH, AnthropicAdapter
from ..base.adapter_kind import AdapterKind
from ..base.errors import ConfigurationError, UnsupportedFeatureError
from ..base.models import Message, Prompt, Response, WireRequest
from ..base.streaming import Translator
from ..config import get_gateway_rules
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS

EVENT_STREAM_MEDIA_TYPE = "application/vnd.amazon.eventstream"


def rewrite_body(body: Mapping[str, Any], rules: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply the gateway body rules to an Anthropic Messages body."""
    out = dict(body)
    for old, new in (rules.get("rename_fields") or {}).items():
        if old in out:
            out[new] = out.pop(old)
    for name in rules.get("drop_fields") or ():
        out.pop(name, None)
    if rules.get("anthropic_version"):
        out.setdefault("anthropic_version", rules["anthropic_version"])
    return out


class BedrockAdapter:
    """Anthropic shapes routed through the Bedrock Runtime gateway."""

    kind = AdapterKind.BEDROCK

    def __init__(
        self,
        *,
        region: Optional[str],
        api_key: Optional[str],
        model: Optional[str] = None,
        max_tokens: int = ANTHROPIC_DEFAULT_MAX_TOKENS,
        rules: Optional[Mapping[str, Any]] = None,
        provider: str = "bedrock",
    ) -> None:
        self.provider = provider
        self.region = region
        self.api_key = api_key
        self.rules: Dict[str, Any] = dict(rules) if rules is not None else get_gateway_rules("bedrock")
        self._messages = AnthropicAdapter(provider=provider, model=model, max_tokens=max_tokens)

    @property
    def base_url(self) -> str:
        if not self.region:
            raise ConfigurationError(message="missing AWS region", provider=self.provider)
        return str(self.rules["base_url"]).format(region=self.region)

    @property
    def supports_streaming(self) -> bool:
        return True

    def stream_translator(self) -> Translator:
        return self._messages.stream_translator()

    def operation_path(self, operation: str, model: str, *, stream: bool = False) -> str:
        """Gateway path for an Anthropic API ``operation``."""
        op = operation.strip("/")
        if op in (self.rules.get("unsupported_operations") or ()):
            raise UnsupportedFeatureError(
                message=f"{op} is not available through the Bedrock gateway",
                provider=self.provider,
                model=model,
                operation=op,
            )
        if op != MESSAGES_PATH:
            raise UnsupportedFeatureError(
                message=f"no gateway route for {op}",
                provider=self.provider,
                model=model,
                operation=op,
            )
        template = self.rules["stream_path" if stream else "invoke_path"]
        return str(template).format(model=quote(model, safe=""))

    def build_request(self, prompt: Prompt, *, stream: bool = False) -> WireRequest:
        if not self.api_key:
            raise ConfigurationError(message="missing Bedrock API key", provider=self.provider)
        base_url = self.base_url
        body = self._messages.build_body(prompt, stream=stream)
        path = self.operation_path(MESSAGES_PATH, body["model"], stream=stream)
        headers = {"Authorization": f"Bearer {self.api_key}"}
        if stream:
            headers["Accept"] = EVENT_STREAM_MEDIA_TYPE
        return WireRequest(
            method="POST",
            path=path,
            body=rewrite_body(body, self.rules),
            headers=headers,
            base_url=base_url,
            stream=stream,
            framing="aws-eventstream" if stream else "sse",
        )

    def parse_response(self, wire: Mapping[str, Any], prompt: Optional[Prompt] = None) -> Response:
        return self._messages.parse_response(wire, prompt)

    def finalize_stream_message(self, message: Message, prompt: Prompt) -> Message:
        return self._messages.finalize_stream_message(message, prompt)


__all__ = ["BedrockAdapter", "rewrite_body", "EVENT_STREAM_MEDIA_TYPE"]
