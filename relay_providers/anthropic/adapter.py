"""Anthropic Messages API adapter.

Purpose:
- Build ``POST v1/messages`` requests and parse message payloads. The body
  builder is shared with the Bedrock gateway adapter, which rewrites it.

Request shape:
- ``system`` from instructions plus system messages; ``max_tokens`` always
  present (configured default when the prompt sets none).
- tools as ``{name, description, input_schema}``; ``tool_choice`` mapped
  (``required`` -> ``{type: any}``, named -> ``{type: tool, name}``).
- Auth via ``x-api-key``; ``anthropic-version`` header; an
  ``anthropic-beta`` extra is sent as a header.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.adapter_kind import AdapterKind
from ..base.errors import ConfigurationError, ProviderApiError
from ..base.models import Action, Message, Prompt, Response, WireRequest
from ..base.streaming import Translator
from ..base.tokens import extract_usage
from ..base.utils.messages import merge_extras
from ..config.defaults import ANTHROPIC_API_VERSION, ANTHROPIC_DEFAULT_MAX_TOKENS
from .helpers import (
    JSON_OUTPUT_TOOL,
    anthropic_messages,
    anthropic_tool,
    anthropic_tool_choice,
    json_output_tool,
    unwrap_structured,
)
from .stream_helpers import anthropic_error, translate_stream_chunk

MESSAGES_PATH = "v1/messages"
BETA_FIELD = "anthropic-beta"


class AnthropicAdapter:
    """Request builder / response parser for the Messages API."""

    kind = AdapterKind.ANTHROPIC

    def __init__(
        self,
        *,
        provider: str = "anthropic",
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_version: str = ANTHROPIC_API_VERSION,
        max_tokens: int = ANTHROPIC_DEFAULT_MAX_TOKENS,
    ) -> None:
        self.provider = provider
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.api_version = api_version
        self.max_tokens = int(max_tokens)

    @property
    def supports_streaming(self) -> bool:
        return True

    def stream_translator(self) -> Translator:
        return translate_stream_chunk

    def resolve_model(self, prompt: Prompt) -> str:
        model = prompt.options.model or self.model
        if not model:
            raise ConfigurationError(message="no model configured", provider=self.provider)
        return model

    def build_body(self, prompt: Prompt, *, stream: bool = False) -> Dict[str, Any]:
        """Messages API body including any extras (``anthropic-beta`` too)."""
        options = prompt.options
        body: Dict[str, Any] = {
            "model": self.resolve_model(prompt),
            "max_tokens": options.max_tokens or self.max_tokens,
            "messages": anthropic_messages(prompt.messages),
        }
        system = prompt.system_text()
        if system:
            body["system"] = system
        if options.temperature is not None:
            body["temperature"] = options.temperature
        if prompt.actions:
            body["tools"] = [anthropic_tool(a) for a in prompt.actions]
            choice = anthropic_tool_choice(options.tool_choice)
            if choice is not None:
                body["tool_choice"] = choice
        elif options.structured_output:
            body["tools"] = [json_output_tool(prompt)]
            body["tool_choice"] = {"type": "tool", "name": JSON_OUTPUT_TOOL}
        if stream:
            body["stream"] = True
        return merge_extras(body, prompt)

    def build_request(self, prompt: Prompt, *, stream: bool = False) -> WireRequest:
        if not self.api_key:
            raise ConfigurationError(message="missing API key", provider=self.provider)
        body = self.build_body(prompt, stream=stream)
        headers = {"x-api-key": self.api_key, "anthropic-version": self.api_version}
        beta = body.pop(BETA_FIELD, None)
        if beta:
            headers[BETA_FIELD] = ",".join(beta) if isinstance(beta, (list, tuple)) else str(beta)
        return WireRequest(
            method="POST",
            path=MESSAGES_PATH,
            body=body,
            headers=headers,
            base_url=self.base_url,
            stream=stream,
        )

    # ------------------------------------------------------------------

    def parse_message(self, wire: Mapping[str, Any], prompt: Optional[Prompt] = None) -> Message:
        if wire.get("type") == "error":
            raise anthropic_error(wire, provider=self.provider)
        blocks = wire.get("content")
        if not isinstance(blocks, list):
            raise ProviderApiError(
                message="message payload carries no content",
                provider=self.provider,
                model=wire.get("model"),
                body=dict(wire),
            )
        texts: List[str] = []
        actions: List[Action] = []
        for block in blocks:
            if block.get("type") == "text":
                texts.append(block.get("text") or "")
            elif block.get("type") == "tool_use":
                raw_input = block.get("input")
                actions.append(
                    Action(
                        id=block.get("id"),
                        name=block.get("name"),
                        params=dict(raw_input) if isinstance(raw_input, Mapping) else None,
                    )
                )
        message = Message(
            role=wire.get("role") or "assistant",
            content="".join(texts),
            requested_actions=actions,
            generation_id=wire.get("id"),
        )
        return unwrap_structured(message, prompt)

    def parse_response(self, wire: Mapping[str, Any], prompt: Optional[Prompt] = None) -> Response:
        return Response(
            message=self.parse_message(wire, prompt),
            prompt=prompt.snapshot() if prompt is not None else None,
            raw=dict(wire),
            usage=extract_usage(wire),
        )

    def finalize_stream_message(self, message: Message, prompt: Prompt) -> Message:
        return unwrap_structured(message, prompt)


__all__ = ["AnthropicAdapter", "MESSAGES_PATH", "BETA_FIELD"]
