"""OpenAI-compatible chat completions adapter.

Purpose:
    Translate canonical prompts into ``POST chat/completions`` bodies and
    parse completions back into canonical responses. The same adapter serves
    OpenAI, OpenRouter, Ollama (``/v1``) and Azure deployments; provider
    differences are limited to base URL, auth headers and extras.

Rules:
    - ``tools`` is attached only when no structured-output schema is set;
      asking for both is a caller error (``ValidationError``).
    - The schema maps to ``response_format = {type: json_schema,
      json_schema: {name, description?, schema, strict}}``.
    - Tool results are sent as ``{role: tool, tool_call_id, content}``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.adapter_kind import AdapterKind
from ..base.errors import ConfigurationError, ProviderApiError, ValidationError
from ..base.models import Action, ContentPart, Message, Prompt, Response, WireRequest
from ..base.streaming import Translator
from ..base.tokens import extract_usage
from ..base.utils.messages import action_from_arguments, merge_extras, parse_structured_text, serialize_params
from .stream_translators import translate_chat_chunk

CHAT_PATH = "chat/completions"


def chat_tool(action: Action) -> Dict[str, Any]:
    fn: Dict[str, Any] = {"name": action.name}
    if action.description:
        fn["description"] = action.description
    fn["parameters"] = action.parameters or {"type": "object", "properties": {}}
    return {"type": "function", "function": fn}


def chat_tool_choice(choice: Any) -> Any:
    """Map the canonical tool choice to the chat wire shape."""
    if isinstance(choice, str) or choice is None:
        return choice
    fn = choice.get("function") if isinstance(choice.get("function"), Mapping) else {}
    name = choice.get("name") or fn.get("name")
    return {"type": "function", "function": {"name": name}}


def _chat_part(part: ContentPart) -> Dict[str, Any]:
    if part.type == "text":
        return {"type": "text", "text": part.text}
    if part.type == "image":
        return {"type": "image_url", "image_url": {"url": part.data_url}}
    file: Dict[str, Any] = {"file_id": part.file_id} if part.file_id else {"file_data": part.data_url}
    if part.filename:
        file["filename"] = part.filename
    return {"type": "file", "file": file}


def chat_message(message: Message) -> Dict[str, Any]:
    """Map one canonical message to a chat ``messages`` entry."""
    if message.role == "tool":
        out: Dict[str, Any] = {"role": "tool", "content": message.text}
        if message.action_id:
            out["tool_call_id"] = message.action_id
        return out
    content: Any = message.content if isinstance(message.content, str) else [_chat_part(p) for p in message.content]
    out = {"role": message.role, "content": content}
    if message.requested_actions:
        out["tool_calls"] = [
            {
                "id": action.id,
                "type": "function",
                "function": {"name": action.name, "arguments": serialize_params(action.params)},
            }
            for action in message.requested_actions
        ]
        if not message.text:
            out["content"] = None
    return out


class ChatAdapter:
    """Request builder / response parser for chat completions."""

    kind = AdapterKind.CHAT

    def __init__(
        self,
        *,
        provider: str = "openai",
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        require_api_key: bool = True,
        include_usage: bool = True,
    ) -> None:
        self.provider = provider
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.headers = dict(headers or {})
        self.require_api_key = require_api_key
        self.include_usage = include_usage

    @property
    def supports_streaming(self) -> bool:
        return True

    def stream_translator(self) -> Translator:
        return translate_chat_chunk

    # ------------------------------------------------------------------

    def resolve_model(self, prompt: Prompt) -> str:
        model = prompt.options.model or self.model
        if not model:
            raise ConfigurationError(message="no model configured", provider=self.provider)
        return model

    def auth_headers(self) -> Dict[str, str]:
        if not self.api_key:
            if self.require_api_key:
                raise ConfigurationError(message="missing API key", provider=self.provider)
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    def build_body(self, prompt: Prompt, *, stream: bool = False) -> Dict[str, Any]:
        options = prompt.options
        if options.structured_output and prompt.actions:
            raise ValidationError(
                message="tools and a structured-output schema cannot be combined on chat completions",
                field="options.json_schema",
            )
        messages: List[Dict[str, Any]] = []
        if prompt.instructions:
            messages.append({"role": "system", "content": prompt.instructions})
        messages.extend(chat_message(m) for m in prompt.messages)

        body: Dict[str, Any] = {"model": self.resolve_model(prompt), "messages": messages}
        if options.temperature is not None:
            body["temperature"] = options.temperature
        if options.max_tokens is not None:
            body["max_tokens"] = options.max_tokens
        if options.structured_output:
            body["response_format"] = {"type": "json_schema", "json_schema": options.schema_envelope()}
        elif prompt.actions:
            body["tools"] = [chat_tool(a) for a in prompt.actions]
            if options.tool_choice is not None:
                body["tool_choice"] = chat_tool_choice(options.tool_choice)
        if stream:
            body["stream"] = True
            if self.include_usage:
                body["stream_options"] = {"include_usage": True}
        return merge_extras(body, prompt)

    def build_request(self, prompt: Prompt, *, stream: bool = False) -> WireRequest:
        body = self.build_body(prompt, stream=stream)
        headers = {**self.headers, **self.auth_headers()}
        return WireRequest(
            method="POST",
            path=CHAT_PATH,
            body=body,
            headers=headers,
            base_url=self.base_url,
            stream=stream,
        )

    # ------------------------------------------------------------------

    def parse_message(self, wire: Mapping[str, Any], prompt: Optional[Prompt] = None) -> Message:
        choices = wire.get("choices")
        if not choices:
            raise ProviderApiError(
                message="chat completion carries no choices",
                provider=self.provider,
                model=wire.get("model"),
                body=dict(wire),
            )
        payload = choices[0].get("message") or {}
        actions = [
            action_from_arguments(call.get("id"), (call.get("function") or {}).get("name"), (call.get("function") or {}).get("arguments"))
            for call in payload.get("tool_calls") or []
            if (call.get("function") or {}).get("name")
        ]
        text = payload.get("content") if isinstance(payload.get("content"), str) else ""
        message = Message(
            role=payload.get("role") or "assistant",
            content=text,
            requested_actions=actions,
            generation_id=wire.get("id"),
        )
        if prompt is not None and prompt.options.structured_output:
            message.parsed = parse_structured_text(text)
        return message

    def parse_response(self, wire: Mapping[str, Any], prompt: Optional[Prompt] = None) -> Response:
        message = self.parse_message(wire, prompt)
        return Response(
            message=message,
            prompt=prompt.snapshot() if prompt is not None else None,
            raw=dict(wire),
            usage=extract_usage(wire),
        )


__all__ = ["ChatAdapter", "CHAT_PATH", "chat_message", "chat_tool", "chat_tool_choice"]
