"""OpenAI Responses API adapter.

Purpose:
    Serve prompts chat completions cannot express: structured-output schemas,
    multi-part content, and file or image inputs. Selection between this
    adapter and :class:`~relay_providers.openai.chat_adapter.ChatAdapter` is
    the pure :func:`~relay_providers.base.adapter_kind.select_openai_family`.

Wire mapping:
    - messages -> ``input`` items; parts become ``input_text``,
      ``input_image`` and ``input_file`` (``output_text`` for assistant turns).
    - assistant tool requests -> ``function_call`` items; tool messages ->
      ``function_call_output`` items.
    - tools -> flat ``{type: function, name, description, parameters}``.
    - schema -> ``text.format = {type: json_schema, name, schema, strict}``.
    - ``previous_response_id`` is forwarded for server-side continuation.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..base.adapter_kind import AdapterKind
from ..base.errors import ConfigurationError, ProviderApiError
from ..base.models import Action, ContentPart, Message, Prompt, Response, WireRequest
from ..base.streaming import Translator
from ..base.tokens import extract_usage
from ..base.utils.messages import action_from_arguments, merge_extras, parse_structured_text, serialize_params
from .stream_translators import stream_error, translate_responses_event

RESPONSES_PATH = "responses"


def responses_tool(action: Action) -> Dict[str, Any]:
    tool: Dict[str, Any] = {"type": "function", "name": action.name}
    if action.description:
        tool["description"] = action.description
    tool["parameters"] = action.parameters or {"type": "object", "properties": {}}
    return tool


def responses_tool_choice(choice: Any) -> Any:
    if isinstance(choice, str) or choice is None:
        return choice
    fn = choice.get("function") if isinstance(choice.get("function"), Mapping) else {}
    return {"type": "function", "name": choice.get("name") or fn.get("name")}


def _input_part(part: ContentPart, role: str) -> Dict[str, Any]:
    if part.type == "text":
        return {"type": "output_text" if role == "assistant" else "input_text", "text": part.text}
    if part.type == "image":
        if part.file_id:
            return {"type": "input_image", "file_id": part.file_id}
        return {"type": "input_image", "image_url": part.data_url}
    out: Dict[str, Any] = {"type": "input_file"}
    if part.file_id:
        out["file_id"] = part.file_id
    elif part.data:
        out["file_data"] = part.data_url
    else:
        out["file_url"] = part.url
    if part.filename:
        out["filename"] = part.filename
    return out


def _extra_input_parts(prompt: Prompt) -> List[Dict[str, Any]]:
    extras = prompt.options.extras
    parts: List[Dict[str, Any]] = []
    if extras.get("input_file_id"):
        parts.append({"type": "input_file", "file_id": extras["input_file_id"]})
    for key in ("input_image_url", "input_image"):
        if extras.get(key):
            parts.append({"type": "input_image", "image_url": extras[key]})
    return parts


def responses_input(prompt: Prompt) -> List[Dict[str, Any]]:
    """Map canonical messages to Responses ``input`` items."""
    items: List[Dict[str, Any]] = []
    for message in prompt.messages:
        if message.role == "tool":
            items.append({"type": "function_call_output", "call_id": message.action_id, "output": message.text})
            continue
        if isinstance(message.content, list):
            items.append({"role": message.role, "content": [_input_part(p, message.role) for p in message.content]})
        elif message.content:
            items.append({"role": message.role, "content": message.content})
        for action in message.requested_actions:
            items.append(
                {
                    "type": "function_call",
                    "call_id": action.id,
                    "name": action.name,
                    "arguments": serialize_params(action.params),
                }
            )
    extra = _extra_input_parts(prompt)
    if extra:
        target = next((i for i in reversed(items) if i.get("role") == "user"), None)
        if target is None:
            items.append({"role": "user", "content": extra})
        else:
            if isinstance(target["content"], str):
                target["content"] = [{"type": "input_text", "text": target["content"]}]
            target["content"].extend(extra)
    return items


class ResponsesAdapter:
    """Request builder / response parser for the Responses API."""

    kind = AdapterKind.RESPONSES

    def __init__(
        self,
        *,
        provider: str = "openai",
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        require_api_key: bool = True,
    ) -> None:
        self.provider = provider
        self.base_url = base_url
        self.api_key = api_key
        self.model = model
        self.headers = dict(headers or {})
        self.require_api_key = require_api_key

    @property
    def supports_streaming(self) -> bool:
        return True

    def stream_translator(self) -> Translator:
        return translate_responses_event

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
        body: Dict[str, Any] = {"model": self.resolve_model(prompt), "input": responses_input(prompt)}
        if prompt.instructions:
            body["instructions"] = prompt.instructions
        if options.temperature is not None:
            body["temperature"] = options.temperature
        if options.max_tokens is not None:
            body["max_output_tokens"] = options.max_tokens
        if prompt.actions:
            body["tools"] = [responses_tool(a) for a in prompt.actions]
            if options.tool_choice is not None:
                body["tool_choice"] = responses_tool_choice(options.tool_choice)
        if options.structured_output:
            envelope = options.schema_envelope()
            body["text"] = {"format": {"type": "json_schema", **envelope}}
        if options.previous_response_id:
            body["previous_response_id"] = options.previous_response_id
        if stream:
            body["stream"] = True
        return merge_extras(body, prompt)

    def build_request(self, prompt: Prompt, *, stream: bool = False) -> WireRequest:
        return WireRequest(
            method="POST",
            path=RESPONSES_PATH,
            body=self.build_body(prompt, stream=stream),
            headers={**self.headers, **self.auth_headers()},
            base_url=self.base_url,
            stream=stream,
        )

    # ------------------------------------------------------------------

    def parse_message(self, wire: Mapping[str, Any], prompt: Optional[Prompt] = None) -> Message:
        if wire.get("status") == "failed" or wire.get("error"):
            raise stream_error(wire, provider=self.provider)
        output = wire.get("output")
        if not isinstance(output, list):
            raise ProviderApiError(
                message="responses payload carries no output",
                provider=self.provider,
                model=wire.get("model"),
                body=dict(wire),
            )
        texts: List[str] = []
        actions: List[Action] = []
        role = "assistant"
        for item in output:
            kind = item.get("type")
            if kind == "message":
                role = item.get("role") or role
                texts.extend(
                    part.get("text") or ""
                    for part in item.get("content") or []
                    if part.get("type") in ("output_text", "text")
                )
            elif kind == "function_call":
                actions.append(action_from_arguments(item.get("call_id"), item.get("name"), item.get("arguments")))
        text = "".join(texts)
        message = Message(role=role, content=text, requested_actions=actions, generation_id=wire.get("id"))
        if prompt is not None and prompt.options.structured_output:
            message.parsed = parse_structured_text(text)
        return message

    def parse_response(self, wire: Mapping[str, Any], prompt: Optional[Prompt] = None) -> Response:
        return Response(
            message=self.parse_message(wire, prompt),
            prompt=prompt.snapshot() if prompt is not None else None,
            raw=dict(wire),
            usage=extract_usage(wire),
        )


__all__ = ["ResponsesAdapter", "RESPONSES_PATH", "responses_input", "responses_tool", "responses_tool_choice"]
