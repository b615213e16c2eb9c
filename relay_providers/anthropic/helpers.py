"""Anthropic helpers module.

Purpose:
- Provide side-effect-free utilities mapping canonical messages, actions and
  tool choices onto the Anthropic Messages API shapes. Used by the direct
  Anthropic adapter and by the Bedrock gateway adapter.

Notes:
- System text is carried in the top-level ``system`` field, never in
  ``messages``.
- Tool results become ``tool_result`` blocks inside a ``user`` turn; adjacent
  turns of the same role are merged because the API requires alternation.
- A structured-output schema without tools is expressed as a synthesized
  ``json_output`` tool the model is forced to call.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from ..base.models import Action, ContentPart, Message, Prompt
from ..base.utils.messages import parse_structured_text

JSON_OUTPUT_TOOL = "json_output"


def _source(part: ContentPart) -> Dict[str, Any]:
    if part.file_id:
        return {"type": "file", "file_id": part.file_id}
    if part.data:
        return {"type": "base64", "media_type": part.mime_type or "application/octet-stream", "data": part.data}
    url = part.url or ""
    if url.startswith("data:") and ";base64," in url:
        header, data = url.split(",", 1)
        return {"type": "base64", "media_type": header[5:].split(";", 1)[0], "data": data}
    return {"type": "url", "url": url}


def content_block(part: ContentPart) -> Dict[str, Any]:
    if part.type == "text":
        return {"type": "text", "text": part.text}
    block: Dict[str, Any] = {"type": "image" if part.type == "image" else "document", "source": _source(part)}
    if part.type == "file" and part.filename:
        block["title"] = part.filename
    return block


def message_blocks(message: Message) -> List[Dict[str, Any]]:
    """Content blocks for one user/assistant/tool message."""
    if message.role == "tool":
        block: Dict[str, Any] = {"type": "tool_result", "tool_use_id": message.action_id, "content": message.text}
        if message.metadata.get("is_error"):
            block["is_error"] = True
        return [block]
    if isinstance(message.content, list):
        blocks = [content_block(p) for p in message.content]
    else:
        blocks = [{"type": "text", "text": message.content}] if message.content else []
    for action in message.requested_actions:
        blocks.append({"type": "tool_use", "id": action.id, "name": action.name, "input": dict(action.params or {})})
    return blocks


def anthropic_messages(messages: List[Message]) -> List[Dict[str, Any]]:
    """Map canonical messages to alternating ``messages`` entries."""
    out: List[Dict[str, Any]] = []
    for message in messages:
        if message.role == "system":
            continue
        role = "assistant" if message.role == "assistant" else "user"
        blocks = message_blocks(message)
        if not blocks:
            continue
        if out and out[-1]["role"] == role:
            out[-1]["content"].extend(blocks)
        else:
            out.append({"role": role, "content": blocks})
    return out


def anthropic_tool(action: Action) -> Dict[str, Any]:
    tool: Dict[str, Any] = {"name": action.name}
    if action.description:
        tool["description"] = action.description
    tool["input_schema"] = action.parameters or {"type": "object", "properties": {}}
    return tool


def anthropic_tool_choice(choice: Any) -> Optional[Dict[str, Any]]:
    """``required`` -> ``any``; a named tool -> ``{type: tool, name}``."""
    if choice is None:
        return None
    if isinstance(choice, str):
        return {"type": "any" if choice == "required" else choice}
    if choice.get("type") in ("auto", "any", "none") and not choice.get("name"):
        return {"type": choice["type"]}
    fn = choice.get("function") if isinstance(choice.get("function"), Mapping) else {}
    return {"type": "tool", "name": choice.get("name") or fn.get("name")}


def json_output_tool(prompt: Prompt) -> Dict[str, Any]:
    envelope = prompt.options.schema_envelope(default_name=JSON_OUTPUT_TOOL) or {}
    return {
        "name": JSON_OUTPUT_TOOL,
        "description": envelope.get("description") or "Return JSON adhering to provided schema",
        "input_schema": envelope.get("schema") or {"type": "object"},
    }


def unwrap_structured(message: Message, prompt: Optional[Prompt]) -> Message:
    """Move a ``json_output`` tool call into ``content``/``parsed``.

    Without a schema the message is returned untouched. When no such call is
    present the text is decoded instead.
    """
    if prompt is None or not prompt.options.structured_output:
        return message
    for action in message.requested_actions:
        if action.name == JSON_OUTPUT_TOOL and not prompt.actions:
            remaining = [a for a in message.requested_actions if a is not action]
            message.requested_actions = remaining
            message.parsed = action.params
            if action.params is not None:
                message.content = json.dumps(action.params, ensure_ascii=False)
            return message
    message.parsed = parse_structured_text(message.text)
    return message


__all__ = [
    "JSON_OUTPUT_TOOL",
    "content_block",
    "message_blocks",
    "anthropic_messages",
    "anthropic_tool",
    "anthropic_tool_choice",
    "json_output_tool",
    "unwrap_structured",
]
