"""
Generation options attached to a prompt.

Covers the model id, sampling settings, structured-output schema, streaming
flag and broadcaster, forced tool choice, and provider-specific ``extras``
(for example OpenRouter fallback ``models`` or ``transforms``).
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union

from pydantic import Field

from .canonical import CanonicalModel

ToolChoice = Union[str, Dict[str, Any]]


class PromptOptions(CanonicalModel):
    """Options that shape a single generation.

    Attributes:
        model: Target model identifier; adapters fall back to configuration.
        temperature: Sampling temperature in ``[0, 2]``.
        max_tokens: Upper bound on generated tokens.
        json_schema: Structured-output contract. Either an envelope
            ``{"name", "schema", "strict", "description"}`` or a bare JSON
            schema.
        stream: Request incremental delivery.
        broadcaster: Callable receiving lifecycle events while streaming.
        tool_choice: ``"auto"``, ``"none"``, ``"required"`` or a mapping
            naming one tool (``{"name": ...}`` or
            ``{"type": "function", "function": {"name": ...}}``).
        previous_response_id: Responses-style conversation continuation.
        extras: Provider-specific request fields merged into the wire body.
    """

    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    json_schema: Optional[Dict[str, Any]] = None
    stream: bool = False
    broadcaster: Optional[Callable[..., Any]] = Field(default=None, exclude=True)
    tool_choice: Optional[ToolChoice] = None
    previous_response_id: Optional[str] = None
    extras: Dict[str, Any] = Field(default_factory=dict)

    @property
    def structured_output(self) -> bool:
        return bool(self.json_schema)

    def schema_envelope(self, default_name: str = "response") -> Optional[Dict[str, Any]]:
        """Normalize ``json_schema`` into ``{name, schema, strict[, description]}``."""
        if not self.json_schema:
            return None
        raw = self.json_schema
        schema = raw.get("schema") if isinstance(raw.get("schema"), dict) else raw
        envelope: Dict[str, Any] = {
            "name": raw.get("name") or default_name,
            "schema": schema,
            "strict": raw.get("strict") is not False,
        }
        if raw.get("description"):
            envelope["description"] = raw["description"]
        return envelope

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_none=True)
        if not data.get("extras"):
            data.pop("extras", None)
        return data


__all__ = ["PromptOptions", "ToolChoice"]
