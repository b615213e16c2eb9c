"""
Canonical prompt: the complete input of one generation.

A :class:`Prompt` is read-only to adapters. The only sanctioned mutation is
tool-choice clearing between turns
(:func:`relay_providers.base.tool_choice.clear_forced_tool_choice`).
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .action import Action
from .canonical import CanonicalModel
from .message import Message
from .prompt_options import PromptOptions


class Prompt(CanonicalModel):
    """Ordered messages plus declared actions, instructions and options."""

    messages: List[Message] = Field(default_factory=list)
    actions: List[Action] = Field(default_factory=list)
    instructions: Optional[str] = None
    options: PromptOptions = Field(default_factory=PromptOptions)

    @field_validator("actions")
    @classmethod
    def _declarations_need_names(cls, value: List[Action]) -> List[Action]:
        for idx, action in enumerate(value):
            if not action.name:
                raise ValueError(f"action {idx} has no name")
        return value

    @property
    def has_multipart_content(self) -> bool:
        """True when any message carries parts, or an image/file reference."""
        for message in self.messages:
            if message.is_multipart:
                return True
            if isinstance(message.content, str) and message.content.startswith("data:"):
                return True
        return False

    @property
    def has_file_or_image_input(self) -> bool:
        for message in self.messages:
            if isinstance(message.content, list) and any(p.type in ("image", "file") for p in message.content):
                return True
        extras = self.options.extras
        return any(extras.get(k) for k in ("input_file_id", "input_image", "input_image_url"))

    def system_text(self) -> Optional[str]:
        """Instructions and system messages joined into one system string."""
        chunks = [self.instructions] if self.instructions else []
        chunks.extend(m.text for m in self.messages if m.role == "system" and m.text)
        return "\n\n".join(chunks) if chunks else None

    def snapshot(self) -> "Prompt":
        """Deep copy used as the response's record of the prompt.

        The broadcaster is dropped before copying; callables are not part of
        the record.
        """
        bare = self.model_copy(update={"options": self.options.model_copy(update={"broadcaster": None})})
        return bare.model_copy(deep=True)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"messages": [m.to_dict() for m in self.messages]}
        if self.actions:
            data["actions"] = [a.to_dict() for a in self.actions]
        if self.instructions is not None:
            data["instructions"] = self.instructions
        data["options"] = self.options.to_dict()
        return data


__all__ = ["Prompt"]
