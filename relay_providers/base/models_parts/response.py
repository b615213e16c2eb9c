"""
Canonical generation response.

Created exactly once per generation by the provider pipeline. Carries the
resulting message, a snapshot of the prompt used, the raw wire payload for
diagnostics, a success flag, and usage counters when the provider reports
them.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .action import Action
from .canonical import CanonicalModel
from .message import Message
from .prompt import Prompt
from .usage import Usage


class Response(CanonicalModel):
    """Result of one generation."""

    message: Message
    prompt: Optional[Prompt] = None
    raw: Optional[Any] = None
    success: bool = True
    usage: Optional[Usage] = None

    @property
    def text(self) -> str:
        return self.message.text

    @property
    def requested_actions(self) -> List[Action]:
        return self.message.requested_actions

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"message": self.message.to_dict(), "success": self.success}
        if self.prompt is not None:
            data["prompt"] = self.prompt.to_dict()
        if self.raw is not None:
            data["raw"] = self.raw
        if self.usage is not None and not self.usage.empty:
            data["usage"] = self.usage.to_dict()
        return data


__all__ = ["Response"]
