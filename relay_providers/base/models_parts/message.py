"""
Canonical chat message.

Defines :class:`Message` and the :data:`Role` literal. ``content`` is either a
plain string or an ordered list of :class:`ContentPart`. Tool results link back
to the action they answer through ``action_id``/``action_name``; assistant
tool requests are carried in ``requested_actions``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import Field, model_validator

from .action import Action
from .canonical import CanonicalModel
from .content_part import ContentPart

Role = Literal["system", "user", "assistant", "tool"]
VALID_ROLES = ("system", "user", "assistant", "tool")


class Message(CanonicalModel):
    """A single conversation message.

    Attributes:
        role: One of ``system``, ``user``, ``assistant`` or ``tool``.
        content: Text or ordered content parts.
        action_id: For ``tool`` messages, the id of the answered action.
        action_name: For ``tool`` messages, the name of the answered action.
        requested_actions: Tool invocations requested by an assistant turn.
        metadata: Opaque caller data; never sent on the wire.
        generation_id: Provider response id that produced this message.
        parsed: Decoded structured output when a JSON schema was requested.
    """

    role: Role
    content: Union[str, List[ContentPart]] = ""
    action_id: Optional[str] = None
    action_name: Optional[str] = None
    requested_actions: List[Action] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    generation_id: Optional[str] = None
    parsed: Optional[Any] = None

    @model_validator(mode="after")
    def _check_actions(self) -> "Message":
        if self.requested_actions and self.role != "assistant":
            raise ValueError("requested_actions are only valid on assistant messages")
        return self

    @property
    def is_multipart(self) -> bool:
        return isinstance(self.content, list)

    @property
    def action_requested(self) -> bool:
        return bool(self.requested_actions)

    @property
    def text(self) -> str:
        """Plain-text view: the string content or the joined text parts."""
        if isinstance(self.content, str):
            return self.content
        return "".join(p.text or "" for p in self.content if p.type == "text")

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_none=True, exclude={"requested_actions", "metadata"})
        if self.requested_actions:
            data["requested_actions"] = [a.to_dict() for a in self.requested_actions]
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


__all__ = ["Message", "Role", "VALID_ROLES"]
