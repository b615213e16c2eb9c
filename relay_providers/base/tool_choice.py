"""Forced tool-choice clearing between turns.

When a request forces tool use (``tool_choice="required"`` or a specific
tool), sending the same forced choice on the follow-up turn (the one carrying
the tool results) would make the model call tools forever. After a turn
completes the forced choice is cleared when:

(a) the choice was ``"required"`` and at least one tool was invoked, or
(b) the choice named one specific tool and exactly that tool was invoked.

Every other combination, including ``"required"`` with no tool invoked, is
left untouched so the caller can see it.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Set

from .logging import LogContext, get_logger, log_event
from .models import Message, Prompt

_logger = get_logger("tool_choice")


def forced_tool_name(choice: Any) -> Optional[str]:
    """Return the tool named by a specific-tool choice, else ``None``.

    Accepts ``{"name": ...}``, ``{"type": "tool", "name": ...}`` and
    ``{"type": "function", "function": {"name": ...}}``.
    """
    if not isinstance(choice, Mapping):
        return None
    if choice.get("name"):
        return str(choice["name"])
    fn = choice.get("function")
    if isinstance(fn, Mapping) and fn.get("name"):
        return str(fn["name"])
    return None


def used_tool_names(messages: Iterable[Message]) -> List[str]:
    """Names of tools invoked by assistant messages, in order of appearance."""
    names: List[str] = []
    for message in messages:
        if message.role != "assistant":
            continue
        names.extend(a.name for a in message.requested_actions if a.name)
    return names


def should_clear(choice: Any, used: Iterable[str]) -> bool:
    used_set: Set[str] = set(used)
    if choice == "required":
        return bool(used_set)
    name = forced_tool_name(choice)
    if name is not None:
        return used_set == {name}
    return False


def clear_forced_tool_choice(
    prompt: Prompt,
    turn_messages: Iterable[Message],
    *,
    ctx: Optional[LogContext] = None,
) -> bool:
    """Apply the clearing rule to ``prompt`` after a turn.

    ``turn_messages`` are the messages produced by the completed turn (usually
    the response message). Returns True when the choice was cleared.
    """
    choice = prompt.options.tool_choice
    if choice is None:
        return False
    used = used_tool_names(turn_messages)
    if not should_clear(choice, used):
        return False
    prompt.options.tool_choice = None
    log_event(_logger, "tool_choice.cleared", ctx, previous=choice if isinstance(choice, str) else forced_tool_name(choice), used=used)
    return True


__all__ = [
    "forced_tool_name",
    "used_tool_names",
    "should_clear",
    "clear_forced_tool_choice",
]
