"""Message helpers shared across provider adapters.

Small, side-effect free utilities used when translating canonical messages
to wire shapes and wire results back into canonical objects.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Mapping, Optional

from ..models import MALFORMED_ARGUMENTS, Action, Prompt
from ..streaming.tool_call_merger import ArgumentOutcome, finalize_arguments

# Extras consumed by adapters themselves rather than merged into the body.
LOCAL_EXTRAS = frozenset({"input_file_id", "input_image", "input_image_url"})


def serialize_params(params: Optional[Mapping[str, Any]]) -> str:
    """Encode action params as the JSON argument string providers expect."""
    return json.dumps(dict(params or {}), ensure_ascii=False)


def action_from_arguments(call_id: Optional[str], name: Optional[str], arguments: Any) -> Action:
    """Build an invoked :class:`Action` from a complete wire argument value.

    ``arguments`` may be a JSON string, an already decoded mapping, or absent.
    Outcomes follow the streaming finalizer: empty -> ``{}``, absent ->
    ``None``, malformed -> ``None`` with the action flagged.
    """
    if isinstance(arguments, Mapping):
        return Action(id=call_id, name=name, params=dict(arguments))
    params, outcome = finalize_arguments(arguments if arguments is None else str(arguments))
    if outcome is ArgumentOutcome.MALFORMED:
        return Action(id=call_id, name=name, params=None, status=MALFORMED_ARGUMENTS, raw_arguments=str(arguments))
    return Action(id=call_id, name=name, params=params)


def parse_structured_text(text: Optional[str]) -> Optional[Any]:
    """Decode assistant text as JSON; ``None`` when it is not JSON."""
    if not text:
        return None
    stripped = text.strip()
    if not stripped.startswith(("{", "[")):
        return None
    try:
        return json.loads(stripped)
    except ValueError:
        return None


def merge_extras(body: Dict[str, Any], prompt: Prompt, skip: Iterable[str] = ()) -> Dict[str, Any]:
    """Merge ``prompt.options.extras`` into ``body`` (extras win)."""
    skipped = LOCAL_EXTRAS | frozenset(skip)
    for key, value in prompt.options.extras.items():
        if key in skipped or value is None:
            continue
        body[key] = value
    return body


__all__ = [
    "LOCAL_EXTRAS",
    "serialize_params",
    "action_from_arguments",
    "parse_structured_text",
    "merge_extras",
]
