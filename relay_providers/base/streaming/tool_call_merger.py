"""Tool-call fragment merging and argument finalization.

Providers stream a tool call as several fragments: the first usually carries
the call id and function name, later ones carry slices of the JSON argument
string. :func:`merge_tool_fragment` folds one fragment into its buffer and
:func:`finalize_arguments` parses the completed buffer exactly once.

Finalization outcomes (kept distinct, see :class:`ArgumentOutcome`):

- ``PARSED``: non-empty buffer holding a JSON object -> that mapping.
- ``EMPTY``: buffer explicitly set to ``""`` -> ``{}``.
- ``MISSING``: no fragment ever supplied arguments -> ``None``.
- ``MALFORMED``: buffer is not a JSON object -> ``None``; the caller flags the
  action and keeps the raw text.
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .chunk_ops import ToolCallDelta
from .stream_state import ToolCallBuffer


class ArgumentOutcome(str, Enum):
    PARSED = "parsed"
    EMPTY = "empty"
    MISSING = "missing"
    MALFORMED = "malformed"


def _as_text(arguments: Any) -> Optional[str]:
    # Ollama occasionally ships arguments as an already-decoded object
    if arguments is None or isinstance(arguments, str):
        return arguments
    if isinstance(arguments, Mapping):
        return json.dumps(dict(arguments)) if arguments else ""
    return str(arguments)


def merge_tool_fragment(buffer: ToolCallBuffer, fragment: ToolCallDelta) -> bool:
    """Fold ``fragment`` into ``buffer``; return True when anything changed.

    ``id`` and ``name`` are captured from the first fragment that supplies
    them and never overwritten. Argument text is appended in arrival order.
    A ``final`` fragment only fills a buffer that is unpopulated or empty.
    """
    changed = False
    if fragment.id and buffer.id is None:
        buffer.id = fragment.id
        changed = True
    if fragment.name and buffer.name is None:
        buffer.name = fragment.name
        changed = True
    text = _as_text(fragment.arguments)
    if text is None:
        return changed
    if fragment.final:
        if not buffer.arguments and text:
            buffer.arguments = text
            return True
        if buffer.arguments is None:
            buffer.arguments = text
            return True
        return changed
    if buffer.arguments is None:
        buffer.arguments = text
        return True
    if text:
        buffer.arguments += text
        return True
    return changed


def finalize_arguments(raw: Optional[str]) -> Tuple[Optional[Dict[str, Any]], ArgumentOutcome]:
    """Parse a completed argument buffer into ``(params, outcome)``."""
    if raw is None:
        return None, ArgumentOutcome.MISSING
    if not raw.strip():
        return {}, ArgumentOutcome.EMPTY
    try:
        parsed = json.loads(raw)
    except ValueError:
        return None, ArgumentOutcome.MALFORMED
    if not isinstance(parsed, dict):
        return None, ArgumentOutcome.MALFORMED
    return parsed, ArgumentOutcome.PARSED


__all__ = ["ArgumentOutcome", "merge_tool_fragment", "finalize_arguments"]
