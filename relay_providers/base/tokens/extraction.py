"""Token usage extraction helpers.

Converts provider-specific usage blocks into the canonical
:class:`~relay_providers.base.models.Usage`:

OpenAI chat:
    ``usage.prompt_tokens`` / ``usage.completion_tokens`` / ``usage.total_tokens``
OpenAI Responses and Anthropic:
    ``usage.input_tokens`` / ``usage.output_tokens`` (``total_tokens`` optional)

Values are coerced with ``int``; negative or non-numeric values become
``None``. A usage block with no usable numbers yields ``None`` rather than an
empty ``Usage``. The helpers never raise.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ..models import Usage


def _coerce(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


def _usage_block(raw: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(raw, Mapping):
        return None
    block = raw.get("usage")
    if isinstance(block, Mapping):
        return block
    # Responses streaming wraps the response object
    inner = raw.get("response")
    if isinstance(inner, Mapping) and isinstance(inner.get("usage"), Mapping):
        return inner["usage"]
    return None


def extract_usage(raw: Any) -> Optional[Usage]:
    """Map any supported usage block on ``raw`` into :class:`Usage`."""
    block = _usage_block(raw)
    if block is None:
        return None
    input_tokens = _coerce(block.get("input_tokens", block.get("prompt_tokens")))
    output_tokens = _coerce(block.get("output_tokens", block.get("completion_tokens")))
    total_tokens = _coerce(block.get("total_tokens"))
    if input_tokens is None and output_tokens is None and total_tokens is None:
        return None
    return Usage(input_tokens=input_tokens, output_tokens=output_tokens, total_tokens=total_tokens)


__all__ = ["extract_usage"]
