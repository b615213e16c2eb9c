"""Token usage counters reported by a provider."""
from __future__ import annotations

from typing import Optional

from pydantic import model_validator

from .canonical import CanonicalModel


class Usage(CanonicalModel):
    """Input/output token counts; ``total_tokens`` derives when absent."""

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    total_tokens: Optional[int] = None

    @model_validator(mode="after")
    def _derive_total(self) -> "Usage":
        if self.total_tokens is None and self.input_tokens is not None and self.output_tokens is not None:
            self.total_tokens = self.input_tokens + self.output_tokens
        return self

    @property
    def empty(self) -> bool:
        return self.input_tokens is None and self.output_tokens is None and self.total_tokens is None


__all__ = ["Usage"]
