"""LLMProvider Protocol (single-class module).

Minimal generation contract implemented by every provider class.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..models import Prompt


@runtime_checkable
class LLMProvider(Protocol):
    """Provider able to run a canonical prompt to a canonical response."""

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g. ``"openai"``."""
        ...

    def generate(self, prompt: Prompt) -> Any:
        """Run one non-streaming generation.

        Returns a ``Response``, or the ``HANDLED`` sentinel when a configured
        exception handler absorbed a failure.
        """
        ...
