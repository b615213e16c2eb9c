"""SupportsStreaming Protocol (single-class module).

Capability marker for providers that can stream lifecycle events.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from ..models import Prompt
from ..streaming import Broadcaster


@runtime_checkable
class SupportsStreaming(Protocol):
    """Implementations emit one OPEN, zero or more UPDATE and one CLOSE."""

    def supports_streaming(self) -> bool:  # pragma: no cover - trivial
        return True

    def stream(self, prompt: Prompt, broadcaster: Optional[Broadcaster] = None) -> Any:
        """Stream ``prompt`` and return the final ``Response``."""
        ...
