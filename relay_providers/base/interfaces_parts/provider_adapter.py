"""ProviderAdapter Protocol (single-class module).

The per-provider pair of request builder and response parser. Adapters depend
only on the canonical model and never perform I/O.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from ..adapter_kind import AdapterKind
from ..models import Prompt, Response, WireRequest
from ..streaming import Translator


@runtime_checkable
class ProviderAdapter(Protocol):
    """Translate canonical prompts to wire requests and wire results back."""

    kind: AdapterKind

    def build_request(self, prompt: Prompt, *, stream: bool = False) -> WireRequest:
        """Build the provider wire request for ``prompt``.

        Raises ``ValidationError`` for contradictory prompts and
        ``ConfigurationError`` for missing identifiers.
        """
        ...

    def parse_response(self, wire: Mapping[str, Any], prompt: Prompt | None = None) -> Response:
        """Parse a complete (non-streaming) wire response."""
        ...

    @property
    def supports_streaming(self) -> bool:
        ...

    def stream_translator(self) -> Translator:
        """Chunk translator feeding the streaming engine."""
        ...
