"""
Provider wire request.

Adapters produce a :class:`WireRequest`; transports send it. Keeping the
request as plain data lets adapters be tested without any HTTP stack.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

StreamFraming = Literal["sse", "aws-eventstream"]


@dataclass
class WireRequest:
    """An HTTP request in provider wire format.

    Attributes:
        method: HTTP method (``"POST"`` for generations).
        path: Path relative to ``base_url`` (no leading slash).
        body: JSON body.
        headers: Extra headers (auth, versions).
        params: Query parameters.
        base_url: Endpoint root the path is resolved against.
        stream: Whether the response is an event stream.
        framing: How streamed bytes are framed.
    """

    method: str
    path: str
    body: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)
    base_url: Optional[str] = None
    stream: bool = False
    framing: StreamFraming = "sse"

    @property
    def url(self) -> str:
        """Absolute URL without query string (for logs and tests)."""
        if not self.base_url:
            return self.path
        return f"{self.base_url.rstrip('/')}/{self.path.lstrip('/')}"


__all__ = ["WireRequest", "StreamFraming"]
