"""Transport Protocol (single-class module).

Sends :class:`WireRequest` objects. The package ships an httpx implementation
(:class:`relay_providers.base.http.HttpTransport`); tests substitute fakes.
"""

from __future__ import annotations

from typing import Any, ContextManager, Dict, Iterator, Protocol, runtime_checkable

from ..models import WireRequest


@runtime_checkable
class Transport(Protocol):
    def send(self, request: WireRequest) -> Dict[str, Any]:
        """Perform a blocking call and return the decoded JSON body.

        Raises ``ProviderApiError``/``RateLimitError`` on non-success.
        """
        ...

    def stream(self, request: WireRequest) -> ContextManager[Iterator[Dict[str, Any]]]:
        """Open a streaming call yielding decoded chunk payloads."""
        ...
