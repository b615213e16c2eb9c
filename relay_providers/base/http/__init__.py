"""HTTP utilities package for providers.

Exposes pooled httpx clients, the stream framing decoders, and
:class:`HttpTransport`.
"""

from .client import get_httpx_client, close_all_clients
from .framing import EventStreamDecoder, iter_event_stream_payloads, iter_sse_payloads
from .transport import HttpTransport

__all__ = [
    "get_httpx_client",
    "close_all_clients",
    "EventStreamDecoder",
    "iter_event_stream_payloads",
    "iter_sse_payloads",
    "HttpTransport",
]
