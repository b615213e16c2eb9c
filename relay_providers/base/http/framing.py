"""Stream framing decoders.

Two framings are supported:

``sse``
    Server-sent events as used by OpenAI, Azure, OpenRouter, Ollama (``/v1``)
    and Anthropic. ``data:`` lines are joined until a blank line; the
    ``[DONE]`` sentinel ends the stream; comment lines are skipped. When the
    payload has no ``type`` but the event carried an ``event:`` name, the
    name is copied into ``type``.

``aws-eventstream``
    The binary ``application/vnd.amazon.eventstream`` framing used by
    Bedrock's ``invoke-with-response-stream``. Each ``chunk`` event carries
    ``{"bytes": <base64 JSON>}`` whose decoded JSON is the Anthropic event.
    ``exception`` messages become provider errors.
"""
from __future__ import annotations

import base64
import binascii
import json
import struct
import zlib
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from ..errors import ProviderApiError, RateLimitError

SSE_DONE = "[DONE]"


def iter_sse_payloads(lines: Iterable[str], *, on_decode_error=None) -> Iterator[Dict[str, Any]]:
    """Yield decoded JSON payloads from SSE ``lines``."""
    event_name: Optional[str] = None
    data_lines: List[str] = []

    def dispatch() -> Optional[Dict[str, Any]]:
        if not data_lines:
            return None
        data = "\n".join(data_lines)
        try:
            payload = json.loads(data)
        except ValueError as exc:
            if on_decode_error is not None:
                on_decode_error(exc, data)
            return None
        if not isinstance(payload, dict):
            return None
        if event_name and "type" not in payload:
            payload["type"] = event_name
        return payload

    for raw in lines:
        line = raw.rstrip("\r")
        if not line:
            payload = dispatch()
            event_name, data_lines = None, []
            if payload is not None:
                yield payload
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "data":
            if value.strip() == SSE_DONE:
                return
            data_lines.append(value)
        elif field == "event":
            event_name = value
    payload = dispatch()
    if payload is not None:
        yield payload


_PRELUDE = struct.Struct(">III")
_HEADER_VALUE_SIZES = {2: 1, 3: 2, 4: 4, 5: 8, 8: 8, 9: 16}


def _parse_headers(raw: bytes) -> Dict[str, Any]:
    headers: Dict[str, Any] = {}
    pos = 0
    while pos < len(raw):
        name_len = raw[pos]
        pos += 1
        name = raw[pos : pos + name_len].decode("utf-8")
        pos += name_len
        value_type = raw[pos]
        pos += 1
        if value_type in (0, 1):
            headers[name] = value_type == 0
        elif value_type in (6, 7):
            (length,) = struct.unpack(">H", raw[pos : pos + 2])
            pos += 2
            value = raw[pos : pos + length]
            pos += length
            headers[name] = value.decode("utf-8") if value_type == 7 else value
        elif value_type in _HEADER_VALUE_SIZES:
            size = _HEADER_VALUE_SIZES[value_type]
            headers[name] = raw[pos : pos + size]
            pos += size
        else:
            raise ProviderApiError(message=f"unknown event-stream header type {value_type}")
    return headers


class EventStreamDecoder:
    """Incremental decoder for AWS event-stream binary frames."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def feed(self, data: bytes) -> List[Tuple[Dict[str, Any], bytes]]:
        """Append ``data`` and return every complete ``(headers, payload)``."""
        self._buffer.extend(data)
        frames: List[Tuple[Dict[str, Any], bytes]] = []
        while len(self._buffer) >= _PRELUDE.size:
            total_len, headers_len, prelude_crc = _PRELUDE.unpack_from(self._buffer, 0)
            if len(self._buffer) < total_len:
                break
            frame = bytes(self._buffer[:total_len])
            del self._buffer[:total_len]
            if zlib.crc32(frame[:8]) & 0xFFFFFFFF != prelude_crc:
                raise ProviderApiError(message="event-stream prelude checksum mismatch")
            (message_crc,) = struct.unpack(">I", frame[-4:])
            if zlib.crc32(frame[:-4]) & 0xFFFFFFFF != message_crc:
                raise ProviderApiError(message="event-stream message checksum mismatch")
            headers = _parse_headers(frame[_PRELUDE.size : _PRELUDE.size + headers_len])
            payload = frame[_PRELUDE.size + headers_len : -4]
            frames.append((headers, payload))
        return frames


def _decode_chunk(payload: bytes) -> Optional[Dict[str, Any]]:
    body = json.loads(payload.decode("utf-8")) if payload else {}
    encoded = body.get("bytes") if isinstance(body, dict) else None
    if not encoded:
        return None
    try:
        inner = json.loads(base64.b64decode(encoded))
    except (binascii.Error, ValueError) as exc:
        raise ProviderApiError(message=f"undecodable event-stream chunk: {exc}") from exc
    return inner if isinstance(inner, dict) else None


def _exception_error(headers: Dict[str, Any], payload: bytes) -> ProviderApiError:
    kind = str(headers.get(":exception-type") or headers.get(":error-code") or "exception")
    try:
        body = json.loads(payload.decode("utf-8")) if payload else {}
    except ValueError:
        body = payload.decode("utf-8", errors="replace")
    message = body.get("message") if isinstance(body, dict) else None
    text = f"{kind}: {message or body}"
    if kind == "throttlingException":
        return RateLimitError(message=text, body=body)
    return ProviderApiError(message=text, body=body)


def iter_event_stream_payloads(chunks: Iterable[bytes]) -> Iterator[Dict[str, Any]]:
    """Yield decoded inner JSON events from AWS event-stream byte chunks."""
    decoder = EventStreamDecoder()
    for data in chunks:
        for headers, payload in decoder.feed(data):
            message_type = headers.get(":message-type", "event")
            if message_type in ("exception", "error"):
                raise _exception_error(headers, payload)
            if headers.get(":event-type", "chunk") != "chunk":
                continue
            event = _decode_chunk(payload)
            if event is not None:
                yield event


__all__ = [
    "SSE_DONE",
    "iter_sse_payloads",
    "EventStreamDecoder",
    "iter_event_stream_payloads",
]
