"""Timeout configuration for the transport layer.

:func:`get_timeout_config` returns a process-cached :class:`TimeoutConfig`,
re-read when the relevant environment variables change (so tests can adjust
them with ``monkeypatch``). Supported variables (all optional, seconds):

    RELAY_TIMEOUT_CONNECT_SECONDS
    RELAY_TIMEOUT_HTTP_SECONDS
    RELAY_TIMEOUT_STREAM_SECONDS

The values map onto ``httpx.Timeout``: the connect phase, the read timeout of
blocking calls, and the idle read timeout between streamed chunks.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

_ENV_NAMES = (
    "RELAY_TIMEOUT_CONNECT_SECONDS",
    "RELAY_TIMEOUT_HTTP_SECONDS",
    "RELAY_TIMEOUT_STREAM_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds."""

    connect_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 120.0
    stream_timeout_seconds: float = 300.0

    def httpx_timeout(self, *, stream: bool = False) -> httpx.Timeout:
        read = self.stream_timeout_seconds if stream else self.http_timeout_seconds
        return httpx.Timeout(read, connect=self.connect_timeout_seconds)


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from ``name``; fall back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the cached :class:`TimeoutConfig`, refreshed on env change."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float("RELAY_TIMEOUT_CONNECT_SECONDS", defaults.connect_timeout_seconds),
        http_timeout_seconds=_parse_env_float("RELAY_TIMEOUT_HTTP_SECONDS", defaults.http_timeout_seconds),
        stream_timeout_seconds=_parse_env_float("RELAY_TIMEOUT_STREAM_SECONDS", defaults.stream_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
