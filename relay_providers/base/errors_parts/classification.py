"""
Error classification helpers mapping exceptions and HTTP failures to the
normalized taxonomy.

Implements HTTP status extraction, status-to-code mapping, message heuristics
as a fallback, and construction of :class:`ProviderApiError` /
:class:`RateLimitError` from failed wire responses.
"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Mapping, Optional

from .error_code import ErrorCode
from .provider_api_error import ProviderApiError
from .provider_error import ProviderError
from .rate_limit_error import RateLimitError


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
    529: ErrorCode.UNAVAILABLE,
}

_RETRYABLE_CODES = (
    ErrorCode.TRANSIENT,
    ErrorCode.RATE_LIMIT,
    ErrorCode.TIMEOUT,
    ErrorCode.UNAVAILABLE,
)


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for exceptions without an HTTP status."""
    pattern_groups = (
        (ErrorCode.TIMEOUT, ("timeout", "timed out")),
        (ErrorCode.AUTH, ("unauthorized", "forbidden", "api key")),
        (ErrorCode.UNSUPPORTED, ("unsupported", "not supported")),
        (ErrorCode.NOT_FOUND, ("not found", "does not exist")),
        (ErrorCode.UNAVAILABLE, ("unavailable", "overloaded")),
        (ErrorCode.VALIDATION, ("invalid", "malformed")),
        (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
    )
    if "rate" in msg and "limit" in msg:
        return ErrorCode.RATE_LIMIT
    for code, patterns in pattern_groups:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (sync/async).
        3. HTTP status mapping.
        4. Substring heuristics.
        5. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Parse a ``Retry-After`` header (delta seconds or HTTP date).

    Returns ``None`` for absent or unparseable values; negative deltas clamp
    to zero.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return max(0.0, float(text))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


def _error_message(body: Any, status: int) -> str:
    """Pull the provider's error message out of the common envelope shapes."""
    if isinstance(body, Mapping):
        err = body.get("error")
        if isinstance(err, Mapping) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
        if body.get("message"):
            return str(body["message"])
    if isinstance(body, str) and body.strip():
        return body.strip()
    return f"HTTP {status}"


def error_from_response(
    status: int,
    body: Any,
    headers: Optional[Mapping[str, str]] = None,
    *,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> ProviderApiError:
    """Build the taxonomy error for a non-success wire response.

    429 responses become :class:`RateLimitError` carrying the ``Retry-After``
    hint (``retry-after-ms`` takes precedence when present); everything else is
    a :class:`ProviderApiError` with the status-mapped code.
    """
    message = _error_message(body, status)
    lowered = {str(k).lower(): v for k, v in (headers or {}).items()}
    code = _HTTP_STATUS_MAP.get(status, ErrorCode.SERVER_ERROR if status >= 500 else ErrorCode.UNKNOWN)
    if status == 429:
        retry_after = None
        if lowered.get("retry-after-ms") is not None:
            ms = parse_retry_after(lowered.get("retry-after-ms"))
            retry_after = ms / 1000.0 if ms is not None else None
        if retry_after is None:
            retry_after = parse_retry_after(lowered.get("retry-after"))
        return RateLimitError(
            message=message,
            provider=provider,
            model=model,
            status_code=status,
            body=body,
            retry_after=retry_after,
        )
    return ProviderApiError(
        message=message,
        code=code,
        provider=provider,
        model=model,
        retryable=code in _RETRYABLE_CODES,
        status_code=status,
        body=body,
    )


__all__ = [
    "classify_exception",
    "error_from_response",
    "parse_retry_after",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
