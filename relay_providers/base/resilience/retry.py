"""Retry policy for transport calls.

Retries only :class:`ProviderError` failures whose code is in
``RetryConfig.retryable_codes``. The delay before attempt ``n`` is
``delay_base ** n``, except for :class:`RateLimitError` carrying a
``retry_after`` hint, which waits exactly that long (capped by
``max_delay``). Only the start of a call is retried; a stream that already
delivered chunks is never replayed.
"""
from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, TypeVar

from ..errors import ErrorCode, ProviderError, RateLimitError

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    max_attempts: int = 3
    delay_base: float = 2.0
    max_delay: float = 60.0
    retryable_codes: tuple[ErrorCode, ...] = (
        ErrorCode.TRANSIENT,
        ErrorCode.RATE_LIMIT,
        ErrorCode.TIMEOUT,
        ErrorCode.UNAVAILABLE,
    )
    attempt_logger: AttemptLogger | None = None
    sleep: Callable[[float], None] = time.sleep

    def delay_for(self, attempt: int, error: ProviderError) -> float:
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return min(error.retry_after, self.max_delay)
        return min(self.delay_base**attempt, self.max_delay)

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]], **overrides: Any) -> "RetryConfig":
        """Build from a provider config ``retry`` section."""
        raw = raw or {}
        fields: dict = {}
        if "max_attempts" in raw:
            fields["max_attempts"] = max(1, int(raw["max_attempts"]))
        if "delay_base" in raw:
            fields["delay_base"] = float(raw["delay_base"])
        if "max_delay" in raw:
            fields["max_delay"] = float(raw["max_delay"])
        fields.update(overrides)
        return cls(**fields)


DEFAULT_RETRY_CONFIG = RetryConfig()


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Return a decorator applying the retry policy to a callable."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            attempt = 0
            while True:
                try:
                    result = func(*args, **kwargs)
                except ProviderError as e:
                    final = attempt + 1 >= config.max_attempts
                    retryable = e.code in config.retryable_codes
                    delay = None if (final or not retryable) else config.delay_for(attempt, e)
                    if config.attempt_logger:
                        config.attempt_logger(
                            attempt=attempt,
                            max_attempts=config.max_attempts,
                            delay=delay,
                            error=e,
                        )
                    if delay is None:
                        raise
                    config.sleep(delay)
                    attempt += 1
                    continue
                if config.attempt_logger:
                    config.attempt_logger(
                        attempt=attempt,
                        max_attempts=config.max_attempts,
                        delay=None,
                        error=None,
                    )
                return result

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "retry",
]
