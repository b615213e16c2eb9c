"""Provider throttling signal."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode
from .provider_api_error import ProviderApiError


@dataclass(eq=False)
class RateLimitError(ProviderApiError):
    """Throttled request; ``retry_after`` is the server hint in seconds."""

    code: ErrorCode = ErrorCode.RATE_LIMIT
    retryable: bool = True
    retry_after: Optional[float] = None


__all__ = ["RateLimitError"]
