"""Non-success or malformed wire response."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass(eq=False)
class ProviderApiError(ProviderError):
    """Failure reported by the provider (or an unparseable wire payload).

    Attributes:
        status_code: HTTP status when the failure came from a response.
        body: Decoded response body (mapping or text) for diagnostics.
    """

    code: ErrorCode = ErrorCode.SERVER_ERROR
    status_code: Optional[int] = None
    body: Any = None


__all__ = ["ProviderApiError"]
