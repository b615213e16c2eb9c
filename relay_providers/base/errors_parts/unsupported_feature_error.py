"""Operation the target protocol cannot express."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass(eq=False)
class UnsupportedFeatureError(ProviderError):
    """Raised when an adapter is asked for an operation its protocol lacks.

    ``operation`` names the rejected operation (e.g. ``"batches"``).
    """

    code: ErrorCode = ErrorCode.UNSUPPORTED
    operation: Optional[str] = None


__all__ = ["UnsupportedFeatureError"]
