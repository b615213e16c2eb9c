"""Malformed canonical model input (bad role, missing field, wrong shape)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass(eq=False)
class ValidationError(ProviderError):
    """Raised at construction or build time; never swallowed.

    ``field`` names the offending attribute (dotted for nested fields) when it
    can be determined.
    """

    code: ErrorCode = ErrorCode.VALIDATION
    field: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.field and self.field not in self.message:
            return f"{self.field}: {self.message}"
        return self.message


__all__ = ["ValidationError"]
