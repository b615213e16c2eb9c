"""
Structured provider error exception type.

Base class of the provider error taxonomy. Every error raised by the package
carries a normalized :class:`ErrorCode` for consistent retry decisions and
structured logging.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        message: Human-readable error message suitable for logging.
        code: Normalized :class:`ErrorCode` classification for the failure.
        provider: Provider key where the error originated (e.g., ``"openai"``).
        model: Optional model name associated with the failure.
        retryable: Hint for upstream retry logic (not authoritative).
        raw: Optional original exception or payload for diagnostics.
    """

    message: str
    code: ErrorCode = ErrorCode.UNKNOWN
    provider: Optional[str] = None
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[object] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        if self.provider is None:
            return self.message
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
