"""Missing credentials or provider-specific identifiers at build time."""
from __future__ import annotations

from dataclasses import dataclass

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass(eq=False)
class ConfigurationError(ProviderError):
    """Raised before any network call when a provider cannot be configured."""

    code: ErrorCode = ErrorCode.CONFIGURATION


__all__ = ["ConfigurationError"]
