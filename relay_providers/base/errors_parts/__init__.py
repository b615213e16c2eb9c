"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `relay_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .validation_error import ValidationError
from .configuration_error import ConfigurationError
from .unsupported_feature_error import UnsupportedFeatureError
from .provider_api_error import ProviderApiError
from .rate_limit_error import RateLimitError
from .classification import classify_exception, error_from_response, parse_retry_after

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ValidationError",
    "ConfigurationError",
    "UnsupportedFeatureError",
    "ProviderApiError",
    "RateLimitError",
    "classify_exception",
    "error_from_response",
    "parse_retry_after",
]
