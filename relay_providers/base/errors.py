"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``relay_providers.base.errors_parts`` to keep a single stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.validation_error import ValidationError
from .errors_parts.configuration_error import ConfigurationError
from .errors_parts.unsupported_feature_error import UnsupportedFeatureError
from .errors_parts.provider_api_error import ProviderApiError
from .errors_parts.rate_limit_error import RateLimitError
from .errors_parts.classification import classify_exception, error_from_response, parse_retry_after

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
