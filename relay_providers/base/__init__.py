"""Base abstractions for the provider layer.

Purpose:
    Re-export the canonical models, error taxonomy, adapter selection,
    streaming engine, exception handling, and the provider pipeline so callers
    can depend on ``relay_providers.base`` without reaching into submodules.

External dependencies:
    - Pydantic (canonical models), httpx (default transport, timeouts).
"""

from .adapter_kind import AdapterKind, select_adapter_kind, select_openai_family
from .cancellation import CancellationToken
from .errors import (
    ConfigurationError,
    ErrorCode,
    ProviderApiError,
    ProviderError,
    RateLimitError,
    UnsupportedFeatureError,
    ValidationError,
    classify_exception,
)
from .factory import ProviderFactory, UnknownProviderError, create_provider
from .interfaces import LLMProvider, ProviderAdapter, SupportsStreaming, Transport
from .models import (
    Action,
    ContentPart,
    Message,
    Prompt,
    PromptOptions,
    Response,
    Usage,
    WireRequest,
)
from .provider import BaseProvider
from .resilience.exception_handling import DECLINED, HANDLED, RescueRegistry, call_with_handler, is_handled
from .streaming import Broadcaster, LifecycleKind, StreamEngine, StreamEvent, StreamSession
from .timeouts import TimeoutConfig, get_timeout_config
from .tool_choice import clear_forced_tool_choice

__all__ = [
    "AdapterKind",
    "select_adapter_kind",
    "select_openai_family",
    "CancellationToken",
    "ErrorCode",
    "ProviderError",
    "ValidationError",
    "ConfigurationError",
    "UnsupportedFeatureError",
    "ProviderApiError",
    "RateLimitError",
    "classify_exception",
    "ProviderFactory",
    "UnknownProviderError",
    "create_provider",
    "LLMProvider",
    "ProviderAdapter",
    "SupportsStreaming",
    "Transport",
    "Action",
    "ContentPart",
    "Message",
    "Prompt",
    "PromptOptions",
    "Response",
    "Usage",
    "WireRequest",
    "BaseProvider",
    "HANDLED",
    "DECLINED",
    "RescueRegistry",
    "call_with_handler",
    "is_handled",
    "Broadcaster",
    "LifecycleKind",
    "StreamEngine",
    "StreamEvent",
    "StreamSession",
    "TimeoutConfig",
    "get_timeout_config",
    "clear_forced_tool_choice",
]
