"""relay_providers package

One generation contract over several LLM provider protocols.

Purpose:
    Callers build a canonical :class:`Prompt`, pick a provider by name and
    call ``generate``; the package selects the wire adapter (chat completions,
    responses, Anthropic messages, Bedrock, Azure, or AUTO resolution), sends
    the request, reconstructs streams into OPEN/UPDATE/CLOSE lifecycle events,
    and returns a canonical :class:`Response`.

Public API (re-exported):
    - Version: ``__version__``
    - Models: :class:`Prompt`, :class:`Message`, :class:`Action`,
      :class:`Response`
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode` and subclasses
    - Factory: :func:`create`, :class:`ProviderFactory`
    - Exception handling sentinel: :data:`HANDLED`
"""

from typing import Any

from .base.errors import (
    ConfigurationError,
    ErrorCode,
    ProviderApiError,
    ProviderError,
    RateLimitError,
    UnsupportedFeatureError,
    ValidationError,
)
from .base.factory import ProviderFactory, create_provider
from .base.models import Action, ContentPart, Message, Prompt, PromptOptions, Response
from .base.resilience.exception_handling import HANDLED
from .base.streaming import LifecycleKind, StreamEvent

__version__ = "0.1.0"


def create(provider: str, **kwargs: Any):
    """Create a provider instance by name (``"openai"``, ``"auto"``, ...)."""
    return create_provider(provider, **kwargs)


__all__ = [
    "__version__",
    "create",
    "ProviderFactory",
    "Prompt",
    "PromptOptions",
    "Message",
    "Action",
    "ContentPart",
    "Response",
    "ErrorCode",
    "ProviderError",
    "ValidationError",
    "ConfigurationError",
    "UnsupportedFeatureError",
    "ProviderApiError",
    "RateLimitError",
    "HANDLED",
    "LifecycleKind",
    "StreamEvent",
]
