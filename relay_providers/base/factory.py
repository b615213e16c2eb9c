"""Provider Factory utilities.

Purpose
-------
Centralize provider-agnostic creation of provider instances. Provider modules
are imported lazily using ``importlib`` to keep import time low and side
effects out of the factory layer.

Fallback semantics
------------------
- An empty provider name is a caller error (``ConfigurationError``).
- A name without a dedicated provider falls back to ``AutoProvider``, which
  resolves the backend from the model id at run time; the fallback is logged
  as ``factory.fallback_auto``.
- Import failures and constructor errors surface as :class:`UnknownProviderError`
  (``ConfigurationError`` raised by a constructor propagates unchanged).

Scope
-----
Dedicated providers: ``openai``, ``anthropic``, ``bedrock``, ``azure``,
``ollama``, ``openrouter``, ``auto`` and ``mock``.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type

from .errors import ConfigurationError
from .logging import get_logger, log_event

_logger = get_logger("factory")


class UnknownProviderError(ConfigurationError):
    """Raised when a provider module or class cannot be loaded or built."""


def create_provider(provider: str, **kwargs: Any) -> Any:
    """Compatibility helper that delegates to :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider, **kwargs)


class ProviderFactory:
    """Create providers based on a canonical name (e.g., ``"openai"``)."""

    # Map canonical provider names to import paths and class names
    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "relay_providers.openai.client", "class": "OpenAIProvider"},
        "anthropic": {"module": "relay_providers.anthropic.client", "class": "AnthropicProvider"},
        "bedrock": {"module": "relay_providers.bedrock.client", "class": "BedrockProvider"},
        "azure": {"module": "relay_providers.azure.client", "class": "AzureOpenAIProvider"},
        "ollama": {"module": "relay_providers.ollama.client", "class": "OllamaProvider"},
        "openrouter": {"module": "relay_providers.openrouter.client", "class": "OpenRouterProvider"},
        "xai": {"module": "relay_providers.xai.client", "class": "XAIProvider"},
        "auto": {"module": "relay_providers.auto.client", "class": "AutoProvider"},
        "mock": {"module": "relay_providers.mock.client", "class": "MockProvider"},
    }

    @classmethod
    def create(cls, provider: str, **kwargs: Any) -> Any:
        """Create a provider instance.

        Parameters
        ----------
        provider:
            Canonical provider name (e.g., ``"openai"``). Unknown names fall
            back to the AUTO provider.
        **kwargs:
            Provider constructor kwargs (``transport``, ``exception_handler``,
            config overrides such as ``model`` or ``api_key``).

        Raises
        ------
        ConfigurationError
            For an empty provider name.
        UnknownProviderError
            If the provider module fails to import, the class is missing, or
            the constructor rejects its arguments.
        """
        name = (provider or "").lower().strip()
        if not name:
            raise ConfigurationError(message="provider name is required")
        spec = cls._PROVIDERS.get(name)
        if spec is None:
            log_event(_logger, "factory.fallback_auto", None, requested=name)
            spec = cls._PROVIDERS["auto"]
            kwargs.setdefault("requested", name)

        module_path, class_name = spec["module"], spec["class"]

        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                message=f"Failed to import module '{module_path}' for provider '{provider}': {exc}",
                provider=name,
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                message=f"Provider class '{class_name}' not found in '{module_path}' for provider '{provider}'",
                provider=name,
            ) from exc

        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownProviderError(
                message=f"Invalid arguments for '{provider}' provider constructor: {exc}",
                provider=name,
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the canonical provider names with a dedicated provider."""
        return tuple(cls._PROVIDERS.keys())


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider"]
