"""AUTO provider.

Used for provider names without a dedicated adapter: the backend is resolved
from the model id for every generation and the backend provider (created
through :class:`~relay_providers.base.factory.ProviderFactory` and cached per
backend and model) supplies the concrete adapter and credentials. The
resolved model id is handed to the backend, so the wire request always names
the model the resolution was based on.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Optional, Tuple

from ..base.adapter_kind import AdapterKind
from ..base.interfaces import ProviderAdapter
from ..base.models import Prompt
from ..base.provider import AdapterBuilder, BaseProvider
from .adapter import AutoAdapter
from .resolver import AutoResolver

__all__ = ["AutoProvider"]


class AutoProvider(BaseProvider):
    provider_name = "auto"

    def __init__(self, *, resolver: Optional[AutoResolver] = None, requested: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.requested = requested
        self._backends: Dict[Tuple[str, Optional[str]], BaseProvider] = {}
        self._lock = threading.Lock()
        self.auto_adapter = AutoAdapter(self._backend_adapter, resolver=resolver, model=self.config.get("model"))

    def backend(self, name: str, model: Optional[str] = None) -> BaseProvider:
        """Backend provider ``name`` configured for ``model`` (cached)."""
        key = (name, model)
        with self._lock:
            provider = self._backends.get(key)
            if provider is None:
                from ..base.factory import ProviderFactory

                overrides = {"model": model} if model else {}
                provider = ProviderFactory.create(name, **overrides)
                self._backends[key] = provider
            return provider

    def _backend_adapter(self, name: str, prompt: Prompt) -> ProviderAdapter:
        return self.backend(name, self.auto_adapter.model_for(prompt)).adapter_for(prompt)

    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:
        return {AdapterKind.AUTO: self.auto_adapter.resolve}
