"""Model-id based backend resolution for the AUTO adapter.

Rules are ordered ``{"prefix": ..., "provider": ...}`` mappings matched
case-insensitively against the model id (first match wins). Ids containing a
``/`` that match no rule go to OpenRouter. Results are cached per model id.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Mapping, Optional

from ..base.errors import ConfigurationError
from ..base.logging import get_logger, log_event
from ..config import get_auto_rules
from ..config.defaults import AUTO_SLASH_PROVIDER

_logger = get_logger("auto")


class AutoResolver:
    """Resolve and cache the backend provider for a model id."""

    def __init__(
        self,
        rules: Optional[Iterable[Mapping[str, str]]] = None,
        *,
        slash_provider: Optional[str] = AUTO_SLASH_PROVIDER,
    ) -> None:
        self._rules: List[Dict[str, str]] = [dict(r) for r in (rules if rules is not None else get_auto_rules())]
        self._slash_provider = slash_provider
        self._cache: Dict[str, str] = {}
        self._lock = threading.Lock()

    def _match(self, model: str) -> Optional[str]:
        lowered = model.lower()
        for rule in self._rules:
            if lowered.startswith(str(rule["prefix"]).lower()):
                return str(rule["provider"])
        if "/" in model and self._slash_provider:
            return self._slash_provider
        return None

    def resolve(self, model: Optional[str]) -> str:
        if not model or not model.strip():
            raise ConfigurationError(message="AUTO resolution needs a model id", provider="auto")
        key = model.strip()
        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            return cached
        backend = self._match(key)
        if backend is None:
            raise ConfigurationError(message=f"no backend matches model {key!r}", provider="auto", model=key)
        with self._lock:
            self._cache.setdefault(key, backend)
        log_event(_logger, "auto.resolved", None, model=key, backend=backend)
        return backend

    def cached(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._cache)


__all__ = ["AutoResolver"]
