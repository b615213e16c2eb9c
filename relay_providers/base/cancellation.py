"""Cooperative cancellation token.

Callers hand a :class:`CancellationToken` to
:meth:`relay_providers.base.streaming.StreamSession.run`; the session polls it
between chunks and aborts the generation once cancellation is requested.
``cancel`` is idempotent and safe from any thread.
"""

from __future__ import annotations

from threading import Lock


class CancellationToken:
    """A cooperative cancellation flag with an optional reason."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._cancelled = False
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._cancelled

    @property
    def reason(self) -> str | None:
        """Reason supplied at cancel time (if any)."""
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation; later calls keep the first reason."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            self._reason = reason

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
