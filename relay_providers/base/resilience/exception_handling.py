"""Exception handling wrapper for adapter operations.

Purpose
-------
Wrap any provider operation so that failures either reach a configured
handler or propagate untouched:

- Success: the operation's result is returned unchanged.
- Failure with a handler: ``handler(exc)`` runs, its return value is
  discarded, and the wrapper returns the :data:`HANDLED` sentinel. A handler's
  truthy return can therefore never be mistaken for a wire response.
- Failure without a handler, or when the handler declines (returns
  :data:`DECLINED`): the original exception is re-raised with its type,
  message and traceback intact.
- ``ConfigurationError`` and ``ValidationError`` are always re-raised; the
  handler never sees them.

:class:`RescueRegistry` is a ready-made handler dispatching on exception
class (most specific registration wins) and declining when nothing matches.
"""
from __future__ import annotations

import functools
from typing import Any, Callable, List, Optional, Tuple, Type, TypeVar

from ..errors import ConfigurationError, ValidationError, classify_exception
from ..logging import get_logger, log_event

T = TypeVar("T")

_logger = get_logger("exceptions")

# Caller mistakes, never handed to a handler.
NEVER_HANDLED = (ConfigurationError, ValidationError)


class _Sentinel:
    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name

    def __bool__(self) -> bool:
        return False


HANDLED = _Sentinel("HANDLED")
"""Returned by a wrapped operation whose exception was handled."""

DECLINED = _Sentinel("DECLINED")
"""Returned by a handler to decline; the exception is then re-raised."""

ExceptionHandler = Callable[[BaseException], Any]


def is_handled(value: Any) -> bool:
    return value is HANDLED


def call_with_handler(
    operation: Callable[..., T],
    *args: Any,
    handler: Optional[ExceptionHandler] = None,
    **kwargs: Any,
) -> T | _Sentinel:
    """Invoke ``operation`` under the handling contract described above."""
    try:
        return operation(*args, **kwargs)
    except Exception as exc:
        if handler is None or isinstance(exc, NEVER_HANDLED):
            raise
        outcome = handler(exc)
        if outcome is DECLINED:
            raise
        log_event(
            _logger,
            "exception.handled",
            None,
            operation=getattr(operation, "__qualname__", repr(operation)),
            error_type=type(exc).__name__,
            error_code=classify_exception(exc).value,
        )
        return HANDLED


def with_exception_handler(handler: Optional[ExceptionHandler] = None) -> Callable[[Callable[..., T]], Callable[..., T | _Sentinel]]:
    """Decorator form of :func:`call_with_handler`.

    ``handler`` may also be resolved per call: when the wrapped callable is a
    method and ``handler`` is ``None``, the instance attribute
    ``exception_handler`` is used if present.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T | _Sentinel]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T | _Sentinel:
            active = handler
            if active is None and args:
                active = getattr(args[0], "exception_handler", None)
            return call_with_handler(func, *args, handler=active, **kwargs)

        return wrapper

    return decorator


class RescueRegistry:
    """Handler that dispatches on exception class.

    Example::

        rescue = RescueRegistry()
        rescue.rescue_from(RateLimitError, lambda exc: queue_retry(exc.retry_after))
        provider = OpenAIProvider(exception_handler=rescue)
    """

    def __init__(self) -> None:
        self._handlers: List[Tuple[Type[BaseException], ExceptionHandler]] = []

    def rescue_from(self, *exc_types: Type[BaseException], handler: Optional[ExceptionHandler] = None):
        """Register ``handler`` for ``exc_types``; usable as a decorator."""

        def register(fn: ExceptionHandler) -> ExceptionHandler:
            for exc_type in exc_types:
                self._handlers.append((exc_type, fn))
            return fn

        if handler is not None:
            return register(handler)
        return register

    def handler_for(self, exc: BaseException) -> Optional[ExceptionHandler]:
        best: Optional[Tuple[int, ExceptionHandler]] = None
        for exc_type, fn in self._handlers:
            if isinstance(exc, exc_type):
                depth = type(exc).__mro__.index(exc_type)
                if best is None or depth < best[0]:
                    best = (depth, fn)
        return best[1] if best else None

    def __call__(self, exc: BaseException) -> Any:
        fn = self.handler_for(exc)
        if fn is None:
            return DECLINED
        fn(exc)
        return None


__all__ = [
    "HANDLED",
    "DECLINED",
    "ExceptionHandler",
    "NEVER_HANDLED",
    "is_handled",
    "call_with_handler",
    "with_exception_handler",
    "RescueRegistry",
]
