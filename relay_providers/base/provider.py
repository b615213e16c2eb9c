"""BaseProvider: the generation pipeline shared by every provider.

Purpose:
- Wire one canonical :class:`Prompt` through adapter selection, wire request
  construction, transport, (streaming) reconstruction and response parsing,
  then apply forced tool-choice clearing to the prompt for the next turn.

External dependencies:
- None directly; the default transport is the httpx-backed
  :class:`~relay_providers.base.http.HttpTransport`, created lazily.

Failure semantics:
- ``ValidationError``/``ConfigurationError`` surface at build time.
- Transport and provider errors propagate unless ``exception_handler`` absorbs
  them, in which case :data:`HANDLED` is returned instead of a response.
- A failing stream is aborted first so the broadcaster still sees exactly one
  CLOSE.

Subclasses implement :meth:`adapter_builders`, a table from
:class:`AdapterKind` to adapter builder; :meth:`adapter_for` picks the entry
with :func:`select_adapter_kind`. Everything else is inherited.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..config import get_provider_config
from .adapter_kind import AdapterKind, select_adapter_kind
from .cancellation import CancellationToken
from .errors import ProviderError, UnsupportedFeatureError, classify_exception
from .interfaces import ProviderAdapter, Transport
from .logging import LogContext, get_logger, normalized_log_event
from .models import Prompt, Response, WireRequest
from .resilience.exception_handling import ExceptionHandler, call_with_handler
from .resilience.retry import RetryConfig
from .streaming import Broadcaster, LifecycleKind, StreamEngine, StreamSession
from .tool_choice import clear_forced_tool_choice
from .utils.messages import parse_structured_text

AdapterBuilder = Callable[[Prompt], ProviderAdapter]


@dataclass(frozen=True)
class PreparedCall:
    """Adapter and wire request built for one generation, ready to send."""

    ctx: LogContext
    prompt: Prompt
    adapter: ProviderAdapter
    request: WireRequest
    started: float


class BaseProvider:
    """Shared ``generate``/``stream`` implementation."""

    provider_name: str = "base"

    def __init__(
        self,
        *,
        transport: Optional[Transport] = None,
        exception_handler: Optional[ExceptionHandler] = None,
        **overrides: Any,
    ) -> None:
        self.config: Dict[str, Any] = get_provider_config(self.provider_name, overrides)
        self.exception_handler = exception_handler
        self._transport = transport
        self._logger = get_logger(self.provider_name)

    # ----- Adapter dispatch -----
    def adapter_builders(self) -> Dict[AdapterKind, AdapterBuilder]:  # pragma: no cover - abstract
        """Kinds this provider serves, each with the builder for its adapter."""
        raise NotImplementedError

    def adapter_kind(self, prompt: Prompt) -> AdapterKind:
        return select_adapter_kind(self.provider_name, prompt)

    def adapter_for(self, prompt: Prompt) -> ProviderAdapter:
        """Return the adapter serving ``prompt``.

        Raises:
            UnsupportedFeatureError: the selected kind has no builder here.
        """
        kind = self.adapter_kind(prompt)
        build = self.adapter_builders().get(kind)
        if build is None:
            raise UnsupportedFeatureError(
                message=f"{self.provider_name} does not serve the {kind.value} adapter",
                provider=self.provider_name,
                operation=kind.value,
            )
        return build(prompt)

    # ----- Capability & basic info -----
    def default_model(self) -> Optional[str]:
        return self.config.get("model")

    def supports_streaming(self) -> bool:
        return True

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            from .http import HttpTransport

            self._transport = HttpTransport(
                provider=self.provider_name,
                model=self.default_model(),
                retry_config=RetryConfig.from_mapping(self.config.get("retry")),
            )
        return self._transport

    def _ctx(self, prompt: Prompt) -> LogContext:
        return LogContext(provider=self.provider_name, model=prompt.options.model or self.default_model())

    # ----- Generation -----
    def generate(self, prompt: Any) -> Any:
        """Run one generation; streams when ``prompt.options.stream`` is set.

        Returns a :class:`Response`, or :data:`HANDLED` when the configured
        exception handler absorbed a failure.
        """
        prompt = Prompt.coerce(prompt)
        if prompt.options.stream:
            return self.stream(prompt, prompt.options.broadcaster)
        call = self._prepare(prompt, stream=False)
        return call_with_handler(self._generate, call, handler=self.exception_handler)

    def stream(
        self,
        prompt: Any,
        broadcaster: Optional[Broadcaster] = None,
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        """Run one streaming generation, forwarding lifecycle events."""
        prompt = Prompt.coerce(prompt)
        call = self._prepare(prompt, stream=True)
        return call_with_handler(
            self._stream,
            call,
            broadcaster or prompt.options.broadcaster,
            cancel_token,
            handler=self.exception_handler,
        )

    # ----- Internal helpers -----
    def _prepare(self, prompt: Prompt, *, stream: bool) -> PreparedCall:
        """Select the adapter and build the wire request.

        Runs outside the exception handler: configuration and validation
        failures always reach the caller.
        """
        ctx = self._ctx(prompt)
        started = time.perf_counter()
        try:
            adapter = self.adapter_for(prompt)
            self._log_start(ctx, prompt, adapter, stream=stream)
            request = adapter.build_request(prompt, stream=stream)
        except Exception as exc:
            self._log_error(ctx, exc, started)
            raise
        return PreparedCall(ctx=ctx, prompt=prompt, adapter=adapter, request=request, started=started)

    def _log_start(self, ctx: LogContext, prompt: Prompt, adapter: ProviderAdapter, *, stream: bool) -> None:
        normalized_log_event(
            self._logger,
            "generate.start",
            ctx,
            phase="start",
            adapter=adapter.kind.value,
            stream=stream,
            has_tools=bool(prompt.actions),
            has_schema=prompt.options.structured_output,
            messages=len(prompt.messages),
        )

    def _log_error(self, ctx: LogContext, exc: Exception, started: float) -> None:
        code = exc.code.value if isinstance(exc, ProviderError) else classify_exception(exc).value
        normalized_log_event(
            self._logger,
            "generate.error",
            ctx,
            phase="finalize",
            error_code=code,
            error=str(exc),
            error_type=type(exc).__name__,
            latency_ms=(time.perf_counter() - started) * 1000.0,
        )

    def _finish(self, ctx: LogContext, prompt: Prompt, response: Response, started: float, *, emitted: bool) -> Response:
        cleared = clear_forced_tool_choice(prompt, [response.message], ctx=ctx)
        normalized_log_event(
            self._logger,
            "generate.end",
            ctx.bind(generation_id=response.message.generation_id),
            phase="finalize",
            emitted=emitted,
            tokens=response.usage,
            latency_ms=(time.perf_counter() - started) * 1000.0,
            actions=len(response.requested_actions),
            tool_choice_cleared=cleared,
        )
        return response

    def _generate(self, call: PreparedCall) -> Response:
        ctx, prompt, started = call.ctx, call.prompt, call.started
        try:
            wire = self.transport.send(call.request)
            response = call.adapter.parse_response(wire, prompt)
        except Exception as exc:
            self._log_error(ctx, exc, started)
            raise
        return self._finish(ctx, prompt, response, started, emitted=False)

    def _stream(
        self,
        call: PreparedCall,
        broadcaster: Optional[Broadcaster],
        cancel_token: Optional[CancellationToken],
    ) -> Response:
        ctx, prompt, started, adapter = call.ctx, call.prompt, call.started, call.adapter
        snapshot = prompt.snapshot()
        engine = StreamEngine(adapter.stream_translator(), provider=self.provider_name, model=ctx.model, logger=self._logger)
        session = StreamSession(engine, broadcaster)
        try:
            with self.transport.stream(call.request) as chunks:
                result = session.run(chunks, cancel_token=cancel_token)
        except Exception as exc:
            session.abort(reason=type(exc).__name__)
            self._log_error(ctx, exc, started)
            raise
        message = result.message
        finalize = getattr(adapter, "finalize_stream_message", None)
        if finalize is not None:
            message = finalize(message, prompt)
        elif prompt.options.structured_output:
            message.parsed = parse_structured_text(message.text)
        response = Response(
            message=message,
            prompt=snapshot,
            raw={"finish_reason": result.finish_reason, "generation_id": result.generation_id, "aborted": result.aborted},
            success=not result.aborted,
            usage=result.usage,
        )
        return self._finish(ctx, prompt, response, started, emitted=result.count(LifecycleKind.UPDATE) > 0)


__all__ = ["AdapterBuilder", "BaseProvider", "PreparedCall"]
