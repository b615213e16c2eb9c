"""httpx transport for provider wire requests.

Purpose:
    Send :class:`~relay_providers.base.models.WireRequest` objects built by
    adapters and return decoded JSON, or decoded stream chunk payloads.

External dependencies:
    - ``httpx`` for HTTP; clients come from the shared pool unless one is
      injected (tests pass an ``httpx.Client`` backed by ``httpx.MockTransport``).

Failure semantics:
    - Non-2xx responses raise the taxonomy error built by
      :func:`~relay_providers.base.errors.error_from_response`.
    - Network failures raise ``ProviderApiError`` with the classified code.
    - Only the start of a call is retried (``RetryConfig``); once a stream has
      delivered chunks it is never replayed.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import httpx

from ..errors import ErrorCode, ProviderApiError, ProviderError, classify_exception, error_from_response
from ..logging import LogContext, get_logger, log_event, normalized_log_event
from ..models import WireRequest
from ..resilience.retry import RetryConfig, retry
from ..timeouts import get_timeout_config
from .client import get_httpx_client
from .framing import iter_event_stream_payloads, iter_sse_payloads

_RETRYABLE = (ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT, ErrorCode.UNAVAILABLE)


class HttpTransport:
    """Synchronous httpx implementation of the ``Transport`` protocol."""

    def __init__(
        self,
        *,
        provider: str,
        model: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        retry_config: Optional[RetryConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self._client = client
        self._logger = logger or get_logger(f"{provider}.transport")
        self._ctx = LogContext(provider=provider, model=model)
        base = retry_config or RetryConfig()
        if base.attempt_logger is None:
            base = RetryConfig(
                max_attempts=base.max_attempts,
                delay_base=base.delay_base,
                max_delay=base.max_delay,
                retryable_codes=base.retryable_codes,
                attempt_logger=self._log_attempt,
                sleep=base.sleep,
            )
        self._retry_config = base

    def _log_attempt(self, *, attempt: int, max_attempts: int, delay: Optional[float], error: Optional[ProviderError]) -> None:
        if error is None:
            return
        normalized_log_event(
            self._logger,
            "retry.attempt",
            self._ctx,
            phase="retry",
            attempt=attempt + 1,
            error_code=error.code.value,
            emitted=False,
            level=logging.WARNING,
            max_attempts=max_attempts,
            delay=delay,
            message=error.message,
        )

    def _client_for(self, request: WireRequest, purpose: str) -> httpx.Client:
        if self._client is not None:
            return self._client
        return get_httpx_client(request.base_url, purpose=f"{self.provider}.{purpose}")

    def _network_error(self, exc: httpx.HTTPError) -> ProviderApiError:
        code = ErrorCode.TIMEOUT if isinstance(exc, httpx.TimeoutException) else classify_exception(exc)
        if code is ErrorCode.UNKNOWN:
            code = ErrorCode.TRANSIENT
        return ProviderApiError(
            message=f"{type(exc).__name__}: {exc}",
            code=code,
            provider=self.provider,
            model=self.model,
            retryable=code in _RETRYABLE,
            raw=exc,
        )

    def _failure(self, response: httpx.Response) -> ProviderApiError:
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text
        return error_from_response(
            response.status_code,
            body,
            response.headers,
            provider=self.provider,
            model=self.model,
        )

    # ------------------------------------------------------------------

    def send(self, request: WireRequest) -> Dict[str, Any]:
        """POST ``request`` and return the decoded JSON body."""
        client = self._client_for(request, "send")
        timeout = get_timeout_config().httpx_timeout()

        @retry(self._retry_config)
        def _call() -> Dict[str, Any]:
            try:
                response = client.request(
                    request.method,
                    request.url,
                    json=request.body,
                    headers=request.headers,
                    params=request.params or None,
                    timeout=timeout,
                )
            except httpx.HTTPError as exc:
                raise self._network_error(exc) from exc
            if response.status_code >= 400:
                raise self._failure(response)
            try:
                data = response.json()
            except ValueError as exc:
                raise ProviderApiError(
                    message="response body is not JSON",
                    provider=self.provider,
                    model=self.model,
                    status_code=response.status_code,
                    body=response.text,
                ) from exc
            if not isinstance(data, dict):
                raise ProviderApiError(
                    message="response body is not a JSON object",
                    provider=self.provider,
                    model=self.model,
                    status_code=response.status_code,
                    body=data,
                )
            return data

        return _call()

    @contextmanager
    def stream(self, request: WireRequest) -> Iterator[Iterator[Dict[str, Any]]]:
        """Open a streaming call; yields an iterator of decoded chunk payloads."""
        client = self._client_for(request, "stream")
        timeout = get_timeout_config().httpx_timeout(stream=True)

        @retry(self._retry_config)
        def _open() -> httpx.Response:
            req = client.build_request(
                request.method,
                request.url,
                json=request.body,
                headers=request.headers,
                params=request.params or None,
                timeout=timeout,
            )
            try:
                response = client.send(req, stream=True)
            except httpx.HTTPError as exc:
                raise self._network_error(exc) from exc
            if response.status_code >= 400:
                try:
                    response.read()
                finally:
                    response.close()
                raise self._failure(response)
            return response

        response = _open()
        try:
            yield self._payloads(response, request)
        finally:
            response.close()

    def _payloads(self, response: httpx.Response, request: WireRequest) -> Iterator[Dict[str, Any]]:
        try:
            if request.framing == "aws-eventstream":
                yield from iter_event_stream_payloads(response.iter_bytes())
            else:
                yield from iter_sse_payloads(response.iter_lines(), on_decode_error=self._on_decode_error)
        except httpx.HTTPError as exc:
            raise self._network_error(exc) from exc

    def _on_decode_error(self, exc: ValueError, data: str) -> None:
        log_event(
            self._logger,
            "stream.decode_error",
            self._ctx,
            level=logging.WARNING,
            error=str(exc),
            sample=data[:200],
        )


__all__ = ["HttpTransport"]
