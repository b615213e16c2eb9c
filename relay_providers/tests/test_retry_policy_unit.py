from __future__ import annotations

import pytest

from relay_providers.base.errors import ErrorCode, ProviderError, RateLimitError
from relay_providers.base.resilience.retry import (
    RetryConfig,
    retry,
)


class _Flaky:
    def __init__(self, fail_times: int, code: ErrorCode):
        self.calls = 0
        self.fail_times = fail_times
        self.code = code

    def __call__(self):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise ProviderError(code=self.code, message="boom", provider="x")
        return "ok"


def test_retry_succeeds_after_transient():
    attempt_log = []
    sleeps = []

    def attempt_logger(**kw):
        attempt_log.append(kw)

    cfg = RetryConfig(max_attempts=3, delay_base=1.0, attempt_logger=attempt_logger, sleep=sleeps.append)

    flaky = _Flaky(fail_times=2, code=ErrorCode.TRANSIENT)

    @retry(cfg)
    def run():
        return flaky()

    assert run() == "ok"  # nosec B101 - asserts are appropriate in unit tests
    # Two failures and one success
    assert flaky.calls == 3  # nosec B101 - asserts are appropriate in unit tests
    assert sleeps == [1.0, 1.0]  # nosec B101
    assert attempt_log[-1]["error"] is None  # nosec B101


def test_retry_stops_on_non_retryable():
    cfg = RetryConfig(max_attempts=4, delay_base=1.0, sleep=lambda _: None)
    flaky = _Flaky(fail_times=99, code=ErrorCode.VALIDATION)

    @retry(cfg)
    def run():
        return flaky()

    with pytest.raises(ProviderError) as ei:
        run()
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101 - asserts are appropriate in unit tests
    assert flaky.calls == 1  # nosec B101 - asserts are appropriate in unit tests


def test_retry_gives_up_after_max_attempts():
    cfg = RetryConfig(max_attempts=2, delay_base=2.0, sleep=lambda _: None)
    flaky = _Flaky(fail_times=99, code=ErrorCode.UNAVAILABLE)

    with pytest.raises(ProviderError):
        retry(cfg)(flaky)()
    assert flaky.calls == 2  # nosec B101


def test_rate_limit_retry_after_is_honoured_and_capped():
    cfg = RetryConfig(max_delay=5.0)
    hinted = RateLimitError(message="slow", retry_after=3.0)
    assert cfg.delay_for(0, hinted) == 3.0  # nosec B101
    assert cfg.delay_for(0, RateLimitError(message="slow", retry_after=30.0)) == 5.0  # nosec B101
    assert cfg.delay_for(3, ProviderError(message="x", code=ErrorCode.TRANSIENT)) == 5.0  # nosec B101


def test_from_mapping_reads_config_section():
    cfg = RetryConfig.from_mapping({"max_attempts": 0, "delay_base": "1.5"})
    assert cfg.max_attempts == 1  # nosec B101
    assert cfg.delay_base == 1.5  # nosec B101
    assert RetryConfig.from_mapping(None) == RetryConfig()  # nosec B101
