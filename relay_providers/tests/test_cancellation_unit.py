"""Unit tests for the cooperative cancellation token."""
from __future__ import annotations

import threading

from relay_providers.base.cancellation import CancellationToken


def test_cancel_is_idempotent_and_keeps_first_reason():
    token = CancellationToken()
    assert token.cancelled is False and token.reason is None  # nosec B101 - pytest assert in tests
    token.cancel(reason="stop")
    token.cancel(reason="ignored")
    assert token.cancelled is True and token.reason == "stop"  # nosec B101 - pytest assert in tests


def test_cancel_from_another_thread_is_visible():
    token = CancellationToken()
    worker = threading.Thread(target=token.cancel, args=("user",))
    worker.start()
    worker.join()
    assert token.cancelled and token.reason == "user"  # nosec B101 - pytest assert in tests
