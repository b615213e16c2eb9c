"""Unit coverage for structured logging utilities and helpers."""

from __future__ import annotations

import io
import json
import logging

from relay_providers.base.log_support import JsonFormatter
from relay_providers.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    LogContext,
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO  # nosec B101
    assert _parse_level("debug") == logging.DEBUG  # nosec B101
    assert _parse_level("WARN") == logging.WARNING  # nosec B101
    assert _parse_level("unknown", default=logging.ERROR) == logging.ERROR  # nosec B101


def test_get_logger_prefixes_relay_namespace():
    assert get_logger("openai").name == "relay.openai"  # nosec B101
    assert get_logger("relay.streaming").name == "relay.streaming"  # nosec B101
    assert get_logger().name == "relay"  # nosec B101


def test_get_logger_env_overrides_level(monkeypatch, capsys):
    monkeypatch.setenv("RELAY_PROVIDERS_LOG_LEVEL", "ERROR")
    logger = get_logger(name="tests.level", json_mode=True, level=logging.DEBUG)
    logger.info("hello")
    assert capsys.readouterr().err == ""  # nosec B101
    logger.error("fail")
    data = json.loads(capsys.readouterr().err.strip())
    assert data["level"] == "ERROR"  # nosec B101
    monkeypatch.delenv("RELAY_PROVIDERS_LOG_LEVEL")
    configure_logger(level=logging.INFO)


def test_log_event_merges_context_and_drops_none(relay_logs):
    logger = get_logger("tests.events")
    log_event(logger, "unit.event", LogContext(provider="p", model="m"), kept=1, dropped=None)
    payload = relay_logs.events("unit.event")[-1]
    assert payload["provider"] == "p" and payload["model"] == "m"  # nosec B101
    assert payload["kept"] == 1 and "dropped" not in payload  # nosec B101


def test_normalized_log_event_includes_required_keys(relay_logs):
    logger = get_logger("tests.normalized")
    normalized_log_event(
        logger,
        "stream.close",
        LogContext(provider="p", model="m"),
        phase="finalize",
        error_code="timeout",
        emitted=True,
        tokens={"input_tokens": 1, "output_tokens": 2},
        extra_field=123,
    )
    payload = relay_logs.events("stream.close")[-1]
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload  # nosec B101
    assert payload["tokens"] == {"input_tokens": 1, "output_tokens": 2}  # nosec B101
    assert payload["extra_field"] == 123  # nosec B101


def test_normalized_log_event_omits_absent_error_code(relay_logs):
    normalized_log_event(get_logger("tests.normalized"), "stream.open", None, phase="open")
    payload = relay_logs.events("stream.open")[-1]
    assert "error_code" not in payload  # nosec B101
    assert payload["attempt"] is None and payload["tokens"] is None  # nosec B101


def test_json_formatter_hoists_json_message() -> None:
    """The formatter hoists JSON message keys without double escaping."""

    formatter = JsonFormatter()
    record = logging.LogRecord(
        name="relay.tests.json",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=json.dumps({"provider": "ollama", "event": "generate.start"}),
        args=(),
        exc_info=None,
    )
    payload = json.loads(formatter.format(record))
    assert payload["provider"] == "ollama"  # nosec B101
    assert "msg" not in payload  # nosec B101


def test_child_logger_uses_parent_handler_without_duplicates() -> None:
    logger = get_logger(name="tests.child", json_mode=False)
    base_logger = logging.getLogger("relay")
    previous = list(base_logger.handlers)
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))
    base_logger.handlers[:] = [handler]
    try:
        logger.info("alpha")
        handler.flush()
        lines = [ln for ln in stream.getvalue().splitlines() if ln]
        assert lines == ["alpha"]  # nosec B101 - ensures single emission
    finally:
        base_logger.handlers[:] = previous


def test_log_context_bind_returns_a_copy():
    base = LogContext(provider="p", model="m")
    bound = base.bind(generation_id="gen-1", attempt_tag="x")
    assert base.generation_id is None and base.extra == {}  # nosec B101
    assert bound.to_dict() == {"provider": "p", "model": "m", "generation_id": "gen-1", "attempt_tag": "x"}  # nosec B101
