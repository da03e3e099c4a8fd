"""
Tests for logging hooks and LoggingConfig
"""
import io
import json
import logging

import pytest

from route_utils.core.config import get_settings
from route_utils.core.log_sinks import noop_logger, safe_log, stdlib_log_sink
from route_utils.core.logging_config import (ContextualFormatter,
                                             LoggingConfig,
                                             SensitiveDataFilter)


class RecordCollector(logging.Handler):
    """Keeps emitted records in memory"""

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture(scope="function")
def route_log_records():
    """Capture records written to route_utils.routes"""
    handler = RecordCollector()
    records = handler.records
    target = logging.getLogger("route_utils.routes")
    previous_level = target.level
    target.addHandler(handler)
    target.setLevel(logging.DEBUG)
    yield records
    target.removeHandler(handler)
    target.setLevel(previous_level)


def test_noop_logger_returns_nothing():
    assert noop_logger({"message": "ignored"}, "tag") is None


def test_stdlib_sink_logs_exceptions_with_traceback(route_log_records):
    hook = stdlib_log_sink()
    try:
        raise ValueError("boom")
    except ValueError as e:
        hook(e, "GET /x/catch")

    assert len(route_log_records) == 1
    record = route_log_records[0]
    assert record.levelno == logging.ERROR
    assert record.getMessage() == "ValueError: boom"
    assert record.exc_info[1].args == ("boom",)
    assert record.route_tag == "GET /x/catch"


def test_stdlib_sink_logs_message_payloads(route_log_records):
    hook = stdlib_log_sink(level=logging.WARNING)
    hook({"message": "Unexpected response shape", "response": None, "route": "GET /x"}, "GET /x")

    record = route_log_records[0]
    assert record.levelno == logging.WARNING
    assert record.getMessage() == "Unexpected response shape"
    assert record.details == {"response": None, "route": "GET /x"}


def test_stdlib_sink_logs_other_payloads(route_log_records):
    stdlib_log_sink()(["odd", "payload"], None)

    assert route_log_records[0].getMessage() == "['odd', 'payload']"


def test_stdlib_sink_accepts_custom_logger():
    target = logging.getLogger("tests.custom_route_logger")
    collector = RecordCollector()
    target.addHandler(collector)
    try:
        stdlib_log_sink(target)("payload", "tag")
    finally:
        target.removeHandler(collector)

    assert collector.records[0].name == "tests.custom_route_logger"


def test_safe_log_swallows_hook_errors():
    def broken(payload, tag=None):
        raise RuntimeError("down")

    assert safe_log(broken, "payload", "tag") is None


def test_safe_log_without_loop_closes_coroutine():
    calls = []

    async def async_hook(payload, tag=None):
        calls.append(payload)

    safe_log(async_hook, "payload", "tag")

    assert calls == []


def test_sensitive_data_filter_masks_tokens():
    record = logging.LogRecord("route_utils", logging.INFO, __file__, 1, "token=abc123 password=hunter2", None, None)

    SensitiveDataFilter().filter(record)

    assert "abc123" not in record.getMessage()
    assert "hunter2" not in record.getMessage()


def test_sensitive_data_filter_can_be_disabled():
    record = logging.LogRecord("route_utils", logging.INFO, __file__, 1, "token=abc123", None, None)

    SensitiveDataFilter(enabled=False).filter(record)

    assert record.getMessage() == "token=abc123"


def test_contextual_formatter_includes_context_and_extra():
    LoggingConfig.set_context(request_id="req-1")
    try:
        record = logging.LogRecord("route_utils", logging.ERROR, __file__, 10, "failed", None, None)
        record.route_tag = "GET /x"
        payload = json.loads(ContextualFormatter().format(record))
    finally:
        LoggingConfig.clear_context()

    assert payload["message"] == "failed"
    assert payload["level"] == "ERROR"
    assert payload["request_id"] == "req-1"
    assert payload["route_tag"] == "GET /x"


def test_context_set_and_clear():
    LoggingConfig.set_context(method="GET")
    LoggingConfig.set_context(path="/x")

    assert LoggingConfig.get_context() == {"method": "GET", "path": "/x"}

    LoggingConfig.clear_context()
    assert LoggingConfig.get_context() == {}


def test_configure_attaches_json_handler(monkeypatch):
    monkeypatch.setenv("ROUTE_UTILS_LOG_FORMAT", "json")
    monkeypatch.setenv("ROUTE_UTILS_LOG_LEVEL", "debug")
    get_settings.cache_clear()
    stream = io.StringIO()
    package_logger = logging.getLogger("route_utils")
    previous_level = package_logger.level

    try:
        LoggingConfig.configure(stream=stream, force=True)
        logging.getLogger("route_utils.tests").debug("configured", extra={"route_tag": "t"})
    finally:
        package_logger.removeHandler(LoggingConfig._handler)
        package_logger.setLevel(previous_level)
        LoggingConfig._handler = None
        LoggingConfig._configured = False

    line = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert line["message"] == "configured"
    assert line["route_tag"] == "t"


def test_invalid_log_format_is_rejected(monkeypatch):
    monkeypatch.setenv("ROUTE_UTILS_LOG_FORMAT", "xml")
    get_settings.cache_clear()

    with pytest.raises(ValueError):
        get_settings()
