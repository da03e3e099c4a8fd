"""
Pytest configuration and fixtures
"""
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from route_utils.core.config import get_settings


class RecordingSink:
    """ResponseSink that records every call instead of talking to a transport"""

    def __init__(self, committed: bool = False):
        self.already_committed = committed
        self.status_code: Optional[int] = None
        self.headers: Dict[str, str] = {}
        self.body: Any = None
        self.sent_as: Optional[str] = None
        self.calls: List[tuple] = []

    def set_status(self, code: int) -> "RecordingSink":
        self.calls.append(("status", code))
        self.status_code = code
        return self

    def set_header(self, name: str, value: str) -> None:
        self.calls.append(("header", name, value))
        self.headers[name] = value

    def send_json(self, body: Any = None) -> "RecordingSink":
        self.calls.append(("json", body))
        self.body = body
        self.sent_as = "json"
        self.already_committed = True
        return self

    def send_raw(self, body: Any = None) -> "RecordingSink":
        self.calls.append(("raw", body))
        self.body = body
        self.sent_as = "raw"
        self.already_committed = True
        return self

    @property
    def sends(self) -> List[tuple]:
        return [c for c in self.calls if c[0] in ("json", "raw")]


class LogRecorder:
    """Logging hook capturing (payload, tag) pairs"""

    def __init__(self):
        self.entries: List[tuple] = []

    def __call__(self, payload: Any, tag: Optional[str] = None) -> None:
        self.entries.append((payload, tag))


@pytest.fixture(scope="function")
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture(scope="function")
def sink_factory():
    """Build extra sinks, e.g. one that is already committed"""
    return RecordingSink


@pytest.fixture(scope="function")
def log_recorder() -> LogRecorder:
    return LogRecorder()


@pytest.fixture(scope="function")
def request_stub():
    """Minimal request with the fields used for tag synthesis"""
    return SimpleNamespace(method="GET", original_url="/users/1")


@pytest.fixture(autouse=True)
def reset_settings_cache(monkeypatch):
    """Settings are cached; each test starts from the environment it sets up"""
    monkeypatch.delenv("ROUTE_UTILS_TAG_PREFIX", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
