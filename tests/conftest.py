"""
Pytest configuration and fixtures for http-oneshot tests.
"""

import threading
from typing import Any, Dict, List, Optional

import pytest
import responses as responses_lib

from http_oneshot.core.constants import ReadyState, ResponseType
from http_oneshot.core.logging.config import LoggingConfig
from http_oneshot.transports.base import Transport


class FakeTransport(Transport):
    """
    Scriptable transport.

    ``on_send`` names the event fired after ``delay`` seconds on a separate
    thread ("load", "error", "timeout"), or None to hang until the test
    fires something itself. Every call is recorded for assertions.
    """

    def __init__(
        self,
        on_send: Optional[str] = None,
        delay: float = 0.0,
        status: int = 200,
        status_text: str = "OK",
        body: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        timeout_ms: int = 0,
    ):
        super().__init__()
        self.timeout_ms = timeout_ms
        self.on_send = on_send
        self.delay = delay
        self._planned = (status, status_text, body, headers or {})
        self._lock = threading.Lock()
        self._finished = False
        self._timer: Optional[threading.Timer] = None

        self.opened: Optional[tuple] = None
        self.sent_bodies: List[Any] = []
        self.request_headers: Dict[str, str] = {}
        self.timeouts: List[int] = []
        self.abort_calls = 0
        self.mime_override: Optional[str] = None

        self.response_type = ResponseType.TEXT
        self.ready_state = ReadyState.UNSENT
        self.status = 0
        self.status_text = ""
        self.response = None
        self.response_text = ""
        self.response_url = ""
        self._headers: Dict[str, str] = {}

    @property
    def send_calls(self) -> int:
        return len(self.sent_bodies)

    def open(self, method: str, url: str) -> None:
        self.opened = (method, url)
        self.ready_state = ReadyState.OPENED

    def send(self, body: Any = None) -> None:
        self.sent_bodies.append(body)
        self.dispatch_event("loadstart")
        if self.on_send is not None:
            self._timer = threading.Timer(self.delay, self.fire, args=(self.on_send,))
            self._timer.daemon = True
            self._timer.start()

    def abort(self) -> None:
        with self._lock:
            self.abort_calls += 1
            first = not self._finished
            self._finished = True
        if self._timer is not None:
            self._timer.cancel()
        if first and self.sent_bodies:
            self.dispatch_event("abort")
            self.dispatch_event("loadend")

    def set_request_header(self, name: str, value: str) -> None:
        self.request_headers[name] = value

    def override_mime_type(self, mime_type: str) -> None:
        self.mime_override = mime_type

    def set_timeout(self, milliseconds: int) -> None:
        self.timeouts.append(milliseconds)
        self.timeout_ms = milliseconds

    def get_all_response_headers(self) -> str:
        return "".join(f"{name}: {value}\r\n" for name, value in sorted(self._headers.items()))

    def get_response_header(self, name: str) -> Optional[str]:
        return self._headers.get(name.lower())

    def fire(self, event_type: str, force: bool = False) -> bool:
        """
        Dispatch a terminal event on the current thread.

        Suppressed after abort or a previous terminal event unless ``force``
        (a misbehaving transport that emits late events).
        """
        with self._lock:
            if self._finished and not force:
                return False
            self._finished = True
        if event_type == "load":
            status, status_text, body, headers = self._planned
            self.status = status
            self.status_text = status_text
            self.response = body if self.response_type is ResponseType.ARRAY_BUFFER else body.decode()
            self.response_text = body.decode()
            self._headers = {name.lower(): value for name, value in headers.items()}
        self.ready_state = ReadyState.DONE
        self.dispatch_event(event_type)
        self.dispatch_event("loadend")
        return True

    def fire_from_thread(self, event_type: str, force: bool = False) -> None:
        """Dispatch from another thread and wait for the listeners to run."""
        thread = threading.Thread(target=self.fire, args=(event_type, force))
        thread.start()
        thread.join()


@pytest.fixture
def base_url():
    """Base URL for testing."""
    return "https://api.example.com"


@pytest.fixture
def fake_transport():
    """Transport that hangs until the test fires an event."""
    return FakeTransport()


@pytest.fixture
def make_transport():
    """Factory for scripted fake transports."""
    return FakeTransport


@pytest.fixture
def mock_responses():
    """Mock HTTP responses using responses library."""
    with responses_lib.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def logging_config():
    """Console-only DEBUG logging."""
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=True,
        enable_file=False
    )


@pytest.fixture
def logging_config_with_file(tmp_path):
    """
    LoggingConfig fixture with file logging enabled.

    Uses temporary directory for log files to avoid cleanup issues.
    """
    log_file = tmp_path / "test.log"
    return LoggingConfig.create(
        level="DEBUG",
        enable_console=False,
        enable_file=True,
        file_path=str(log_file)
    )
