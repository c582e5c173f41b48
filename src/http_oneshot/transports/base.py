"""
Transport contract and a thread-backed base implementation.

A transport performs exactly one HTTP exchange and reports completion
through events, the way XMLHttpRequest does:

    loadstart -> (load | error | timeout | abort) -> loadend

Events are dispatched on the transport's worker thread (or its timeout
timer thread), never on the thread that called ``send()``.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..core.config import RequestConfig
from ..core.constants import ReadyState, ResponseType
from ..core.exceptions import InvalidStateError
from ..core.params import Params
from ..utils.sanitizer import mask_url
from .body import decode_body, decode_text, parse_content_type

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]
Body = Union[bytes, BinaryIO]

EVENT_TYPES = ("loadstart", "load", "error", "timeout", "abort", "loadend")


def encode_body(data: Any) -> Optional[Body]:
    """
    Normalize a request payload.

    Text is sent as its UTF-8 bytes; no Content-Type is derived from the
    payload type.
    """
    if data is None:
        return None
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, Params):
        return data.to_string().encode("ascii")
    if hasattr(data, "read"):
        return data
    raise TypeError(f"Unsupported request body type: {type(data).__name__}")

# ==================== Events ====================

class EventTarget:
    """Thread-safe listener registry."""

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}
        self._listeners_lock = threading.Lock()

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        with self._listeners_lock:
            self._listeners.setdefault(event_type, []).append(listener)

    def remove_event_listener(self, event_type: str, listener: Listener) -> bool:
        """Returns False if the listener was not registered."""
        with self._listeners_lock:
            listeners = self._listeners.get(event_type, [])
            try:
                listeners.remove(listener)
            except ValueError:
                return False
            return True

    def dispatch_event(self, event_type: str) -> None:
        """
        Call listeners for ``event_type`` in registration order.

        A listener that raises is logged and does not stop the others.
        """
        with self._listeners_lock:
            listeners = list(self._listeners.get(event_type, ()))
        for listener in listeners:
            try:
                listener(event_type)
            except Exception:
                logger.exception("Listener for %r event raised", event_type)

# ==================== Contract ====================

class Transport(EventTarget, ABC):
    """
    One asynchronous HTTP exchange.

    Configuration (``open``, ``set_request_header``, ``response_type``,
    ``override_mime_type``, ``set_timeout``) happens before ``send``.
    The response snapshot is readable once "load" has been dispatched.
    """

    @abstractmethod
    def open(self, method: str, url: str) -> None:
        """Prepare the request line."""

    @abstractmethod
    def send(self, body: Any = None) -> None:
        """Start the exchange; returns without waiting for it."""

    @abstractmethod
    def abort(self) -> None:
        """Best-effort cancellation. Idempotent; no effect after completion."""

    @abstractmethod
    def set_request_header(self, name: str, value: str) -> None:
        """Set a request header; the last value for a name wins."""

    @abstractmethod
    def override_mime_type(self, mime_type: str) -> None:
        """Use ``mime_type`` instead of the response Content-Type when decoding."""

    @abstractmethod
    def set_timeout(self, milliseconds: int) -> None:
        """Wall-clock limit for the whole exchange; 0 disables it."""

    response_type: ResponseType
    ready_state: ReadyState
    timeout_ms: int
    status: int
    status_text: str
    response: Any
    response_text: str
    response_url: str

    @abstractmethod
    def get_all_response_headers(self) -> str:
        """All response headers as ``name: value`` lines joined by CRLF."""

    @abstractmethod
    def get_response_header(self, name: str) -> Optional[str]:
        """Combined value of one response header, or None."""

# ==================== Threaded implementation ====================

class TransportTimeout(Exception):
    """Raised by ``_perform`` when the underlying client timed out."""


class TransportFailure(Exception):
    """Raised by ``_perform`` for any network-layer failure."""


class TransportAborted(Exception):
    """Raised by ``_perform`` when it noticed abort or expiry and stopped."""


@dataclass
class OutgoingRequest:
    """Everything ``_perform`` needs, captured at send time."""
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[Body]
    connect_timeout: float
    read_timeout: Optional[float]


@dataclass
class RawResponse:
    """What ``_perform`` returns: status line, headers, full body."""
    status: int
    reason: str
    headers: List[Tuple[str, str]] = field(default_factory=list)
    content: bytes = b""
    url: str = ""


class ThreadedTransport(Transport):
    """
    Transport that runs a blocking client on a worker thread.

    Subclasses implement ``_perform`` (the exchange itself) and may
    override ``_interrupt`` to close in-flight connections on abort or
    expiry. The base class owns the state machine:

    - ``send`` is accepted once, only after ``open``
    - the timeout is a wall-clock timer started by ``send``
    - exactly one of load/error/timeout/abort is dispatched; results that
      arrive after expiry or abort are dropped
    """

    def __init__(self, config: Optional[RequestConfig] = None):
        super().__init__()
        self._config = config or RequestConfig()
        self._lock = threading.Lock()

        self._ready_state = ReadyState.UNSENT
        self._method = ""
        self._url = ""
        self._headers: Dict[str, Tuple[str, str]] = {}
        self._response_type = ResponseType.TEXT
        self._mime_override: Optional[str] = None
        self._timeout_ms = self._config.timeout.request_ms

        self._send_flag = False
        self._settled = False
        self._aborted = False
        self._timer: Optional[threading.Timer] = None

        self._raw: Optional[RawResponse] = None
        self._decoded: Any = None
        self._decoded_ready = False

        for name, value in self._config.headers.items():
            self._headers[name.lower()] = (name, value)

    # ---------- configuration ----------

    def open(self, method: str, url: str) -> None:
        with self._lock:
            if self._send_flag:
                raise InvalidStateError("open() called after send()")
            self._method = method.upper()
            self._url = url
            self._ready_state = ReadyState.OPENED

    def set_request_header(self, name: str, value: str) -> None:
        with self._lock:
            self._require_unsent("set_request_header")
            self._headers[name.lower()] = (name, str(value))

    def override_mime_type(self, mime_type: str) -> None:
        with self._lock:
            if self._ready_state in (ReadyState.LOADING, ReadyState.DONE):
                raise InvalidStateError("override_mime_type() called after the response arrived")
            self._mime_override = mime_type

    def set_timeout(self, milliseconds: int) -> None:
        if milliseconds < 0:
            raise ValueError("timeout must be non-negative")
        with self._lock:
            self._timeout_ms = int(milliseconds)

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def response_type(self) -> ResponseType:
        return self._response_type

    @response_type.setter
    def response_type(self, value: Union[ResponseType, str]) -> None:
        value = ResponseType(value)
        with self._lock:
            if self._ready_state in (ReadyState.LOADING, ReadyState.DONE):
                raise InvalidStateError("response_type set after the response arrived")
            self._response_type = value

    @property
    def request_headers(self) -> Dict[str, str]:
        """Request headers with their original name casing."""
        with self._lock:
            return dict(self._headers.values())

    def _require_unsent(self, operation: str) -> None:
        if self._ready_state != ReadyState.OPENED or self._send_flag:
            raise InvalidStateError(f"{operation}() requires an opened, unsent transport")

    # ---------- lifecycle ----------

    def send(self, body: Any = None) -> None:
        payload = encode_body(body)
        with self._lock:
            self._require_unsent("send")
            self._send_flag = True
            timeout_ms = self._timeout_ms
            outgoing = OutgoingRequest(
                method=self._method,
                url=self._url,
                headers=dict(self._headers.values()),
                body=payload,
                connect_timeout=self._config.timeout.connect,
                read_timeout=timeout_ms / 1000 if timeout_ms else None,
            )
            if timeout_ms:
                self._timer = threading.Timer(timeout_ms / 1000, self._expire)
                self._timer.daemon = True

        logger.debug("Transport send: %s %s (timeout=%dms)", outgoing.method, mask_url(outgoing.url), timeout_ms)
        self.dispatch_event("loadstart")

        worker = threading.Thread(
            target=self._run,
            args=(outgoing,),
            name=f"{type(self).__name__}-worker",
            daemon=True,
        )
        with self._lock:
            timer = self._timer
        if timer is not None:
            timer.start()
        worker.start()

    def abort(self) -> None:
        with self._lock:
            if self._aborted or self._settled:
                self._aborted = True
                return
            self._aborted = True
            in_flight = self._send_flag
            timer, self._timer = self._timer, None
            if in_flight:
                self._ready_state = ReadyState.DONE

        if timer is not None:
            timer.cancel()

        if in_flight:
            logger.debug("Transport abort: %s %s", self._method, mask_url(self._url))
            self._interrupt()
            self.dispatch_event("abort")
            self.dispatch_event("loadend")

        with self._lock:
            self._ready_state = ReadyState.UNSENT

    @property
    def aborted(self) -> bool:
        return self._aborted

    def _should_stop(self) -> bool:
        """True once the exchange was aborted or expired; ``_perform`` should bail out."""
        return self._aborted or self._settled

    def _advance(self, state: ReadyState) -> None:
        with self._lock:
            if not self._should_stop() and state > self._ready_state:
                self._ready_state = state

    def _expire(self) -> None:
        if self._settle("timeout"):
            logger.debug("Transport timeout: %s %s", self._method, mask_url(self._url))
            self._interrupt()

    def _run(self, outgoing: OutgoingRequest) -> None:
        if self._should_stop():
            return
        try:
            raw = self._perform(outgoing)
        except TransportAborted:
            return
        except TransportTimeout:
            self._settle("timeout")
        except TransportFailure as exc:
            logger.debug("Transport error: %s %s: %s", outgoing.method, mask_url(outgoing.url), exc)
            self._settle("error")
        except Exception:
            if self._should_stop():
                return
            logger.exception("Unexpected transport failure: %s %s", outgoing.method, mask_url(outgoing.url))
            self._settle("error")
        else:
            self._settle("load", raw)

    def _settle(self, event_type: str, raw: Optional[RawResponse] = None) -> bool:
        """Record the terminal event and dispatch it. Only the first call wins."""
        with self._lock:
            if self._settled or self._aborted:
                return False
            self._settled = True
            self._raw = raw
            self._ready_state = ReadyState.DONE
            timer, self._timer = self._timer, None

        if timer is not None:
            timer.cancel()
        self.dispatch_event(event_type)
        self.dispatch_event("loadend")
        return True

    def _read_body(self, chunks: Iterable[bytes]) -> bytes:
        """
        Collect body chunks, stopping on abort/expiry or oversize bodies.

        Raises:
            TransportAborted: abort() or the timeout timer fired meanwhile
            TransportFailure: body exceeds security.max_response_size
        """
        self._advance(ReadyState.LOADING)
        limit = self._config.security.max_response_size
        buffer = bytearray()
        for chunk in chunks:
            if self._should_stop():
                raise TransportAborted()
            buffer.extend(chunk)
            if len(buffer) > limit:
                raise TransportFailure(f"response exceeds {limit} bytes")
        if self._should_stop():
            raise TransportAborted()
        return bytes(buffer)

    @abstractmethod
    def _perform(self, outgoing: OutgoingRequest) -> RawResponse:
        """
        Execute the exchange synchronously on the worker thread.

        Raise TransportTimeout, TransportFailure or TransportAborted;
        anything else is reported as "error".
        """

    def _interrupt(self) -> None:
        """Close in-flight connections. Called once on abort or expiry."""

    # ---------- response snapshot ----------

    @property
    def ready_state(self) -> ReadyState:
        return self._ready_state

    @property
    def status(self) -> int:
        raw = self._raw
        return raw.status if raw is not None else 0

    @property
    def status_text(self) -> str:
        raw = self._raw
        return raw.reason if raw is not None else ""

    @property
    def response_url(self) -> str:
        raw = self._raw
        return raw.url if raw is not None else ""

    @property
    def response(self) -> Any:
        """Body decoded per ``response_type``; None before "load"."""
        raw = self._raw
        if raw is None:
            return None
        if not self._decoded_ready:
            self._decoded = decode_body(
                raw.content,
                self._response_type,
                content_type=self.get_response_header("content-type"),
                mime_override=self._mime_override,
            )
            self._decoded_ready = True
        return self._decoded

    @property
    def response_text(self) -> str:
        """Body as text regardless of ``response_type``; "" before "load"."""
        raw = self._raw
        if raw is None:
            return ""
        _, charset = parse_content_type(self._mime_override or self.get_response_header("content-type"))
        return decode_text(raw.content, charset)

    @property
    def response_content(self) -> bytes:
        """Raw body bytes; b"" before "load"."""
        raw = self._raw
        return raw.content if raw is not None else b""

    def _combined_headers(self) -> Dict[str, str]:
        raw = self._raw
        if raw is None:
            return {}
        combined: Dict[str, str] = {}
        for name, value in raw.headers:
            key = name.lower()
            combined[key] = f"{combined[key]}, {value}" if key in combined else value
        return combined

    def get_all_response_headers(self) -> str:
        return "".join(f"{name}: {value}\r\n" for name, value in sorted(self._combined_headers().items()))

    def get_response_header(self, name: str) -> Optional[str]:
        return self._combined_headers().get(name.lower())
