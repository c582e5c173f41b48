"""Transports: the event-driven side of a request."""

from typing import Optional

from ..core.config import RequestConfig
from .base import (
    EVENT_TYPES,
    EventTarget,
    OutgoingRequest,
    RawResponse,
    ThreadedTransport,
    Transport,
    TransportAborted,
    TransportFailure,
    TransportTimeout,
    encode_body,
)
from .body import Blob, decode_body
from .httpx_transport import HttpxTransport
from .requests_transport import RequestsTransport

_TRANSPORTS = {
    "requests": RequestsTransport,
    "httpx": HttpxTransport,
}


def create_transport(config: Optional[RequestConfig] = None) -> Transport:
    """Fresh, unopened transport of the kind named by ``config.transport``."""
    config = config or RequestConfig()
    return _TRANSPORTS[config.transport](config)


__all__ = [
    "EVENT_TYPES",
    "EventTarget",
    "Transport",
    "ThreadedTransport",
    "RequestsTransport",
    "HttpxTransport",
    "OutgoingRequest",
    "RawResponse",
    "TransportTimeout",
    "TransportFailure",
    "TransportAborted",
    "Blob",
    "decode_body",
    "encode_body",
    "create_transport",
]
