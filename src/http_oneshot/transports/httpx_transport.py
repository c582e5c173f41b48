"""
Transport backed by httpx.
"""

import logging
import threading
from typing import Optional

import httpx

from ..core.config import RequestConfig
from .base import (
    OutgoingRequest,
    RawResponse,
    ThreadedTransport,
    TransportFailure,
    TransportTimeout,
)

logger = logging.getLogger(__name__)


class HttpxTransport(ThreadedTransport):
    """
    ThreadedTransport running a synchronous ``httpx.Client`` stream.

    Args:
        config: RequestConfig
        client: Shared httpx.Client (caller keeps ownership). Without one the
                transport builds a client from the config and closes it
                after the exchange.

    Example:
        >>> transport = HttpxTransport(RequestConfig.create(transport="httpx"))
    """

    def __init__(self, config: Optional[RequestConfig] = None, client: Optional[httpx.Client] = None):
        super().__init__(config)
        self._client = client
        self._owns_client = client is None
        self._live: Optional[httpx.Response] = None
        self._live_lock = threading.Lock()

    def _create_client(self, outgoing: OutgoingRequest) -> httpx.Client:
        security = self._config.security
        return httpx.Client(
            timeout=httpx.Timeout(outgoing.read_timeout, connect=outgoing.connect_timeout),
            verify=security.verify_ssl,
            follow_redirects=security.allow_redirects,
            max_redirects=security.max_redirects,
        )

    def _perform(self, outgoing: OutgoingRequest) -> RawResponse:
        client = self._client or self._create_client(outgoing)
        body = outgoing.body
        content = body.read() if hasattr(body, "read") else body
        try:
            request = client.build_request(
                outgoing.method,
                outgoing.url,
                headers=outgoing.headers,
                content=content,
            )
            try:
                response = client.send(request, stream=True)
            except httpx.TimeoutException as exc:
                raise TransportTimeout(str(exc)) from exc
            except httpx.HTTPError as exc:
                raise TransportFailure(str(exc)) from exc

            with self._live_lock:
                self._live = response

            try:
                data = self._read_body(response.iter_bytes(self._config.chunk_size))
            except httpx.TimeoutException as exc:
                raise TransportTimeout(str(exc)) from exc
            except (httpx.HTTPError, httpx.StreamError, OSError) as exc:
                raise TransportFailure(str(exc)) from exc
            finally:
                with self._live_lock:
                    self._live = None
                response.close()

            return RawResponse(
                status=response.status_code,
                reason=response.reason_phrase or "",
                headers=list(response.headers.multi_items()),
                content=data,
                url=str(response.url),
            )
        finally:
            if self._owns_client:
                client.close()

    def _interrupt(self) -> None:
        with self._live_lock:
            live = self._live
        if live is not None:
            live.close()
