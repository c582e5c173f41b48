"""
Transport backed by requests.
"""

import logging
import threading
from typing import Optional

import requests
from requests.adapters import HTTPAdapter

from ..core.config import RequestConfig
from .base import (
    OutgoingRequest,
    RawResponse,
    ThreadedTransport,
    TransportFailure,
    TransportTimeout,
)

logger = logging.getLogger(__name__)


class RequestsTransport(ThreadedTransport):
    """
    ThreadedTransport running a ``requests.Session`` request.

    The body is streamed in ``config.chunk_size`` pieces so abort and
    expiry take effect between chunks. Abort also closes the live response,
    which unblocks a pending socket read.

    Args:
        config: RequestConfig (timeouts, SSL, redirects, size limit)
        session: Shared session for connection reuse. The caller keeps
                 ownership; without one the transport creates and closes
                 its own.

    Example:
        >>> transport = RequestsTransport()
        >>> request = Request("GET", "https://api.example.com", transport=transport)
    """

    def __init__(self, config: Optional[RequestConfig] = None, session: Optional[requests.Session] = None):
        super().__init__(config)
        self._session = session
        self._owns_session = session is None
        self._live: Optional[requests.Response] = None
        self._live_lock = threading.Lock()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        # Single attempt; retries are the caller's business
        adapter = HTTPAdapter(max_retries=0)
        session.mount('http://', adapter)
        session.mount('https://', adapter)
        session.max_redirects = self._config.security.max_redirects
        return session

    def _perform(self, outgoing: OutgoingRequest) -> RawResponse:
        session = self._session or self._create_session()
        try:
            try:
                response = session.request(
                    outgoing.method,
                    outgoing.url,
                    headers=outgoing.headers,
                    data=outgoing.body,
                    timeout=(outgoing.connect_timeout, outgoing.read_timeout),
                    verify=self._config.security.verify_ssl,
                    allow_redirects=self._config.security.allow_redirects,
                    stream=True,
                )
            except requests.exceptions.Timeout as exc:
                raise TransportTimeout(str(exc)) from exc
            except requests.exceptions.RequestException as exc:
                raise TransportFailure(str(exc)) from exc

            with self._live_lock:
                self._live = response

            try:
                content = self._read_body(response.iter_content(self._config.chunk_size))
            except requests.exceptions.Timeout as exc:
                raise TransportTimeout(str(exc)) from exc
            except (requests.exceptions.RequestException, OSError) as exc:
                raise TransportFailure(str(exc)) from exc
            finally:
                with self._live_lock:
                    self._live = None
                response.close()

            return RawResponse(
                status=response.status_code,
                reason=response.reason or "",
                headers=list(response.headers.items()),
                content=content,
                url=response.url,
            )
        finally:
            if self._owns_session:
                session.close()

    def _interrupt(self) -> None:
        with self._live_lock:
            live = self._live
        if live is not None:
            live.close()
