"""
Tests for HttpxTransport using respx mocks.
"""

import threading

import httpx
import pytest
import respx

from http_oneshot.core.config import RequestConfig
from http_oneshot.core.constants import ResponseType
from http_oneshot.transports import Blob, HttpxTransport, create_transport


def run(transport, method="GET", url="https://api.test.com/users", body=None):
    events = []
    done = threading.Event()
    for event_type in ("load", "error", "timeout", "abort"):
        transport.add_event_listener(event_type, events.append)
    transport.add_event_listener("loadend", lambda event: done.set())
    transport.open(method, url)
    transport.send(body)
    assert done.wait(5)
    return events


class TestHttpxTransport:
    """Exchange through a mocked httpx client."""

    @respx.mock
    def test_load(self):
        respx.get("https://api.test.com/users").mock(
            return_value=httpx.Response(200, json={"users": []}, headers={"X-Total": "0"})
        )
        transport = HttpxTransport()
        transport.response_type = ResponseType.JSON

        events = run(transport)

        assert events == ["load"]
        assert transport.status == 200
        assert transport.status_text == "OK"
        assert transport.response == {"users": []}
        assert transport.get_response_header("X-Total") == "0"

    @respx.mock
    def test_post_body(self):
        route = respx.post("https://api.test.com/users").mock(return_value=httpx.Response(201))
        transport = HttpxTransport()

        events = run(transport, "POST", body="name=x")

        assert events == ["load"]
        assert route.calls.last.request.content == b"name=x"
        assert transport.status == 201

    @respx.mock
    def test_blob(self):
        respx.get("https://api.test.com/users").mock(
            return_value=httpx.Response(200, content=b"\x89PNG", headers={"Content-Type": "image/png"})
        )
        transport = HttpxTransport()
        transport.response_type = ResponseType.BLOB

        run(transport)

        assert transport.response == Blob(b"\x89PNG", "image/png")

    @respx.mock
    def test_connect_error(self):
        respx.get("https://api.test.com/users").mock(side_effect=httpx.ConnectError)

        assert run(HttpxTransport()) == ["error"]

    @respx.mock
    def test_timeout(self):
        respx.get("https://api.test.com/users").mock(side_effect=httpx.ReadTimeout)

        assert run(HttpxTransport()) == ["timeout"]

    @pytest.mark.parametrize("status", [400, 503])
    def test_error_status_is_load(self, status):
        transport = HttpxTransport()
        with respx.mock:
            respx.get("https://api.test.com/users").mock(return_value=httpx.Response(status))
            assert run(transport) == ["load"]

        assert transport.status == status

    def test_shared_client(self):
        """A caller-owned client is used and left open."""
        mock = httpx.MockTransport(lambda request: httpx.Response(200, text="shared"))
        client = httpx.Client(transport=mock)
        transport = HttpxTransport(client=client)

        run(transport)

        assert transport.response == "shared"
        assert not client.is_closed
        client.close()

    def test_create_transport(self):
        config = RequestConfig.create(transport="httpx")

        assert isinstance(create_transport(config), HttpxTransport)
