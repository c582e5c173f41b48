"""
Tests for response body decoding.
"""

import pytest
from bs4 import BeautifulSoup

from http_oneshot.core.constants import ResponseType
from http_oneshot.transports.body import Blob, decode_body, decode_text, parse_content_type


class TestParseContentType:
    """Test Content-Type parsing."""

    def test_with_charset(self):
        assert parse_content_type("text/html; charset=ISO-8859-1") == ("text/html", "iso-8859-1")

    def test_without_charset(self):
        assert parse_content_type("application/json") == ("application/json", None)

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        assert parse_content_type(value) == ("", None)


class TestDecodeText:
    """Test text decoding."""

    def test_charset(self):
        assert decode_text("café".encode("latin-1"), "latin-1") == "café"

    def test_default_utf8(self):
        assert decode_text("привет".encode("utf-8"), None) == "привет"

    def test_unknown_charset_falls_back(self):
        assert decode_text(b"abc", "x-unknown") == "abc"

    def test_invalid_bytes_replaced(self):
        assert decode_text(b"a\xffb", "utf-8") == "a�b"


class TestDecodeBody:
    """Test decode_body for every response type."""

    def test_array_buffer(self):
        assert decode_body(b"\x00\x01", ResponseType.ARRAY_BUFFER) == b"\x00\x01"

    def test_blob(self):
        blob = decode_body(b"PNG", ResponseType.BLOB, content_type="image/png")

        assert blob == Blob(b"PNG", "image/png")
        assert blob.size == 3

    def test_text(self):
        assert decode_body(b"hello", ResponseType.TEXT, content_type="text/plain") == "hello"

    def test_json(self):
        body = decode_body(b'{"a": [1, 2]}', ResponseType.JSON, content_type="application/json")

        assert body == {"a": [1, 2]}

    def test_invalid_json(self):
        assert decode_body(b"not json", ResponseType.JSON) is None

    def test_document(self):
        html = b"<html><head><title>Hi</title></head><body><p id='x'>text</p></body></html>"

        doc = decode_body(html, ResponseType.DOCUMENT, content_type="text/html; charset=utf-8")

        assert isinstance(doc, BeautifulSoup)
        assert doc.title.string == "Hi"
        assert doc.find(id="x").get_text() == "text"

    def test_document_for_non_markup(self):
        assert decode_body(b"{}", ResponseType.DOCUMENT, content_type="application/json") is None

    def test_mime_override(self):
        """Override replaces Content-Type for charset detection."""
        body = "café".encode("latin-1")

        text = decode_body(body, ResponseType.TEXT, content_type="text/plain", mime_override="text/plain; charset=latin-1")

        assert text == "café"
