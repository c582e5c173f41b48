"""
Decoding a response body into the configured response type.
"""

import json
import logging
from dataclasses import dataclass
from email.message import Message
from typing import Any, Optional, Tuple

from bs4 import BeautifulSoup

from ..core.constants import ResponseType

logger = logging.getLogger(__name__)

_DOCUMENT_TYPES = ("text/html", "application/xhtml+xml", "text/xml", "application/xml")


@dataclass(frozen=True)
class Blob:
    """Binary body together with its MIME type."""
    data: bytes
    type: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


def parse_content_type(value: Optional[str]) -> Tuple[str, Optional[str]]:
    """
    Split a Content-Type value into (mime type, charset).

    Examples:
        >>> parse_content_type("text/html; charset=ISO-8859-1")
        ('text/html', 'iso-8859-1')
        >>> parse_content_type(None)
        ('', None)
    """
    if not value:
        return "", None
    msg = Message()
    msg['content-type'] = value
    charset = msg.get_param('charset')
    if isinstance(charset, tuple):
        charset = charset[2]
    return msg.get_content_type(), (charset.lower() if charset else None)


def decode_text(content: bytes, charset: Optional[str]) -> str:
    """Decode with ``charset`` (UTF-8 when unknown), replacing bad bytes."""
    try:
        return content.decode(charset or "utf-8", errors="replace")
    except LookupError:
        logger.debug("Unknown charset %r, falling back to utf-8", charset)
        return content.decode("utf-8", errors="replace")


def decode_body(
    content: bytes,
    response_type: ResponseType,
    content_type: Optional[str] = None,
    mime_override: Optional[str] = None,
) -> Any:
    """
    Convert raw body bytes into ``response_type``.

    ``mime_override`` (from ``override_mime_type``) replaces the response
    Content-Type for charset and document detection.

    Returns:
        - ARRAY_BUFFER: bytes
        - BLOB: Blob
        - TEXT: str
        - JSON: parsed value, or None if the body is not valid JSON
        - DOCUMENT: BeautifulSoup for HTML/XML bodies, otherwise None
    """
    mime, charset = parse_content_type(mime_override or content_type)

    if response_type is ResponseType.ARRAY_BUFFER:
        return content
    if response_type is ResponseType.BLOB:
        return Blob(content, mime)

    text = decode_text(content, charset)

    if response_type is ResponseType.JSON:
        try:
            return json.loads(text)
        except ValueError:
            logger.debug("Response body is not valid JSON")
            return None

    if response_type is ResponseType.DOCUMENT:
        if mime and mime not in _DOCUMENT_TYPES:
            return None
        return BeautifulSoup(text, "html.parser")

    return text
