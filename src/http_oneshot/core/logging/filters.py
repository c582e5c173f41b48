"""
Log filters: request id and static extra fields.
"""

import logging
import threading
from typing import Any, Dict, Optional

# Request id of the request being sent on this thread
_request_id_storage = threading.local()


def set_request_id(request_id: str) -> None:
    """Bind ``request_id`` to the current thread."""
    _request_id_storage.value = request_id


def get_request_id() -> Optional[str]:
    """Request id bound to the current thread, or None."""
    return getattr(_request_id_storage, 'value', None)


def clear_request_id() -> None:
    """Unbind the request id from the current thread."""
    if hasattr(_request_id_storage, 'value'):
        del _request_id_storage.value


class RequestIdFilter(logging.Filter):
    """
    Adds ``request_id`` to records logged on a thread that has one bound.

    Records that already carry ``request_id`` (passed through ``extra``,
    e.g. from a transport worker thread) are left alone.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, 'request_id'):
            request_id = get_request_id()
            if request_id:
                record.request_id = request_id
        return True


class ExtraFieldsFilter(logging.Filter):
    """
    Adds static fields (service, environment, ...) to every record.

    Example:
        >>> handler.addFilter(ExtraFieldsFilter({"service": "crawler"}))
    """

    def __init__(self, extra_fields: Dict[str, Any]):
        super().__init__()
        self.extra_fields = dict(extra_fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.extra_fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
