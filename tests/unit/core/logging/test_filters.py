"""
Tests for log filters.

Tests RequestIdFilter, ExtraFieldsFilter and request id management.
"""

import logging
import threading

from http_oneshot.core.logging.filters import (
    ExtraFieldsFilter,
    RequestIdFilter,
    clear_request_id,
    get_request_id,
    set_request_id,
)


def make_record(msg="Test message"):
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None
    )


class TestRequestIdFunctions:
    """Tests for request id management functions."""

    def teardown_method(self):
        clear_request_id()

    def test_set_and_get(self):
        set_request_id("req-123")
        assert get_request_id() == "req-123"

    def test_get_when_not_set(self):
        clear_request_id()
        assert get_request_id() is None

    def test_clear_twice(self):
        """clear_request_id works when the id is not set."""
        clear_request_id()
        clear_request_id()
        assert get_request_id() is None

    def test_thread_local(self):
        """Request id is isolated per thread."""
        set_request_id("main-thread")
        seen = []

        def other():
            seen.append(get_request_id())
            set_request_id("other-thread")
            seen.append(get_request_id())

        thread = threading.Thread(target=other)
        thread.start()
        thread.join()

        assert get_request_id() == "main-thread"
        assert seen == [None, "other-thread"]


class TestRequestIdFilter:
    """Tests for RequestIdFilter."""

    def teardown_method(self):
        clear_request_id()

    def test_adds_request_id(self):
        set_request_id("req-1")
        record = make_record()

        assert RequestIdFilter().filter(record) is True
        assert record.request_id == "req-1"

    def test_no_request_id_bound(self):
        clear_request_id()
        record = make_record()

        RequestIdFilter().filter(record)

        assert not hasattr(record, "request_id")

    def test_explicit_request_id_kept(self):
        """A request_id passed through extra is not overwritten."""
        set_request_id("bound")
        record = make_record()
        record.request_id = "explicit"

        RequestIdFilter().filter(record)

        assert record.request_id == "explicit"


class TestExtraFieldsFilter:
    """Tests for ExtraFieldsFilter."""

    def test_adds_fields(self):
        record = make_record()

        assert ExtraFieldsFilter({"service": "crawler", "env": "dev"}).filter(record) is True
        assert record.service == "crawler"
        assert record.env == "dev"

    def test_does_not_override_record_fields(self):
        record = make_record()
        record.service = "explicit"

        ExtraFieldsFilter({"service": "static"}).filter(record)

        assert record.service == "explicit"

    def test_fields_are_copied(self):
        fields = {"service": "a"}
        log_filter = ExtraFieldsFilter(fields)
        fields["service"] = "b"

        assert log_filter.extra_fields == {"service": "a"}
