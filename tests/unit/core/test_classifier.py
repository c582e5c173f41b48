"""
Tests for outcome and status classification.
"""

import pytest

from http_oneshot.core.classifier import (
    Signal,
    classify,
    is_2xx,
    is_4xx,
    is_5xx,
    signal_from_context,
    terminal_state,
)
from http_oneshot.core.constants import RequestState
from http_oneshot.core.context import ContextError
from http_oneshot.core.exceptions import (
    Cancelled,
    DeadlineExceeded,
    NetworkFailure,
    SendError,
    TimeoutError,
)


class TestClassify:
    """Signal -> error taxonomy."""

    def test_load_is_not_an_error(self):
        assert classify(Signal.LOAD, "https://a") is None

    def test_error(self):
        error = classify(Signal.ERROR, "https://a")

        assert isinstance(error, NetworkFailure)
        assert error.url == "https://a"
        assert error.retryable is True

    def test_timeout_without_deadline(self):
        error = classify(Signal.TIMEOUT, "https://a", timeout_ms=1500)

        assert type(error) is TimeoutError
        assert error.timeout_ms == 1500
        assert "1500ms" in str(error)

    def test_timeout_from_context_deadline(self):
        error = classify(Signal.TIMEOUT, "https://a", deadline_from_context=True, timeout_ms=300)

        assert isinstance(error, DeadlineExceeded)
        assert "context deadline exceeded" in str(error)

    def test_deadline_exceeded(self):
        error = classify(Signal.DEADLINE_EXCEEDED)

        assert isinstance(error, DeadlineExceeded)
        assert isinstance(error, TimeoutError)

    def test_cancelled(self):
        error = classify(Signal.CANCELLED)

        assert isinstance(error, Cancelled)
        assert error.retryable is False

    @pytest.mark.parametrize("signal", [s for s in Signal if s is not Signal.LOAD])
    def test_all_errors_share_base(self, signal):
        assert isinstance(classify(signal), SendError)


class TestSignalMapping:
    """Context errors and terminal states."""

    def test_signal_from_context(self):
        assert signal_from_context(ContextError.CANCELLED) is Signal.CANCELLED
        assert signal_from_context(ContextError.DEADLINE_EXCEEDED) is Signal.DEADLINE_EXCEEDED

    @pytest.mark.parametrize("signal,state", [
        (Signal.LOAD, RequestState.SUCCEEDED),
        (Signal.ERROR, RequestState.FAILED),
        (Signal.TIMEOUT, RequestState.TIMED_OUT),
        (Signal.DEADLINE_EXCEEDED, RequestState.TIMED_OUT),
        (Signal.CANCELLED, RequestState.CANCELLED),
    ])
    def test_terminal_state(self, signal, state):
        assert terminal_state(signal) is state
        assert state.terminal

    def test_signal_from_event_name(self):
        assert Signal("load") is Signal.LOAD


class TestStatusClassifier:
    """Inclusive ranges; boundaries checked on both sides."""

    @pytest.mark.parametrize("status,expected", [
        (0, False), (199, False), (200, True), (204, True), (299, True), (300, False),
    ])
    def test_is_2xx(self, status, expected):
        assert is_2xx(status) is expected

    @pytest.mark.parametrize("status,expected", [
        (399, False), (400, True), (404, True), (499, True), (500, False),
    ])
    def test_is_4xx(self, status, expected):
        assert is_4xx(status) is expected

    @pytest.mark.parametrize("status,expected", [
        (499, False), (500, True), (503, True), (599, True), (600, False),
    ])
    def test_is_5xx(self, status, expected):
        assert is_5xx(status) is expected
