"""
Tests for CancelContext.
"""

import threading
import time

import pytest

from http_oneshot.core.context import CancelContext, ContextError


class TestCancelContextInit:
    """Test constructors."""

    def test_background(self):
        ctx = CancelContext.background()

        assert ctx.deadline is None
        assert ctx.error is None
        assert ctx.time_remaining() is None
        assert not ctx.is_done()

    def test_with_timeout(self):
        ctx = CancelContext.with_timeout(10)

        assert 9 < ctx.time_remaining() <= 10
        ctx.cancel()

    @pytest.mark.parametrize("seconds", [None, 0])
    def test_with_timeout_no_deadline(self, seconds):
        assert CancelContext.with_timeout(seconds).deadline is None

    def test_negative_timeout(self):
        with pytest.raises(ValueError):
            CancelContext.with_timeout(-1)

    def test_past_deadline_is_done(self):
        ctx = CancelContext.with_deadline(time.monotonic() - 1)

        assert ctx.is_done()
        assert ctx.error is ContextError.DEADLINE_EXCEEDED

    def test_child_inherits_earlier_deadline(self):
        parent = CancelContext.with_timeout(1)
        child = CancelContext.with_timeout(60, parent=parent)

        assert child.deadline == parent.deadline
        parent.cancel()


class TestCancelContextDone:
    """Cancellation and expiry."""

    def test_cancel(self):
        ctx = CancelContext.with_cancel()
        ctx.cancel()

        assert ctx.is_done()
        assert ctx.error is ContextError.CANCELLED

    def test_cancel_is_idempotent(self):
        ctx = CancelContext.with_cancel()
        calls = []
        ctx.add_done_callback(calls.append)

        ctx.cancel()
        ctx.cancel()

        assert calls == [ctx]

    def test_deadline_expires(self):
        ctx = CancelContext.with_timeout(0.05)

        assert ctx.wait(timeout=2)
        assert ctx.error is ContextError.DEADLINE_EXCEEDED

    def test_cancel_before_deadline(self):
        ctx = CancelContext.with_timeout(0.05)
        ctx.cancel()
        time.sleep(0.1)

        assert ctx.error is ContextError.CANCELLED

    def test_parent_cancel_propagates(self):
        parent = CancelContext.with_cancel()
        child = CancelContext.with_cancel(parent)

        parent.cancel()

        assert child.error is ContextError.CANCELLED

    def test_parent_deadline_propagates(self):
        parent = CancelContext.with_timeout(0.05)
        child = CancelContext.with_cancel(parent)

        assert child.wait(timeout=2)
        assert child.error is ContextError.DEADLINE_EXCEEDED

    def test_child_cancel_does_not_affect_parent(self):
        parent = CancelContext.with_cancel()
        child = CancelContext.with_cancel(parent)

        child.cancel()

        assert not parent.is_done()
        assert parent._callbacks == []

    def test_context_manager_cancels(self):
        with CancelContext.with_timeout(30) as ctx:
            assert not ctx.is_done()

        assert ctx.error is ContextError.CANCELLED


class TestDoneCallbacks:
    """Callbacks run once on the thread that finished the context."""

    def test_callback_runs_on_cancelling_thread(self):
        ctx = CancelContext.with_cancel()
        threads = []
        ctx.add_done_callback(lambda c: threads.append(threading.current_thread().name))

        worker = threading.Thread(target=ctx.cancel, name="canceller")
        worker.start()
        worker.join()

        assert threads == ["canceller"]

    def test_callback_after_done_runs_immediately(self):
        ctx = CancelContext.with_cancel()
        ctx.cancel()
        calls = []

        ctx.add_done_callback(calls.append)

        assert calls == [ctx]

    def test_remove_callback(self):
        ctx = CancelContext.with_cancel()
        calls = []
        ctx.add_done_callback(calls.append)

        assert ctx.remove_done_callback(calls.append) is True
        assert ctx.remove_done_callback(calls.append) is False
        ctx.cancel()

        assert calls == []

    def test_repr(self):
        ctx = CancelContext.with_cancel()
        assert "active" in repr(ctx)
        ctx.cancel()
        assert "cancelled" in repr(ctx)
