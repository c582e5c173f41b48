"""Cancellation context: an optional deadline plus an optional cancel signal."""

import logging
import threading
import time
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DoneCallback = Callable[["CancelContext"], None]


class ContextError(Enum):
    """Why a context is done."""
    CANCELLED = "cancelled"
    DEADLINE_EXCEEDED = "deadline_exceeded"


class CancelContext:
    """
    Carries a deadline and a cancellation signal across API boundaries.

    A context is done when ``cancel()`` is called, when its deadline passes,
    or when its parent is done. Interested parties register callbacks with
    ``add_done_callback`` instead of polling; callbacks run once, on the
    thread that made the context done (the caller of ``cancel()`` or the
    deadline timer).

    Deadlines are ``time.monotonic()`` values.

    Example:
        >>> with CancelContext.with_timeout(5.0) as ctx:
        ...     outcome = Request("GET", "https://api.example.com").send(ctx=ctx)

        >>> ctx = CancelContext.with_cancel()
        >>> threading.Timer(1.0, ctx.cancel).start()
    """

    def __init__(self, parent: Optional["CancelContext"] = None, deadline: Optional[float] = None):
        """
        Args:
            parent: Parent context; done when the parent is done
            deadline: Absolute monotonic deadline (None = no deadline of its own)
        """
        if parent is not None and parent.deadline is not None:
            if deadline is None or parent.deadline < deadline:
                deadline = parent.deadline

        self._parent = parent
        self._deadline = deadline
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._error: Optional[ContextError] = None
        self._callbacks: List[DoneCallback] = []
        self._timer: Optional[threading.Timer] = None

        if parent is not None:
            parent.add_done_callback(self._on_parent_done)

        if deadline is not None and not self._done.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self._finish(ContextError.DEADLINE_EXCEEDED)
            else:
                self._timer = threading.Timer(remaining, self._finish, args=(ContextError.DEADLINE_EXCEEDED,))
                self._timer.daemon = True
                self._timer.start()

    # ==================== Конструкторы ====================

    @classmethod
    def background(cls) -> "CancelContext":
        """Context that is never done unless cancelled explicitly."""
        return cls()

    @classmethod
    def with_cancel(cls, parent: Optional["CancelContext"] = None) -> "CancelContext":
        """Child context without a deadline of its own."""
        return cls(parent=parent)

    @classmethod
    def with_timeout(cls, seconds: Optional[float], parent: Optional["CancelContext"] = None) -> "CancelContext":
        """
        Child context that expires ``seconds`` from now.

        ``None`` or ``0`` means no deadline, matching the transport
        convention where a zero timeout disables the timer.
        """
        if not seconds:
            return cls(parent=parent)
        if seconds < 0:
            raise ValueError("timeout must be non-negative")
        return cls(parent=parent, deadline=time.monotonic() + seconds)

    @classmethod
    def with_deadline(cls, deadline: float, parent: Optional["CancelContext"] = None) -> "CancelContext":
        """Child context that expires at the monotonic time ``deadline``."""
        return cls(parent=parent, deadline=deadline)

    # ==================== Состояние ====================

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def error(self) -> Optional[ContextError]:
        """None while the context is live."""
        return self._error

    def time_remaining(self) -> Optional[float]:
        """Seconds until the deadline (may be negative), or None without one."""
        if self._deadline is None:
            return None
        return self._deadline - time.monotonic()

    def is_done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the context is done. Returns False on timeout."""
        return self._done.wait(timeout)

    # ==================== Отмена ====================

    def cancel(self) -> None:
        """Cancel the context. Idempotent."""
        self._finish(ContextError.CANCELLED)

    def add_done_callback(self, callback: DoneCallback) -> None:
        """
        Register ``callback(ctx)`` to run once when the context is done.

        If the context is already done, the callback runs immediately on
        the calling thread.
        """
        with self._lock:
            if self._error is None:
                self._callbacks.append(callback)
                return
        callback(self)

    def remove_done_callback(self, callback: DoneCallback) -> bool:
        """Unregister a callback. Returns False if it was not registered."""
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                return False
            return True

    def _on_parent_done(self, parent: "CancelContext") -> None:
        self._finish(parent.error or ContextError.CANCELLED)

    def _finish(self, error: ContextError) -> None:
        with self._lock:
            if self._error is not None:
                return
            self._error = error
            callbacks, self._callbacks = self._callbacks, []
            timer, self._timer = self._timer, None

        if timer is not None:
            timer.cancel()
        if self._parent is not None:
            self._parent.remove_done_callback(self._on_parent_done)
        self._done.set()

        logger.debug("Context done: %s", error.value)
        for callback in callbacks:
            callback(self)

    # ==================== Context manager ====================

    def __enter__(self) -> "CancelContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Cancel on exit to release the deadline timer and parent link."""
        self.cancel()
        return False

    def __repr__(self) -> str:
        state = self._error.value if self._error else "active"
        return f"<CancelContext {state} deadline={self._deadline}>"
