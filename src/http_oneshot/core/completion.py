"""Single-slot completion channel."""

import threading
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class CompletionSlot(Generic[T]):
    """
    Slot that accepts exactly one value.

    Any number of producers may call ``offer()`` from any thread. The first
    offer is stored and wakes the consumer; every later offer returns
    ``False`` immediately. Offers never block on the consumer, so a producer
    that loses the race (a late "load" after cancellation, for example)
    finishes without leaving anything behind.

    Example:
        >>> slot = CompletionSlot()
        >>> slot.offer("load")
        True
        >>> slot.offer("timeout")
        False
        >>> slot.wait()
        'load'
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._value: Optional[T] = None
        self._delivered = False
        self._callbacks: List[Callable[[T], None]] = []

    @property
    def delivered(self) -> bool:
        """True once a value has been accepted."""
        return self._delivered

    def offer(self, value: T) -> bool:
        """
        Try to deliver a value.

        Returns:
            True if this call delivered the value, False if the slot was
            already filled.
        """
        with self._lock:
            if self._delivered:
                return False
            self._value = value
            self._delivered = True
            callbacks, self._callbacks = self._callbacks, []
        self._event.set()

        for callback in callbacks:
            callback(value)
        return True

    def add_callback(self, callback: Callable[[T], None]) -> None:
        """
        Call ``callback(value)`` on delivery.

        Runs on the delivering thread, or right away on the calling thread
        if the slot is already filled.
        """
        with self._lock:
            if not self._delivered:
                self._callbacks.append(callback)
                return
            value = self._value
        callback(value)

    def wait(self, timeout: Optional[float] = None) -> T:
        """
        Block until a value is delivered and return it.

        Raises:
            TimeoutError: builtin, only if ``timeout`` is given and expires
        """
        if not self._event.wait(timeout):
            raise TimeoutError("completion slot was not filled in time")
        return self._value
