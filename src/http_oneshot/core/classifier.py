"""
Классификация исходов запроса и статус кодов.

Чистые функции без состояния.
"""

from enum import Enum
from typing import Optional

from .constants import RequestState
from .context import ContextError
from .exceptions import (
    Cancelled,
    DeadlineExceeded,
    NetworkFailure,
    SendError,
    TimeoutError,
)


class Signal(str, Enum):
    """Сигнал, завершивший ожидание в Request.send()."""
    LOAD = "load"
    ERROR = "error"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    DEADLINE_EXCEEDED = "deadline_exceeded"


_CONTEXT_SIGNALS = {
    ContextError.CANCELLED: Signal.CANCELLED,
    ContextError.DEADLINE_EXCEEDED: Signal.DEADLINE_EXCEEDED,
}

_TERMINAL_STATES = {
    Signal.LOAD: RequestState.SUCCEEDED,
    Signal.ERROR: RequestState.FAILED,
    Signal.TIMEOUT: RequestState.TIMED_OUT,
    Signal.DEADLINE_EXCEEDED: RequestState.TIMED_OUT,
    Signal.CANCELLED: RequestState.CANCELLED,
}


def signal_from_context(error: ContextError) -> Signal:
    """Сигнал для завершившегося контекста."""
    return _CONTEXT_SIGNALS[error]


def terminal_state(signal: Signal) -> RequestState:
    """Терминальное состояние Request для сигнала."""
    return _TERMINAL_STATES[signal]


def classify(
    signal: Signal,
    url: Optional[str] = None,
    deadline_from_context: bool = False,
    timeout_ms: Optional[int] = None,
) -> Optional[SendError]:
    """
    Преобразовать сигнал в ошибку таксономии.

    Статус код ответа не рассматривается: 4xx/5xx на уровне транспорта
    считаются успешной загрузкой.

    Args:
        signal: Сигнал, первым попавший в CompletionSlot
        url: URL запроса (для сообщения)
        deadline_from_context: Таймаут транспорта был выставлен из дедлайна контекста
        timeout_ms: Таймаут транспорта (мс)

    Returns:
        None для LOAD, иначе экземпляр SendError

    Examples:
        >>> classify(Signal.LOAD) is None
        True
        >>> isinstance(classify(Signal.ERROR), NetworkFailure)
        True
    """
    if signal is Signal.LOAD:
        return None
    if signal is Signal.ERROR:
        return NetworkFailure(url)
    if signal is Signal.TIMEOUT:
        if deadline_from_context:
            return DeadlineExceeded(url, timeout_ms)
        return TimeoutError(url, timeout_ms)
    if signal is Signal.DEADLINE_EXCEEDED:
        return DeadlineExceeded(url)
    if signal is Signal.CANCELLED:
        return Cancelled(url)
    raise ValueError(f"Unknown signal: {signal!r}")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# STATUS CODES
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def is_2xx(status: int) -> bool:
    """200..299 включительно."""
    return 200 <= status <= 299


def is_4xx(status: int) -> bool:
    """400..499 включительно."""
    return 400 <= status <= 499


def is_5xx(status: int) -> bool:
    """500..599 включительно."""
    return 500 <= status <= 599
