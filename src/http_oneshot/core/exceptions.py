"""
Иерархия исключений http-oneshot.

Два вида:
- SendError - закрытая таксономия исходов Request.send(). Экземпляры
  возвращаются в Outcome.error, а не выбрасываются.
- Нарушения контракта (RequestAlreadySentError, InvalidStateError) -
  выбрасываются сразу, это ошибка вызывающего кода.
"""

from typing import Optional

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPOneshotException(Exception):
    """Базовое исключение http-oneshot."""

    retryable: bool = False
    fatal: bool = False

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ИСХОДЫ SEND (возвращаются, не выбрасываются)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class SendError(HTTPOneshotException):
    """
    Базовый класс терминальных ошибок одного запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
    """

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = message
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)

class NetworkFailure(SendError):
    """
    Транспорт сообщил об ошибке (событие "error").

    Причина неизвестна: транспорт не различает DNS, отказ в соединении
    и прочие сетевые сбои, поэтому и здесь их не различаем.
    """
    retryable = True

    def __init__(self, url: Optional[str] = None):
        super().__init__("send failed", url)

class TimeoutError(SendError):
    """
    Истёк таймаут транспорта (событие "timeout").

    Args:
        url: URL запроса
        timeout_ms: Таймаут, выставленный транспорту (мс)
    """
    retryable = True

    def __init__(self, url: Optional[str] = None, timeout_ms: Optional[int] = None, message: str = "request timed out"):
        self.timeout_ms = timeout_ms
        msg = message
        if timeout_ms:
            msg += f" (timeout: {timeout_ms}ms)"
        super().__init__(msg, url)

class DeadlineExceeded(TimeoutError):
    """Истёк дедлайн, переданный вызывающим кодом через CancelContext."""

    def __init__(self, url: Optional[str] = None, timeout_ms: Optional[int] = None):
        super().__init__(url, timeout_ms, message="context deadline exceeded")

class Cancelled(SendError):
    """Вызывающий код отменил контекст до завершения запроса."""

    def __init__(self, url: Optional[str] = None):
        super().__init__("context canceled", url)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# НАРУШЕНИЯ КОНТРАКТА (fatal=True)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class RequestAlreadySentError(HTTPOneshotException, RuntimeError):
    """Повторный вызов send() на том же Request."""
    fatal = True

    def __init__(self, method: str = "", url: str = ""):
        self.method = method
        self.url = url
        msg = "must not use a Request for multiple requests"
        if url:
            msg += f" ({method} {url})"
        super().__init__(msg)

class InvalidStateError(HTTPOneshotException, RuntimeError):
    """Операция транспорта вызвана в неподходящем readyState."""
    fatal = True

class ConfigurationError(HTTPOneshotException):
    """Ошибка конфигурации."""
    fatal = True
