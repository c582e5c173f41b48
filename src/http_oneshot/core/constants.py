"""
Перечисления и общеизвестные строковые константы.

ReadyState и ResponseType повторяют значения XMLHttpRequest.
"""

from enum import Enum, IntEnum


class ReadyState(IntEnum):
    """Состояние транспорта (readyState)."""
    UNSENT = 0            # open() ещё не вызван
    OPENED = 1            # send() ещё не вызван
    HEADERS_RECEIVED = 2
    LOADING = 3
    DONE = 4


class ResponseType(str, Enum):
    """
    Формат, в котором транспорт отдаёт тело ответа.

    - ARRAY_BUFFER: сырые байты
    - TEXT: строка
    - DOCUMENT: разобранный HTML/XML документ
    - JSON: разобранный JSON
    - BLOB: бинарные данные вместе с их MIME типом
    """
    ARRAY_BUFFER = "arraybuffer"
    BLOB = "blob"
    DOCUMENT = "document"
    JSON = "json"
    TEXT = "text"


class RequestState(Enum):
    """Жизненный цикл Request. Все состояния, кроме IDLE и PENDING, терминальные."""
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self not in (RequestState.IDLE, RequestState.PENDING)


# Частые значения заголовка Content-Type
APPLICATION_FORM = "application/x-www-form-urlencoded"
APPLICATION_JSON = "application/json"
TEXT_PLAIN = "text/plain"


def multipart_form_data(boundary: str) -> str:
    """Content-Type для multipart/form-data с заданной границей."""
    return f'multipart/form-data;boundary="{boundary}"'
