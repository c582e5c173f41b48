# src/http_oneshot/core/request.py
"""
Одиночный HTTP запрос поверх событийного транспорта.

Транспорт сообщает о завершении событиями "load", "error", "timeout" из
своего потока. Request.send() превращает их в один блокирующий вызов:
все источники (события транспорта и отмена контекста) пишут сигнал в
CompletionSlot, вызывающий поток ждёт первый, остальные отбрасываются.
"""

import asyncio
import threading
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from .classifier import (
    Signal,
    classify,
    is_2xx,
    is_4xx,
    is_5xx,
    signal_from_context,
    terminal_state,
)
from .completion import CompletionSlot
from .config import RequestConfig
from .constants import ReadyState, RequestState, ResponseType
from .context import CancelContext
from .exceptions import RequestAlreadySentError, SendError
from .logging import OneshotLogger, get_logger
from .logging.filters import clear_request_id, set_request_id
from ..transports import Transport, create_transport, encode_body

# События транспорта, завершающие запрос
TERMINAL_EVENTS = (Signal.LOAD.value, Signal.ERROR.value, Signal.TIMEOUT.value)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# RESULT TYPES
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class ResponseSnapshot:
    """
    Ответ, зафиксированный в момент события "load".

    Attributes:
        status: HTTP статус код
        status_text: Reason phrase
        headers: Все заголовки одной строкой ("name: value" через CRLF)
        body: Тело в формате response_type
        response_type: Формат тела
        url: Итоговый URL (после редиректов)
    """
    status: int
    status_text: str
    headers: str
    body: Any
    response_type: ResponseType
    url: str = ""

    def header(self, name: str) -> Optional[str]:
        """Значение заголовка по имени (без учёта регистра) или None."""
        wanted = name.lower()
        for line in self.headers.splitlines():
            key, sep, value = line.partition(":")
            if sep and key.strip().lower() == wanted:
                return value.strip()
        return None

    def is_2xx(self) -> bool:
        return is_2xx(self.status)

    def is_4xx(self) -> bool:
        return is_4xx(self.status)

    def is_5xx(self) -> bool:
        return is_5xx(self.status)


@dataclass(frozen=True)
class Outcome:
    """
    Терминальный результат Request.send(): либо response, либо error.

    HTTP 4xx/5xx - это успешный исход с response; проверяйте
    response.is_4xx() / is_5xx().

    Example:
        >>> outcome = Request("GET", "https://api.example.com/users").send()
        >>> if outcome.ok:
        ...     print(outcome.response.status)
        ... else:
        ...     print(type(outcome.error).__name__)
    """
    response: Optional[ResponseSnapshot] = None
    error: Optional[SendError] = None

    def __post_init__(self):
        if (self.response is None) == (self.error is None):
            raise ValueError("Outcome must hold exactly one of response or error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> ResponseSnapshot:
        """Выбросить error, если он есть, иначе вернуть response."""
        if self.error is not None:
            raise self.error
        return self.response


@dataclass
class _Wiring:
    """Подписки одного вызова send(), снимаемые после завершения."""
    slot: CompletionSlot
    ctx: CancelContext
    on_event: Callable[[str], None]
    on_done: Callable[[CancelContext], None]

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# REQUEST
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class Request:
    """
    Один HTTP запрос. Каждый экземпляр используется ровно для одного send().

    Транспорт создаётся (или передаётся) при конструировании и сразу
    открывается. Заголовки и формат ответа настраиваются до send().

    Features:
        - Дедлайн CancelContext передаётся транспорту как его таймаут
        - Отмена контекста прерывает транспорт (abort)
        - Ошибки возвращаются в Outcome, а не выбрасываются
        - Повторный send() - RequestAlreadySentError

    Example:
        >>> req = Request("GET", "https://api.example.com/page")
        >>> req.response_type = ResponseType.DOCUMENT
        >>> with CancelContext.with_timeout(10) as ctx:
        ...     outcome = req.send(ctx=ctx)
        >>> if outcome.ok:
        ...     print(outcome.response.body.title)
    """

    def __init__(
        self,
        method: str,
        url: str,
        transport: Optional[Transport] = None,
        config: Optional[RequestConfig] = None,
    ):
        """
        Args:
            method: HTTP метод
            url: URL запроса (не валидируется)
            transport: Готовый транспорт; по умолчанию create_transport(config)
            config: RequestConfig; timeout.request применяется и к переданному транспорту
        """
        self._config = config or RequestConfig()
        self._transport = transport if transport is not None else create_transport(self._config)
        self._method = method.upper()
        self._url = url
        self._request_id = str(uuid.uuid4())

        self._state = RequestState.IDLE
        self._state_lock = threading.Lock()
        self._outcome: Optional[Outcome] = None
        self._deadline_from_context = False
        if transport is not None and config is not None and config.timeout.request_ms:
            self._transport.set_timeout(config.timeout.request_ms)
        self._timeout_ms = self._transport.timeout_ms

        self._logger: Optional[OneshotLogger] = None
        if self._config.logging:
            self._logger = get_logger(self._config.logging)

        self._transport.open(self._method, url)

    # ==================== Свойства ====================

    @property
    def method(self) -> str:
        return self._method

    @property
    def url(self) -> str:
        return self._url

    @property
    def request_id(self) -> str:
        return self._request_id

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def outcome(self) -> Optional[Outcome]:
        """Результат send(); None до завершения."""
        return self._outcome

    @property
    def response_type(self) -> ResponseType:
        return self._transport.response_type

    @response_type.setter
    def response_type(self, value: Union[ResponseType, str]) -> None:
        self._transport.response_type = ResponseType(value)

    @property
    def ready_state(self) -> ReadyState:
        return self._transport.ready_state

    @property
    def status(self) -> int:
        """HTTP статус; 0 до завершения и при ошибке."""
        outcome = self._outcome
        if outcome is not None:
            return outcome.response.status if outcome.ok else 0
        return self._transport.status

    @property
    def status_text(self) -> str:
        return self._transport.status_text

    @property
    def response(self) -> Any:
        """Тело ответа в формате response_type; None до "load"."""
        return self._transport.response

    @property
    def response_text(self) -> str:
        return self._transport.response_text

    @property
    def response_url(self) -> str:
        return self._transport.response_url

    # ==================== Настройка ====================

    def set_request_header(self, name: str, value: str) -> None:
        """Устанавливает заголовок запроса (последнее значение побеждает)."""
        self._transport.set_request_header(name, value)

    def override_mime_type(self, mime_type: str) -> None:
        """Переопределяет MIME тип ответа (влияет на кодировку и разбор тела)."""
        self._transport.override_mime_type(mime_type)

    def add_event_listener(self, event_type: str, listener: Callable[[str], None]) -> None:
        """
        Дополнительный обработчик события транспорта.

        Вызывается в потоке транспорта. Доступные события:
        loadstart, load, error, timeout, abort, loadend.
        """
        self._transport.add_event_listener(event_type, listener)

    def remove_event_listener(self, event_type: str, listener: Callable[[str], None]) -> bool:
        return self._transport.remove_event_listener(event_type, listener)

    # ==================== Ответ ====================

    def response_headers(self) -> str:
        """Все заголовки ответа одной строкой."""
        return self._transport.get_all_response_headers()

    def response_header(self, name: str) -> str:
        """Значение заголовка ответа; пустая строка, если его нет."""
        value = self._transport.get_response_header(name)
        return value if value is not None else ""

    def response_bytes(self) -> bytes:
        """Тело ответа как bytes."""
        body = self._transport.response
        if isinstance(body, bytes):
            return body
        return self._transport.response_text.encode("utf-8")

    def is_status_2xx(self) -> bool:
        """True для 200..299. До завершения статус 0, поэтому False."""
        return is_2xx(self.status)

    def is_status_4xx(self) -> bool:
        """True для 400..499."""
        return is_4xx(self.status)

    def is_status_5xx(self) -> bool:
        """True для 500..599."""
        return is_5xx(self.status)

    # ==================== Отправка ====================

    def send(self, data: Any = None, ctx: Optional[CancelContext] = None) -> Outcome:
        """
        Отправить запрос и дождаться результата.

        Блокирует вызывающий поток до первого из: "load", "error",
        "timeout" транспорта или завершения ctx. Если первым завершился
        контекст, транспорт прерывается через abort().

        Только ошибки сетевого уровня считаются ошибками. HTTP 4xx/5xx
        возвращаются как успешный Outcome.

        Args:
            data: Тело запроса: str (отправляется как UTF-8 байты), bytes,
                  Params или file-like объект
            ctx: CancelContext с дедлайном и/или отменой (None - без них)

        Returns:
            Outcome с response или с одной из ошибок: NetworkFailure,
            TimeoutError / DeadlineExceeded, Cancelled

        Raises:
            RequestAlreadySentError: send() уже вызывался на этом Request
            TypeError: Неподдерживаемый тип data
        """
        wiring = self._arm(data, ctx)
        try:
            signal = wiring.slot.wait()
        finally:
            self._disarm(wiring)
        return self._complete(signal)

    async def send_async(self, data: Any = None, ctx: Optional[CancelContext] = None) -> Outcome:
        """
        Асинхронный вариант send() для asyncio.

        Событийный loop не блокируется: сигнал из потока транспорта
        передаётся в loop через call_soon_threadsafe. Отмена задачи,
        ожидающей send_async(), отменяет запрос (с abort транспорта) и
        пробрасывает CancelledError.

        Example:
            >>> outcome = await Request("GET", url).send_async(ctx=ctx)
        """
        loop = asyncio.get_running_loop()
        future: "asyncio.Future[Signal]" = loop.create_future()

        def resolve(signal: Signal) -> None:
            if not future.done():
                future.set_result(signal)

        def deliver(signal: Signal) -> None:
            if not loop.is_closed():
                loop.call_soon_threadsafe(resolve, signal)

        wiring = self._arm(data, ctx)
        wiring.slot.add_callback(deliver)
        try:
            signal = await future
        except asyncio.CancelledError:
            wiring.slot.offer(Signal.CANCELLED)
            self._complete(wiring.slot.wait())
            raise
        finally:
            self._disarm(wiring)
        return self._complete(signal)

    def _arm(self, data: Any, ctx: Optional[CancelContext]) -> _Wiring:
        """IDLE -> PENDING: подписаться на все источники и запустить транспорт."""
        payload = encode_body(data)

        with self._state_lock:
            if self._state is not RequestState.IDLE:
                raise RequestAlreadySentError(self._method, self._url)
            self._state = RequestState.PENDING

        ctx = ctx if ctx is not None else CancelContext.background()
        slot: CompletionSlot[Signal] = CompletionSlot()

        self._timeout_ms = self._transport.timeout_ms
        remaining = ctx.time_remaining()
        if remaining is not None:
            deadline_ms = int(remaining * 1000)
            if deadline_ms > 0 and (not self._timeout_ms or deadline_ms < self._timeout_ms):
                self._transport.set_timeout(deadline_ms)
                self._timeout_ms = deadline_ms
                self._deadline_from_context = True

        def on_event(event_type: str) -> None:
            slot.offer(Signal(event_type))

        def on_done(done_ctx: CancelContext) -> None:
            slot.offer(signal_from_context(done_ctx.error))

        for event_type in TERMINAL_EVENTS:
            self._transport.add_event_listener(event_type, on_event)
        ctx.add_done_callback(on_done)
        wiring = _Wiring(slot=slot, ctx=ctx, on_event=on_event, on_done=on_done)

        set_request_id(self._request_id)
        try:
            if not slot.delivered:
                self._transport.send(payload)
            if self._logger:
                self._logger.debug(
                    "Request sent",
                    request_id=self._request_id,
                    method=self._method,
                    url=self._url,
                    timeout_ms=self._timeout_ms,
                    deadline_from_context=self._deadline_from_context,
                )
        except BaseException:
            self._disarm(wiring)
            with self._state_lock:
                self._state = RequestState.FAILED
            raise
        finally:
            clear_request_id()

        return wiring

    def _disarm(self, wiring: _Wiring) -> None:
        """Снять подписки; поздние события больше никуда не попадут."""
        for event_type in TERMINAL_EVENTS:
            self._transport.remove_event_listener(event_type, wiring.on_event)
        wiring.ctx.remove_done_callback(wiring.on_done)

    def _complete(self, signal: Signal) -> Outcome:
        """PENDING -> терминальное состояние. Вызывается ровно один раз."""
        if signal in (Signal.CANCELLED, Signal.DEADLINE_EXCEEDED):
            self._transport.abort()

        error = classify(signal, self._url, self._deadline_from_context, self._timeout_ms or None)
        if error is None:
            outcome = Outcome(response=self._snapshot())
        else:
            outcome = Outcome(error=error)

        with self._state_lock:
            self._state = terminal_state(signal)
            self._outcome = outcome

        if self._logger:
            self._logger.info(
                "Request completed",
                request_id=self._request_id,
                method=self._method,
                url=self._url,
                state=self._state.value,
                status=self.status if error is None else None,
                error=type(error).__name__ if error else None,
            )
        return outcome

    def _snapshot(self) -> ResponseSnapshot:
        transport = self._transport
        return ResponseSnapshot(
            status=transport.status,
            status_text=transport.status_text,
            headers=transport.get_all_response_headers(),
            body=transport.response,
            response_type=transport.response_type,
            url=transport.response_url,
        )

    def __repr__(self) -> str:
        return f"<Request {self._method} {self._url} [{self._state.value}]>"

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HELPER
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def fetch(
    method: str,
    url: str,
    data: Any = None,
    ctx: Optional[CancelContext] = None,
    config: Optional[RequestConfig] = None,
) -> bytes:
    """
    Создать Request, отправить и вернуть тело ответа как bytes.

    В отличие от Request.send() ошибки выбрасываются. HTTP 4xx/5xx
    ошибками не считаются; для проверки статуса используйте Request.

    Raises:
        NetworkFailure, TimeoutError, DeadlineExceeded, Cancelled

    Example:
        >>> data = fetch("POST", "https://api.example.com/echo", b"payload")
    """
    request = Request(method, url, config=config)
    request.response_type = ResponseType.ARRAY_BUFFER
    return request.send(data, ctx=ctx).raise_for_error().body
