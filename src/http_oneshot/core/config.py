"""
Система конфигурации http-oneshot.

Все конфиги immutable (frozen dataclasses), один конфиг можно
разделять между потоками и запросами.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .logging import LoggingConfig

TRANSPORTS = ("requests", "httpx")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# TIMEOUT CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class TimeoutConfig:
    """
    Конфигурация таймаутов транспорта.

    Args:
        connect: Таймаут подключения (сек)
        request: Таймаут всего запроса по часам (сек). None или 0 - без
                 таймаута; дедлайн CancelContext имеет приоритет.

    Examples:
        >>> TimeoutConfig(connect=5)
        >>> TimeoutConfig(connect=3, request=30)
    """
    connect: float = 10.0
    request: Optional[float] = None

    def __post_init__(self):
        """Валидация."""
        if self.connect <= 0:
            raise ValueError("connect timeout must be positive")
        if self.request is not None and self.request < 0:
            raise ValueError("request timeout must be non-negative")

    @property
    def request_ms(self) -> int:
        """Таймаут запроса в миллисекундах (0 - без таймаута)."""
        if not self.request:
            return 0
        return int(self.request * 1000)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SECURITY CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class SecurityConfig:
    """
    Конфигурация безопасности.

    Args:
        verify_ssl: Проверять SSL сертификаты
        allow_redirects: Разрешать редиректы
        max_redirects: Максимум редиректов
        max_response_size: Максимальный размер тела ответа (байты); превышение
                           завершает запрос событием "error"

    Examples:
        >>> SecurityConfig(verify_ssl=False)  # Для тестов
        >>> SecurityConfig(max_response_size=10 * 1024 * 1024)
    """
    verify_ssl: bool = True
    allow_redirects: bool = True
    max_redirects: int = 20
    max_response_size: int = 100 * 1024 * 1024  # 100MB

    def __post_init__(self):
        """Валидация."""
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")
        if self.max_response_size <= 0:
            raise ValueError("max_response_size must be positive")

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MAIN CONFIG
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@dataclass(frozen=True)
class RequestConfig:
    """
    Главная конфигурация запроса.

    Args:
        transport: Какой транспорт создавать ("requests" или "httpx")
        headers: Заголовки, выставляемые каждому запросу до пользовательских
        timeout: Конфигурация таймаутов
        security: Конфигурация безопасности
        chunk_size: Размер порции чтения тела (байты); между порциями
                    транспорт проверяет abort
        logging: Конфигурация логирования (None = только logging.getLogger)

    Examples:
        >>> config = RequestConfig()
        >>> config = RequestConfig.create(transport="httpx", timeout=30)
    """
    transport: str = "requests"
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    chunk_size: int = 64 * 1024
    logging: Optional['LoggingConfig'] = None

    def __post_init__(self):
        """Валидация и заморозка заголовков."""
        if self.transport not in TRANSPORTS:
            raise ValueError(
                f"Unknown transport: {self.transport}. Available: {', '.join(TRANSPORTS)}"
            )
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if isinstance(self.headers, dict):
            object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

    @classmethod
    def create(
        cls,
        transport: str = "requests",
        timeout: Optional[float] = None,
        connect_timeout: float = 10.0,
        verify_ssl: bool = True,
        allow_redirects: bool = True,
        headers: Optional[Dict[str, str]] = None,
        max_response_size: Optional[int] = None,
        logging: Optional['LoggingConfig'] = None,
        **kwargs
    ) -> 'RequestConfig':
        """
        Удобный конструктор конфигурации.

        Args:
            transport: "requests" или "httpx"
            timeout: Таймаут всего запроса (сек), None - без таймаута
            connect_timeout: Таймаут подключения (сек)
            verify_ssl: Проверять SSL
            allow_redirects: Разрешать редиректы
            headers: Заголовки по умолчанию
            max_response_size: Лимит размера ответа (байты)
            logging: Конфигурация логирования

        Returns:
            RequestConfig instance

        Examples:
            >>> config = RequestConfig.create(timeout=30)
            >>> config = RequestConfig.create(transport="httpx", verify_ssl=False)
        """
        security_kwargs = {'verify_ssl': verify_ssl, 'allow_redirects': allow_redirects}
        if max_response_size is not None:
            security_kwargs['max_response_size'] = max_response_size

        return cls(
            transport=transport,
            headers=headers or {},
            timeout=TimeoutConfig(connect=connect_timeout, request=timeout),
            security=SecurityConfig(**security_kwargs),
            logging=logging,
            **kwargs
        )

    def with_timeout(self, timeout: Optional[float]) -> 'RequestConfig':
        """
        Создать новый конфиг с изменённым таймаутом запроса.

        Example:
            >>> new_config = config.with_timeout(60)
        """
        return replace(self, timeout=TimeoutConfig(connect=self.timeout.connect, request=timeout))

    def with_headers(self, headers: Dict[str, str]) -> 'RequestConfig':
        """
        Создать новый конфиг с дополнительными заголовками.

        Example:
            >>> new_config = config.with_headers({"X-API-Key": "secret"})
        """
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)

    def with_transport(self, transport: str) -> 'RequestConfig':
        """Создать новый конфиг с другим транспортом."""
        return replace(self, transport=transport)
