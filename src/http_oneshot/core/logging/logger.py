"""
Structured logger for http-oneshot.
"""

import logging
import threading
from typing import Any, Dict, Optional, Tuple

from .config import LoggingConfig, LogLevel
from .filters import ExtraFieldsFilter, RequestIdFilter
from .formatters import get_formatter
from .handlers import create_console_handler, create_file_handler
from ...utils.sanitizer import mask_sensitive_data


class OneshotLogger:
    """
    Logger with keyword extra fields.

    Extra fields are passed through ``mask_sensitive_data`` so header
    values such as Authorization never reach the output.

    Example:
        >>> logger = OneshotLogger(LoggingConfig.create(level="DEBUG", format="json"))
        >>> logger.debug("Request sent", method="GET", url="https://api.com")
    """

    def __init__(self, config: Optional[LoggingConfig] = None, name: str = "http_oneshot.requests"):
        self.config = config or LoggingConfig()
        self.name = name
        self._closed = False

        level = self._get_level(self.config.level)
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False
        self._logger.handlers.clear()

        filters = []
        if self.config.enable_request_id:
            filters.append(RequestIdFilter())
        if self.config.extra_fields:
            filters.append(ExtraFieldsFilter(self.config.extra_fields))

        formatter = get_formatter(self.config.format.value)

        if self.config.enable_console:
            self._logger.addHandler(create_console_handler(level, formatter, filters))

        if self.config.enable_file and self.config.file_path:
            self._logger.addHandler(create_file_handler(
                file_path=self.config.file_path,
                level=level,
                formatter=formatter,
                max_bytes=self.config.max_bytes,
                backup_count=self.config.backup_count,
                filters=filters
            ))

    @staticmethod
    def _get_level(level: LogLevel) -> int:
        return getattr(logging, level.value)

    def is_enabled_for(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def _log(self, level: int, message: str, fields: Dict[str, Any], exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, message, extra=mask_sensitive_data(fields), exc_info=exc_info)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log at ERROR with the current traceback; call from an except block."""
        self._log(logging.ERROR, message, kwargs, exc_info=True)

    def close(self) -> None:
        """Flush and close all handlers. Idempotent."""
        if self._closed:
            return

        for handler in self._logger.handlers[:]:
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


# One logger per LoggingConfig instance. The config is stored next to the
# logger so that its id() cannot be reused while the entry exists.
_loggers: Dict[int, Tuple[LoggingConfig, OneshotLogger]] = {}
_loggers_lock = threading.Lock()


def get_logger(config: LoggingConfig) -> OneshotLogger:
    """
    Shared logger for ``config``.

    Requests created with the same config reuse one logger instead of
    rebuilding handlers for every request.
    """
    with _loggers_lock:
        entry = _loggers.get(id(config))
        if entry is None:
            entry = (config, OneshotLogger(config))
            _loggers[id(config)] = entry
        return entry[1]


def configure_logging(config: LoggingConfig) -> OneshotLogger:
    """
    Replace all shared loggers with one built from ``config``.

    Example:
        >>> logger = configure_logging(LoggingConfig.create(level="DEBUG"))
    """
    with _loggers_lock:
        for _, logger in _loggers.values():
            logger.close()
        _loggers.clear()
        logger = OneshotLogger(config)
        _loggers[id(config)] = (config, logger)
        return logger
