"""
Structured logging for http-oneshot.

Example:
    >>> from http_oneshot import Request, RequestConfig
    >>> from http_oneshot.core.logging import LoggingConfig
    >>>
    >>> config = RequestConfig.create(logging=LoggingConfig.create(level="DEBUG", format="json"))
    >>> Request("GET", "https://api.example.com", config=config).send()
"""

from .config import LoggingConfig, LogLevel, LogFormat
from .logger import OneshotLogger, get_logger, configure_logging
from .formatters import JSONFormatter, TextFormatter, ColoredFormatter, get_formatter
from .filters import (
    RequestIdFilter,
    ExtraFieldsFilter,
    set_request_id,
    get_request_id,
    clear_request_id,
)
from .handlers import create_console_handler, create_file_handler

__all__ = [
    # Config
    "LoggingConfig",
    "LogLevel",
    "LogFormat",
    # Logger
    "OneshotLogger",
    "get_logger",
    "configure_logging",
    # Formatters
    "JSONFormatter",
    "TextFormatter",
    "ColoredFormatter",
    "get_formatter",
    # Filters
    "RequestIdFilter",
    "ExtraFieldsFilter",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
    # Handlers
    "create_console_handler",
    "create_file_handler",
]
