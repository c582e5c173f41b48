"""http-oneshot - single-shot HTTP requests with cancellation and deadlines."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .core.request import Request, Outcome, ResponseSnapshot, fetch
from .core.context import CancelContext, ContextError
from .core.params import Params
from .core.config import RequestConfig, TimeoutConfig, SecurityConfig
from .core.env_config import OneshotSettings, load_from_env
from .core.constants import (
    ReadyState,
    ResponseType,
    RequestState,
    APPLICATION_FORM,
    APPLICATION_JSON,
    TEXT_PLAIN,
    multipart_form_data,
)
from .core.exceptions import (
    HTTPOneshotException,
    SendError,
    NetworkFailure,
    TimeoutError,
    DeadlineExceeded,
    Cancelled,
    RequestAlreadySentError,
    InvalidStateError,
    ConfigurationError,
)
from .transports import Transport, RequestsTransport, HttpxTransport, Blob, create_transport

# Users can configure logging themselves using logging.getLogger('http_oneshot')
logging.getLogger('http_oneshot').addHandler(logging.NullHandler())

# Version info - read from package metadata (single source of truth in pyproject.toml)
try:
    __version__ = version("http-oneshot")
except PackageNotFoundError:
    # Package is not installed (development mode)
    __version__ = "0.0.0-dev"

__license__ = "MIT"

__all__ = [
    # Core
    "Request",
    "Outcome",
    "ResponseSnapshot",
    "fetch",
    "CancelContext",
    "ContextError",
    "Params",

    # Config
    "RequestConfig",
    "TimeoutConfig",
    "SecurityConfig",
    "OneshotSettings",
    "load_from_env",

    # Constants
    "ReadyState",
    "ResponseType",
    "RequestState",
    "APPLICATION_FORM",
    "APPLICATION_JSON",
    "TEXT_PLAIN",
    "multipart_form_data",

    # Transports
    "Transport",
    "RequestsTransport",
    "HttpxTransport",
    "Blob",
    "create_transport",

    # Exceptions
    "HTTPOneshotException",
    "SendError",
    "NetworkFailure",
    "TimeoutError",
    "DeadlineExceeded",
    "Cancelled",
    "RequestAlreadySentError",
    "InvalidStateError",
    "ConfigurationError",
]
