"""Core http-oneshot модули."""

from .config import TimeoutConfig, SecurityConfig, RequestConfig
from .constants import (
    ReadyState,
    ResponseType,
    RequestState,
    APPLICATION_FORM,
    APPLICATION_JSON,
    TEXT_PLAIN,
    multipart_form_data,
)
from .exceptions import (
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
from .completion import CompletionSlot
from .context import CancelContext, ContextError
from .classifier import Signal, classify, is_2xx, is_4xx, is_5xx
from .params import Params
from .request import Request, Outcome, ResponseSnapshot, fetch
from .env_config import OneshotSettings, load_from_env

__all__ = [
    # Config
    "TimeoutConfig",
    "SecurityConfig",
    "RequestConfig",
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
    # Core
    "Request",
    "Outcome",
    "ResponseSnapshot",
    "fetch",
    "CompletionSlot",
    "CancelContext",
    "ContextError",
    "Signal",
    "classify",
    "is_2xx",
    "is_4xx",
    "is_5xx",
    "Params",
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
