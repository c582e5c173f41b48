"""
Configuration loader from environment variables and .env files.

Example .env file:
    ONESHOT_TRANSPORT=httpx
    ONESHOT_TIMEOUT_CONNECT=5
    ONESHOT_TIMEOUT_REQUEST=30
    ONESHOT_VERIFY_SSL=true
    ONESHOT_LOG_LEVEL=DEBUG
    ONESHOT_LOG_FORMAT=json
"""

import os
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import RequestConfig, SecurityConfig, TimeoutConfig
from .logging.config import LoggingConfig


class OneshotSettings(BaseSettings):
    """
    Request configuration from environment variables.

    Reads from:
    1. Environment variables (ONESHOT_*)
    2. .env file
    3. Defaults

    Usage:
        >>> settings = OneshotSettings()
        >>> settings.transport
        'requests'
    """

    model_config = SettingsConfigDict(
        env_prefix='ONESHOT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    transport: Literal["requests", "httpx"] = Field(default="requests")

    timeout_connect: float = Field(default=10.0, gt=0)
    timeout_request: Optional[float] = Field(default=None, ge=0)

    verify_ssl: bool = Field(default=True)
    allow_redirects: bool = Field(default=True)
    max_redirects: int = Field(default=20, ge=0)
    max_response_size: int = Field(default=100 * 1024 * 1024, gt=0)
    chunk_size: int = Field(default=64 * 1024, gt=0)

    # Logging (disabled unless log_level is set)
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    log_format: Literal["json", "text", "colored"] = Field(default="text")
    log_enable_console: bool = Field(default=True)
    log_file_path: Optional[str] = None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_level(cls, v: Optional[str]) -> Optional[str]:
        """Accept lower-case level names."""
        if isinstance(v, str):
            return v.upper() or None
        return v

    def to_logging_config(self) -> Optional[LoggingConfig]:
        """LoggingConfig if logging is enabled, else None."""
        if self.log_level is None:
            return None
        return LoggingConfig.create(
            level=self.log_level,
            format=self.log_format,
            enable_console=self.log_enable_console,
            enable_file=self.log_file_path is not None,
            file_path=self.log_file_path,
        )


def load_from_env(env_file: Optional[str] = None, **overrides) -> RequestConfig:
    """
    Load RequestConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit parameters
    2. Environment variables (ONESHOT_*)
    3. .env file (``env_file`` or $ONESHOT_ENV_FILE or ".env")
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: Settings field overrides (e.g. transport="httpx")

    Returns:
        RequestConfig instance

    Example:
        >>> config = load_from_env()
        >>> config = load_from_env(env_file=".env.production", timeout_request=5)
    """
    if env_file is None:
        env_file = os.getenv("ONESHOT_ENV_FILE", ".env")

    settings = OneshotSettings(_env_file=env_file, **overrides)

    return RequestConfig(
        transport=settings.transport,
        timeout=TimeoutConfig(
            connect=settings.timeout_connect,
            request=settings.timeout_request,
        ),
        security=SecurityConfig(
            verify_ssl=settings.verify_ssl,
            allow_redirects=settings.allow_redirects,
            max_redirects=settings.max_redirects,
            max_response_size=settings.max_response_size,
        ),
        chunk_size=settings.chunk_size,
        logging=settings.to_logging_config(),
    )
