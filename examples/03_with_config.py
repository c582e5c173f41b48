"""
Configuration Examples

RequestConfig, transports and structured logging.
"""

from http_oneshot import Request, RequestConfig, load_from_env
from http_oneshot.core.logging import LoggingConfig


def httpx_transport():
    """Use httpx instead of requests."""
    print("\n=== httpx Transport ===")

    config = RequestConfig.create(
        transport="httpx",
        timeout=15,
        headers={"User-Agent": "oneshot-example/1.0"},
    )
    outcome = Request("GET", "https://httpbin.org/user-agent", config=config).send()
    print(outcome.response.body if outcome.ok else outcome.error)


def json_logging():
    """Structured JSON logs with request ids."""
    print("\n=== JSON Logging ===")

    config = RequestConfig.create(
        logging=LoggingConfig.create(level="DEBUG", format="json"),
    )
    Request("GET", "https://httpbin.org/get?api_key=hidden-in-logs", config=config).send()


def from_environment():
    """
    Load settings from ONESHOT_* variables or a .env file.

        ONESHOT_TRANSPORT=httpx
        ONESHOT_TIMEOUT_REQUEST=30
        ONESHOT_LOG_LEVEL=INFO
    """
    print("\n=== Environment Config ===")

    config = load_from_env()
    print(f"Transport: {config.transport}, timeout: {config.timeout.request}")


if __name__ == "__main__":
    httpx_transport()
    json_logging()
    from_environment()
