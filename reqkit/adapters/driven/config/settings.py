"""Configuration loading from environment variables and files."""

import json
import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator

from reqkit.core.compose import ParamBuilder
from reqkit.ports.params import Header, ParamNode, Timeout

__all__ = ["Settings", "load_settings", "request_params", "HTTP_METHODS"]

load_dotenv()

logger = logging.getLogger(__name__)
_http_url_adapter = TypeAdapter(HttpUrl)

HTTP_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


class Settings(BaseModel):
    """Runtime configuration for the watch service.

    Attributes:
        url: Endpoint polled on every period.
        method: HTTP method used for each run.
        period_in_sec: Interval between runs in seconds (must be positive).
        timeout_in_sec: Optional request and resource timeout.
        headers_file_path: Optional path to a JSON object of headers.
        headers: Headers sent with every run (loaded from file).
    """

    url: str = Field(..., description="HTTP endpoint that will be polled.")
    method: str = Field(default="GET", description="HTTP method used for each run.")
    period_in_sec: int = Field(..., gt=0, description="Interval between runs in seconds.")
    timeout_in_sec: float | None = Field(
        default=None,
        gt=0,
        description="Optional timeout applied to both the request and the resource.",
    )
    headers_file_path: str | None = Field(
        default=None,
        description="Optional path to JSON file containing a header object.",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers sent with every run (populated from file).",
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate that the endpoint is a valid HTTP(S) URL.

        Args:
            v: Endpoint URL to validate.

        Returns:
            The validated URL.

        Raises:
            ValueError: If URL is invalid or not http(s).
        """
        try:
            url = _http_url_adapter.validate_python(v)
            if url.scheme not in ("http", "https"):
                raise ValueError("Only http:// and https:// endpoints allowed")
        except Exception as e:
            raise ValueError(f"Invalid HTTP endpoint: {e}") from e
        return v

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        """Normalize and validate the HTTP method.

        Raises:
            ValueError: If the method is not a standard HTTP method.
        """
        method = v.strip().upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {v}")
        return method

    def load_headers(self) -> None:
        """Load and validate headers from JSON file, if configured.

        Raises:
            ValueError: If file not found, invalid JSON, or not an object of strings.
        """
        if self.headers_file_path is None:
            return

        try:
            with open(self.headers_file_path) as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ValueError(f"Headers file not found: {self.headers_file_path}") from e
        except json.JSONDecodeError as e:
            raise ValueError(f"Headers file contains invalid JSON: {self.headers_file_path}") from e

        if not isinstance(data, dict):
            raise ValueError("Headers file must be a JSON object")
        if not all(isinstance(v, str) for v in data.values()):
            raise ValueError("Each header value must be a string")

        self.headers = data
        logger.debug(f"Loaded {len(data)} headers from {self.headers_file_path}")


def load_settings() -> Settings:
    """Load and validate settings from environment and files.

    Required environment variables:
    - REQUEST_URL: Valid HTTP(S) URL to poll.
    - PERIOD_IN_SECONDS: Positive integer for poll interval.

    Optional:
    - REQUEST_METHOD: HTTP method (default GET).
    - REQUEST_TIMEOUT_SECONDS: Positive number of seconds.
    - HEADERS_FILE_PATH: Path to JSON object of headers.

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If required env vars missing or invalid.
        ValueError: If configuration is invalid.
    """
    try:
        url = os.environ["REQUEST_URL"]
        period_raw = os.environ["PERIOD_IN_SECONDS"]
    except KeyError as e:
        raise RuntimeError(f"Missing required environment variable: {e.args[0]}") from e

    method = os.getenv("REQUEST_METHOD", "GET")
    timeout_raw = os.getenv("REQUEST_TIMEOUT_SECONDS")
    headers_path = os.getenv("HEADERS_FILE_PATH")

    try:
        period_in_sec = int(period_raw)
        if period_in_sec <= 0:
            raise ValueError("Must be positive")
    except ValueError as e:
        raise RuntimeError(
            f"PERIOD_IN_SECONDS must be a positive integer (got: {period_raw})"
        ) from e

    timeout_in_sec: float | None = None
    if timeout_raw:
        try:
            timeout_in_sec = float(timeout_raw)
            if timeout_in_sec <= 0:
                raise ValueError("Must be positive")
        except ValueError as e:
            raise RuntimeError(
                f"REQUEST_TIMEOUT_SECONDS must be a positive number (got: {timeout_raw})"
            ) from e

    settings = Settings(
        url=url,
        method=method,
        period_in_sec=period_in_sec,
        timeout_in_sec=timeout_in_sec,
        headers_file_path=headers_path,
    )

    # Load and validate headers file
    settings.load_headers()

    logger.info(
        f"Watch configured: {settings.method} {settings.url}, "
        f"period={settings.period_in_sec}s, "
        f"timeout={settings.timeout_in_sec or '<default>'}, "
        f"headers={len(settings.headers)}"
    )

    return settings


def request_params(settings: Settings) -> ParamNode:
    """Parameters shared by every request made from these settings."""
    return (
        ParamBuilder()
        .add(*(Header(key, value) for key, value in settings.headers.items()))
        .add_if(settings.timeout_in_sec is not None, Timeout(settings.timeout_in_sec or 0))
        .build()
    )
