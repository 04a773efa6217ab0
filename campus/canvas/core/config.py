"""Configuration for the Canvas runtime.

Architecture:
    Two layers:
    - CanvasSettings: process-wide values read once from the environment
      (and an optional ``.env`` file) via pydantic-settings.
    - RequestConfig: an immutable snapshot handed to every request. The
      runtime never mutates it, so concurrent traversals can share one.

Defaults mirror the student-groups backend: 30s request timeout, 100ms
between pages, no page cap and no retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from pydantic import AliasChoices, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .enums import LogLevel
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
USER_AGENT = "campus-canvas/0.1.0"
DEFAULT_API_URL = "https://canvas.instructure.com/api/v1"


@dataclass(frozen=True)
class RequestConfig:
    """Read-only values for one logical (possibly multi-page) request.

    Attributes:
        host: Canvas hostname, e.g. ``school.instructure.com``
        timeout_ms: Per-page request timeout in milliseconds
        log_level: Verbosity for request/page events
        page_delay_ms: Pause inserted between consecutive page requests
        max_pages: Hard cap on pages per traversal (None = unbounded)
        max_retries: Extra attempts for timeouts/connection errors per page
        retry_backoff_ms: Base delay for exponential retry backoff
        user_agent: Value of the ``User-Agent`` header
        scheme: URL scheme used to reach ``host``
        api_prefix: Fixed API-version prefix prepended to resource paths
    """

    host: str
    timeout_ms: int = 30000
    log_level: LogLevel = LogLevel.INFO
    page_delay_ms: int = 100
    max_pages: int | None = None
    max_retries: int = 0
    retry_backoff_ms: int = 250
    user_agent: str = USER_AGENT
    scheme: str = "https"
    api_prefix: str = field(default=API_PREFIX)

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigurationError("host must not be empty")
        if self.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive")
        if self.page_delay_ms < 0:
            raise ConfigurationError("page_delay_ms cannot be negative")
        if self.max_pages is not None and self.max_pages < 1:
            raise ConfigurationError("max_pages must be at least 1")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries cannot be negative")
        try:
            log_level = LogLevel.parse(self.log_level)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        object.__setattr__(self, "log_level", log_level)

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def page_delay_seconds(self) -> float:
        return self.page_delay_ms / 1000.0

    def api_url(self, path: str) -> str:
        """Compose the absolute URL for a resource path under the API root."""
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{self.api_prefix}{path}"


class CanvasSettings(BaseSettings):
    """Process settings loaded from environment variables.

    Environment variables (case-insensitive):
        CANVAS_API_URL, CANVAS_ACCESS_TOKEN, LOG_LEVEL, REQUEST_TIMEOUT,
        MAX_CONCURRENT_REQUESTS, ENVIRONMENT (or NODE_ENV), PAGE_DELAY_MS,
        MAX_PAGES, MAX_RETRIES, RETRY_BACKOFF_MS
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    canvas_api_url: str = DEFAULT_API_URL
    canvas_access_token: SecretStr
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    log_level: LogLevel = LogLevel.INFO
    request_timeout: int = Field(default=30000, gt=0)
    max_concurrent_requests: int = Field(default=10, ge=1)
    page_delay_ms: int = Field(default=100, ge=0)
    max_pages: int | None = Field(default=None, ge=1)
    max_retries: int = Field(default=0, ge=0)
    retry_backoff_ms: int = Field(default=250, ge=0)

    @field_validator("canvas_api_url")
    @classmethod
    def _validate_api_url(cls, v: str) -> str:
        parts = urlsplit((v or "").strip())
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValueError(f"Invalid CANVAS_API_URL: {v!r}")
        return v.strip()

    @field_validator("canvas_access_token")
    @classmethod
    def _validate_token(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError("CANVAS_ACCESS_TOKEN must not be empty")
        return v

    @field_validator("max_pages", mode="before")
    @classmethod
    def _blank_max_pages(cls, v: Any) -> Any:
        # MAX_PAGES= means unbounded
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, v: Any) -> LogLevel:
        return LogLevel.parse(v)

    @classmethod
    def load(cls, **overrides: Any) -> CanvasSettings:
        """Load settings, turning validation failures into ``ConfigurationError``."""
        try:
            settings = cls(**overrides)
        except ValidationError as exc:
            missing = [
                ".".join(str(p) for p in err["loc"]).upper()
                for err in exc.errors()
                if err["type"] == "missing"
            ]
            if missing:
                raise ConfigurationError(
                    "Missing required environment variables: " + ", ".join(missing)
                ) from exc
            raise ConfigurationError("Invalid Canvas configuration", details=str(exc)) from exc
        logger.info("canvas_settings_loaded", extra=settings.describe())
        return settings

    @property
    def canvas_host(self) -> str:
        return urlsplit(self.canvas_api_url).hostname or ""

    @property
    def canvas_scheme(self) -> str:
        return urlsplit(self.canvas_api_url).scheme

    @property
    def access_token(self) -> str:
        return self.canvas_access_token.get_secret_value()

    def request_config(self) -> RequestConfig:
        """Snapshot the per-request values."""
        return RequestConfig(
            host=self.canvas_host,
            scheme=self.canvas_scheme,
            timeout_ms=self.request_timeout,
            log_level=self.log_level,
            page_delay_ms=self.page_delay_ms,
            max_pages=self.max_pages,
            max_retries=self.max_retries,
            retry_backoff_ms=self.retry_backoff_ms,
        )

    def describe(self) -> dict[str, Any]:
        """Redacted configuration summary, safe to log or return to callers."""
        token = self.access_token
        return {
            "environment": self.environment,
            "canvas_api_url": self.canvas_api_url,
            "canvas_host": self.canvas_host,
            "canvas_access_token": f"***{token[-4:]}" if token else "NOT SET",
            "log_level": self.log_level.value,
            "request_timeout_ms": self.request_timeout,
            "max_concurrent_requests": self.max_concurrent_requests,
            "page_delay_ms": self.page_delay_ms,
            "max_pages": self.max_pages,
            "max_retries": self.max_retries,
        }
