"""Core enumerations shared by the runtime and client layers.

Key Types:
    - LinkRel: Pagination relations understood in ``Link`` headers
    - LogLevel: Verbosity accepted in configuration
    - HTTPMethod: Request methods the transport can issue
"""

import logging
from enum import Enum


class LinkRel(str, Enum):
    """Pagination relations recognised in a ``Link`` header.

    Any other relation (Canvas also sends ``current``) is ignored.
    """

    NEXT = "next"
    PREV = "prev"
    FIRST = "first"
    LAST = "last"

    @classmethod
    def values(cls) -> frozenset[str]:
        return frozenset(member.value for member in cls)


class LogLevel(str, Enum):
    """Log verbosity, ordered from most to least chatty."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @classmethod
    def parse(cls, value: "str | LogLevel") -> "LogLevel":
        """Parse a level name case-insensitively, accepting ``warning`` as ``warn``."""
        if isinstance(value, LogLevel):
            return value
        normalized = str(value).strip().lower()
        if normalized == "warning":
            normalized = "warn"
        return cls(normalized)

    def to_logging(self) -> int:
        """Map to the stdlib ``logging`` level number."""
        return _LOGGING_LEVELS[self]

    def allows(self, event_level: "LogLevel") -> bool:
        """Return True when an event at ``event_level`` should be emitted."""
        return event_level.to_logging() >= self.to_logging()


_LOGGING_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def paginates(self) -> bool:
        """Only GET requests follow ``Link`` pagination."""
        return self is HTTPMethod.GET
