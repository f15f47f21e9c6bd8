"""
Base Exception Classes for URL Keep-Alive

Every error the service raises on purpose derives from KeepAliveException,
so callers can tell expected failures apart from bugs.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class KeepAliveException(Exception):
    """
    Root of the service's exception hierarchy.

    Attributes:
        message: Human-readable description
        error_code: Numeric code; the thousands digit names the layer
            (1 startup, 2 store, 3 input, 4 ping)
        details: Structured context for logs
        cause: Underlying exception, if this one wraps another
        recoverable: False when the process cannot continue
    """

    default_error_code: int = 1000
    default_recoverable: bool = True

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = dict(details) if details else {}
        self.cause = cause
        self.recoverable = self.default_recoverable if recoverable is None else recoverable
        self.timestamp = datetime.now(timezone.utc)

    @property
    def full_message(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form, used for structured logging."""
        return {
            "type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
            "cause": repr(self.cause) if self.cause else None,
            "timestamp": self.timestamp.isoformat(),
        }

    def log_format(self) -> str:
        """Single-line rendering for log records."""
        line = f"{type(self).__name__}[{self.error_code}] {self.message}"
        if self.details:
            line += f" | details={self.details}"
        if self.cause:
            line += f" | cause={self.cause!r}"
        return line

    def user_message(self) -> str:
        """
        Text safe to show an API client.

        Subclasses override this when ``message`` may carry internals
        such as connection strings.
        """
        return self.message

    @classmethod
    def from_exception(
        cls,
        exception: BaseException,
        message: Optional[str] = None,
        **kwargs: Any
    ) -> "KeepAliveException":
        """Wrap a foreign exception, keeping it as ``cause``."""
        return cls(message or str(exception), cause=exception, **kwargs)

    def __str__(self) -> str:
        return self.full_message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, error_code={self.error_code})"


class ConfigurationError(KeepAliveException):
    """Settings could not be loaded or failed validation."""

    default_error_code = 1100
    default_recoverable = False


class InitializationError(KeepAliveException):
    """A component failed during startup."""

    default_error_code = 1200
    default_recoverable = False

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.component = component

        if component:
            self.details["component"] = component
