"""
Exceptions Package for URL Keep-Alive

Error codes: 1xxx startup, 2xxx target store, 3xxx command input,
4xxx pings.
"""

from exceptions.base import (
    KeepAliveException,
    ConfigurationError,
    InitializationError,
)

from exceptions.database import (
    DatabaseException,
    StoreUnavailableError,
    DatabaseQueryError,
    TargetNotFoundError,
    CounterConflictError,
)

from exceptions.validation import (
    ValidationException,
    InvalidURLError,
    MissingFieldError,
)

from exceptions.monitoring import (
    PingFailure,
    PingTimeoutError,
    PingConnectionError,
    PingHTTPStatusError,
)

__all__ = [
    # Base exceptions
    "KeepAliveException",
    "ConfigurationError",
    "InitializationError",

    # Database exceptions
    "DatabaseException",
    "StoreUnavailableError",
    "DatabaseQueryError",
    "TargetNotFoundError",
    "CounterConflictError",

    # Validation exceptions
    "ValidationException",
    "InvalidURLError",
    "MissingFieldError",

    # Monitoring exceptions
    "PingFailure",
    "PingTimeoutError",
    "PingConnectionError",
    "PingHTTPStatusError",
]
