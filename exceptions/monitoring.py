"""
Monitoring Exception Classes for URL Keep-Alive

Per-target ping failures. These are raised and handled inside the
ping executor only; a failed ping never propagates past a tick.
"""

from __future__ import annotations

from typing import Any, Optional

from exceptions.base import KeepAliveException


class PingFailure(KeepAliveException):
    """
    Base Ping Failure

    A single HTTP GET against a target did not produce an OK response.
    """

    default_error_code = 4000
    default_recoverable = True

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.url = url

        if url:
            self.details["url"] = url


class PingTimeoutError(PingFailure):
    """The target did not answer within the request timeout."""

    default_error_code = 4001

    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(f"Request to {url} timed out", url=url, **kwargs)

        if timeout is not None:
            self.details["timeout"] = timeout


class PingConnectionError(PingFailure):
    """The request failed at the transport level (DNS, refused, TLS, ...)."""

    default_error_code = 4002


class PingHTTPStatusError(PingFailure):
    """The target answered with a status outside 2xx/3xx."""

    default_error_code = 4003

    def __init__(
        self,
        url: str,
        status_code: int,
        **kwargs: Any
    ) -> None:
        super().__init__(f"{url} answered HTTP {status_code}", url=url, **kwargs)
        self.status_code = status_code
        self.details["status_code"] = status_code
