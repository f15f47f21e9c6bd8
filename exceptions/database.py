"""
Database Exception Classes for URL Keep-Alive

Target-store failures. DatabaseManager.session() translates SQLAlchemy
errors into these; the registry raises TargetNotFoundError itself.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from exceptions.base import KeepAliveException


class DatabaseException(KeepAliveException):
    """
    Parent of every store error. The API maps it to 503, except for
    TargetNotFoundError which becomes 404.
    """

    default_error_code = 2000
    default_recoverable = False

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        table: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if query:
            self.details["query"] = self._redact_query(query)
        if table:
            self.details["table"] = table

    @staticmethod
    def _redact_query(query: str) -> str:
        """Replace literals so URLs and numbers never reach the logs."""
        query = re.sub(r"'[^']*'", "'***'", query)
        query = re.sub(r"= \d+", "= ***", query)
        return query if len(query) <= 500 else query[:500] + "..."


class StoreUnavailableError(DatabaseException):
    """The store could not be reached. Aborts one command or tick."""

    default_error_code = 2001
    default_recoverable = True

    def __init__(
        self,
        message: str = "Unable to connect to the target store",
        database: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)

        if database:
            self.details["database"] = database

    def user_message(self) -> str:
        return "The target store is unavailable. Please try again later."


class DatabaseQueryError(DatabaseException):
    default_error_code = 2002
    default_recoverable = True

    def user_message(self) -> str:
        return "An error occurred while processing your request."


class TargetNotFoundError(DatabaseException):
    """A command or tick referenced a URL that has no row."""

    default_error_code = 2003
    default_recoverable = True

    def __init__(
        self,
        url: str,
        message: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message or f"URL {url} not found", table="targets", **kwargs)
        self.url = url
        self.details["url"] = url

    def user_message(self) -> str:
        return f"URL {self.url} not found"


class CounterConflictError(KeepAliveException):
    """
    A success increment was refused because ``request_count`` already
    equals ``total_requests``. Nothing was written.
    """

    default_error_code = 2004
    default_recoverable = True

    def __init__(
        self,
        url: str,
        request_count: int,
        total_requests: int,
        **kwargs: Any
    ) -> None:
        super().__init__(
            f"Counter for URL {url} not incremented: "
            f"{request_count} successes already match {total_requests} attempts",
            **kwargs
        )
        self.url = url
        self.details.update(
            url=url, request_count=request_count, total_requests=total_requests
        )

    def user_message(self) -> str:
        return (
            f"Counter for URL {self.url} not updated: "
            f"successes cannot exceed attempts"
        )
