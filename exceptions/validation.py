"""
Validation Exception Classes for URL Keep-Alive

Raised by the command surface before anything touches the store; the
API answers them with 400.
"""

from __future__ import annotations

from typing import Any, Optional

from exceptions.base import KeepAliveException


_MAX_ECHOED_VALUE = 100


class ValidationException(KeepAliveException):
    """A command field is missing or malformed."""

    default_error_code = 3000

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, **kwargs)
        self.field = field

        if field:
            self.details["field"] = field
        if value is not None:
            text = str(value)
            if len(text) > _MAX_ECHOED_VALUE:
                text = text[:_MAX_ECHOED_VALUE] + "..."
            self.details["value"] = text


class InvalidURLError(ValidationException):
    """
    The ``url`` field is not a pingable http(s) URL.

    ``reason`` is one of ``no_scheme``, ``invalid_domain`` or ``too_long``
    and selects the client-facing message.
    """

    default_error_code = 3001

    REASON_MESSAGES = {
        "no_scheme": "URL must start with http:// or https://",
        "invalid_domain": "The domain name is invalid",
        "too_long": "URL is too long (max 2048 characters)",
    }

    def __init__(
        self,
        message: str = "Invalid URL format",
        url: Optional[str] = None,
        reason: Optional[str] = None,
        **kwargs: Any
    ) -> None:
        super().__init__(message, field="url", value=url, **kwargs)
        self.reason = reason

        if reason:
            self.details["reason"] = reason

    def user_message(self) -> str:
        return self.REASON_MESSAGES.get(self.reason or "", self.message)


class MissingFieldError(ValidationException):
    default_error_code = 3002

    def __init__(self, field: str, **kwargs: Any) -> None:
        super().__init__(f"Missing required field: {field}", field=field, **kwargs)
