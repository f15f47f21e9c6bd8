"""
Constants Module for URL Keep-Alive

Contains constant values, enumerations, and message templates
used throughout the application.
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Optional


class TargetAction(str, Enum):
    """
    Command Actions Enumeration

    The discriminator accepted by the command surface. Anything that
    does not parse to one of these falls back to ``ENSURE_STARTED``.
    """

    ADD = "add"
    START = "start"
    STOP = "stop"
    DELETE = "delete"
    COUNTER = "counter"
    ENSURE_STARTED = "ensure_started"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TargetAction":
        """Map a raw action string onto an action, defaulting to upsert-and-start."""
        if isinstance(value, str):
            try:
                action = cls(value.strip().lower())
            except ValueError:
                return cls.ENSURE_STARTED
            return action
        return cls.ENSURE_STARTED


class MessageTemplates:
    """Human-readable command acknowledgements."""

    ADDED: Final[str] = "URL {url} added"
    STARTED: Final[str] = "URL {url} started"
    STOPPED: Final[str] = "URL {url} stopped"
    DELETED: Final[str] = "URL {url} deleted"
    COUNTER_UPDATED: Final[str] = "Counter for URL {url} updated"
    ENSURE_STARTED: Final[str] = "URL {url} added or started"


class Limits:
    """Hard limits applied to user input."""

    MAX_URL_LENGTH: Final[int] = 2048


class Defaults:
    """Default values shared by settings and the HTTP client."""

    TICK_INTERVAL_MINUTES: Final[int] = 5
    OK_STATUS_CEILING: Final[int] = 400
    SCHEDULER_WAKE_INTERVAL: Final[float] = 2.0
    KEEPALIVE_JOB_NAME: Final[str] = "keepalive_tick"
