"""
Configuration Package for URL Keep-Alive

Environment-driven settings plus the fixed vocabulary of the service:
command actions, response messages, limits and scheduler defaults.
"""

from config.settings import (
    Settings,
    DatabaseSettings,
    MonitoringSettings,
    LoggingSettings,
    DatabaseType,
    Environment,
    LogLevel,
    get_settings,
)

from config.constants import (
    TargetAction,
    MessageTemplates,
    Limits,
    Defaults,
)

__all__ = [
    # Settings
    "Settings",
    "DatabaseSettings",
    "MonitoringSettings",
    "LoggingSettings",
    "DatabaseType",
    "Environment",
    "LogLevel",
    "get_settings",

    # Constants
    "TargetAction",
    "MessageTemplates",
    "Limits",
    "Defaults",
]
