"""
============================================================================
URL KEEP-ALIVE - LOGGING UTILITY
============================================================================
Logging system built on loguru: colored console output, an optional
rotating (and optionally JSON-serialized) application log, and a separate
error log.
============================================================================
"""

import sys
from functools import wraps
from typing import Optional
import inspect
import time

from loguru import logger

from config.settings import Settings, get_settings


# ============================================================================
# LOGGER CONFIGURATION
# ============================================================================

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}"

# component name shown when a record was logged without get_logger(name)
DEFAULT_COMPONENT = "keepalive"


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure logging sinks from the logging settings section.

    Safe to call more than once; existing sinks are replaced.
    """
    settings = settings or get_settings()
    log_settings = settings.logging

    logger.remove()
    logger.configure(extra={"name": DEFAULT_COMPONENT})

    log_level = log_settings.level.value

    # Console Handler
    if log_settings.console_enabled:
        logger.add(
            sys.stdout,
            format=CONSOLE_FORMAT,
            level=log_level,
            colorize=log_settings.console_colored,
            backtrace=True,
            diagnose=settings.debug,
        )

    # File Handler
    if log_settings.file_enabled:
        log_settings.logs_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_settings.file_path,
            format=FILE_FORMAT,
            level=log_level,
            rotation=log_settings.file_rotation,
            retention=log_settings.file_retention,
            compression=log_settings.file_compression,
            serialize=log_settings.json_enabled,
            backtrace=True,
            diagnose=settings.debug,
        )

        # Error log file (separate file for errors)
        logger.add(
            log_settings.logs_dir / "errors.log",
            format=FILE_FORMAT,
            level="ERROR",
            rotation="1 day",
            retention="7 days",
            compression=log_settings.file_compression,
            backtrace=True,
            diagnose=settings.debug,
        )

    logger.info("Logging system initialized")
    logger.info(f"Log level: {log_level}")
    logger.info(f"Console logging: {log_settings.console_enabled}")
    logger.info(f"File logging: {log_settings.file_enabled}")


def get_logger(name: Optional[str] = None):
    """
    Get logger instance with optional name.

    Args:
        name: Component name, stored in ``extra`` and printed by every sink

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger


# ============================================================================
# LOG DECORATORS
# ============================================================================

def log_execution_time(func):
    """
    Decorator to log how long a coroutine (or plain function) took.
    """

    @wraps(func)
    async def async_wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
            logger.debug(
                f"Function {func.__name__} executed in "
                f"{time.perf_counter() - start_time:.4f} seconds"
            )
            return result
        except Exception as e:
            logger.error(
                f"Function {func.__name__} failed after "
                f"{time.perf_counter() - start_time:.4f} seconds: {e}"
            )
            raise

    @wraps(func)
    def sync_wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
            logger.debug(
                f"Function {func.__name__} executed in "
                f"{time.perf_counter() - start_time:.4f} seconds"
            )
            return result
        except Exception as e:
            logger.error(
                f"Function {func.__name__} failed after "
                f"{time.perf_counter() - start_time:.4f} seconds: {e}"
            )
            raise

    if inspect.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper


# ============================================================================
# SPECIALIZED LOGGERS
# ============================================================================

class PingLogger:
    """
    Specialized logger for keep-alive pings.
    """

    def __init__(self):
        self.logger = get_logger("Ping")

    def log_success(self, url: str, status_code: int, response_time: float):
        self.logger.info(
            f"Ping OK {url} -> {status_code} in {response_time:.3f}s"
        )

    def log_failure(self, url: str, error: str):
        self.logger.warning(f"Ping failed for {url}: {error}")

    def log_skipped(self, url: str, reason: str):
        self.logger.warning(f"Ping skipped for {url}: {reason}")
