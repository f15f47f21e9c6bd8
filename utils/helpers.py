"""
============================================================================
URL KEEP-ALIVE - HELPERS UTILITY
============================================================================
Clock helpers. Target start times are stored as epoch milliseconds; tick
reports and health output use aware UTC datetimes.
============================================================================
"""

import time
from datetime import datetime, timezone


class TimeHelper:
    """Time utilities shared by the registry, the executor and the API."""

    @staticmethod
    def get_utc_now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def now_ms() -> int:
        """Milliseconds since the Unix epoch."""
        return time.time_ns() // 1_000_000

    @staticmethod
    def seconds_to_human_readable(seconds: int) -> str:
        """
        Render a duration compactly, largest unit first.

        >>> TimeHelper.seconds_to_human_readable(9015)
        '2h 30m 15s'
        """
        seconds = max(0, int(seconds))
        units = (("d", 86400), ("h", 3600), ("m", 60), ("s", 1))

        parts = []
        for suffix, size in units:
            amount, seconds = divmod(seconds, size)
            if amount:
                parts.append(f"{amount}{suffix}")

        return " ".join(parts) or "0s"
