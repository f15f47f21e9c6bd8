"""
============================================================================
URL KEEP-ALIVE - MONITORING PACKAGE
============================================================================
Runtime keep-alive infrastructure:
    • TargetRegistry   — add / start / stop / delete / counter commands
    • PingExecutor     — sequential, paced HTTP GETs for one tick
    • PingScheduler    — periodic job runner that drives the ticks

File layout
-----------
monitoring/
├── __init__.py          ← this file
├── registry.py          ← TargetRegistry
├── executor.py          ← PingExecutor, PingResult, TickReport
└── scheduler.py         ← PingScheduler, ScheduledJob
============================================================================
"""

from monitoring.registry import TargetRegistry
from monitoring.executor import PingExecutor, PingResult, TickReport
from monitoring.scheduler import PingScheduler, ScheduledJob

__all__ = [
    "TargetRegistry",
    "PingExecutor",
    "PingResult",
    "TickReport",
    "PingScheduler",
    "ScheduledJob",
]
