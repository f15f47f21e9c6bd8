"""
============================================================================
URL KEEP-ALIVE - PING SCHEDULER
============================================================================
Asyncio-native periodic runner for the keep-alive tick.

The main loop wakes every few seconds and launches the tick job once it
is due. The job is never launched while its previous run is still going,
so ticks do not overlap and no target is pinged concurrently with itself.

Jobs
----
keepalive_tick   (every MONITOR_TICK_INTERVAL_MINUTES, default 5 min)
    Snapshots the active targets and hands them to the PingExecutor.
============================================================================
"""

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from config.constants import Defaults
from config.settings import Settings
from monitoring.executor import PingExecutor, TickReport
from monitoring.registry import TargetRegistry
from utils.logger import get_logger


logger = get_logger("Scheduler")


def _iso(epoch: Optional[float]) -> Optional[str]:
    if epoch is None:
        return None
    return datetime.fromtimestamp(epoch, tz=timezone.utc).isoformat()


# ============================================================================
# JOB STATE
# ============================================================================

@dataclass
class ScheduledJob:
    """
    Bookkeeping for one periodic coroutine.

    ``due_at`` is advanced when a run is launched, not when it finishes,
    so a slow run shifts nothing but itself.
    """
    name: str
    interval_seconds: float
    action: Callable[[], Awaitable[Any]]
    due_at: float
    enabled: bool = True
    running: bool = False
    runs: int = 0
    failures: int = 0
    last_finished: Optional[float] = None

    def is_due(self, now: float) -> bool:
        return self.enabled and not self.running and now >= self.due_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "interval_seconds": self.interval_seconds,
            "enabled": self.enabled,
            "running": self.running,
            "runs": self.runs,
            "failures": self.failures,
            "last_finished": _iso(self.last_finished),
            "due_at": _iso(self.due_at),
        }


# ============================================================================
# SCHEDULER
# ============================================================================

class PingScheduler:
    """
    Drives keep-alive ticks on a fixed cadence.

        scheduler = PingScheduler(registry, executor, settings)
        await scheduler.start()
        ...
        await scheduler.stop()

    ``run_tick()`` can also be awaited directly, which is what the tests do.
    """

    def __init__(
        self,
        registry: TargetRegistry,
        executor: PingExecutor,
        settings: Settings,
    ):
        self.registry = registry
        self.executor = executor
        self.settings = settings

        self._interval = settings.monitoring.tick_interval_seconds
        self._wake_interval = min(Defaults.SCHEDULER_WAKE_INTERVAL, self._interval)
        self._loop_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()

        self.last_report: Optional[TickReport] = None
        self.skipped_ticks = 0

        first_due = time.time()
        if not settings.monitoring.run_on_start:
            first_due += self._interval

        self.job = ScheduledJob(
            name=Defaults.KEEPALIVE_JOB_NAME,
            interval_seconds=self._interval,
            action=self.run_tick,
            due_at=first_due,
        )

        logger.info(
            f"Scheduler created: tick every {self._interval:.0f}s, "
            f"run_on_start={settings.monitoring.run_on_start}"
        )

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def start(self) -> None:
        if self.is_running:
            logger.warning("Scheduler already started")
            return
        self._loop_task = asyncio.create_task(self._loop(), name="keepalive-scheduler")
        logger.info("✓ Scheduler started")

    async def stop(self) -> None:
        """
        Stop launching ticks. A tick still in progress is cancelled and
        whatever it had not reached yet is simply not pinged.
        """
        pending = list(self._inflight)
        if self._loop_task is not None:
            pending.append(self._loop_task)
            self._loop_task = None

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._inflight.clear()

        logger.info("✓ Scheduler stopped")

    def pause(self) -> None:
        """Keep the loop alive but launch no further ticks."""
        self.job.enabled = False
        logger.info("Keep-alive tick paused")

    def resume(self) -> None:
        self.job.enabled = True
        logger.info("Keep-alive tick resumed")

    # ------------------------------------------------------------------
    # MAIN LOOP
    # ------------------------------------------------------------------

    async def _loop(self) -> None:
        logger.debug("Scheduler loop running")
        while True:
            now = time.time()
            if self.job.is_due(now):
                self.job.running = True
                self.job.due_at = now + self.job.interval_seconds
                task = asyncio.create_task(self._run_job(self.job))
                self._inflight.add(task)
                task.add_done_callback(self._inflight.discard)

            await asyncio.sleep(self._wake_interval)

    async def _run_job(self, job: ScheduledJob) -> None:
        started = time.monotonic()
        try:
            await job.action()
        except Exception as e:
            job.failures += 1
            logger.exception(
                f"Job '{job.name}' failed after {time.monotonic() - started:.2f}s: {e}"
            )
        else:
            job.runs += 1
            job.last_finished = time.time()
            logger.debug(
                f"Job '{job.name}' run #{job.runs} took {time.monotonic() - started:.2f}s"
            )
        finally:
            job.running = False

    # ------------------------------------------------------------------
    # TICK
    # ------------------------------------------------------------------

    async def run_tick(self) -> Optional[TickReport]:
        """
        One keep-alive pass: snapshot active targets, then ping them.

        Returns None when the snapshot could not be read; the tick is
        skipped and the next one proceeds independently.
        """
        try:
            targets = await self.registry.list_active()
        except Exception as e:
            self.skipped_ticks += 1
            logger.error(f"Could not read active targets, skipping tick: {e}")
            return None

        if not targets:
            logger.debug("Tick: no active targets")

        report = await self.executor.run(targets)
        self.last_report = report
        return report

    # ------------------------------------------------------------------
    # DIAGNOSTICS
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        """Scheduler state for the health endpoint."""
        return {
            "is_running": self.is_running,
            "tick_interval_seconds": self._interval,
            "skipped_ticks": self.skipped_ticks,
            "last_tick": self.last_report.to_dict() if self.last_report else None,
            "job": self.job.to_dict(),
        }
