"""
============================================================================
URL KEEP-ALIVE - PING EXECUTOR
============================================================================
Works through one tick's snapshot of active targets.

Architecture
------------
PingExecutor.run(targets)
├── _process_target()     ← count attempt, ping, count success
│   └── ping()            ← one HTTP GET via httpx, never raises
│       └── _request()    ← raises PingFailure subclasses
└── pacing delay          ← after every target, whatever the outcome

Targets are handled one at a time, in snapshot order. A failure on one
target is logged and never stops the rest of the tick.
============================================================================
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import httpx

from config.constants import Defaults
from config.settings import Settings
from database.models import Target
from exceptions import (
    KeepAliveException,
    PingConnectionError,
    PingFailure,
    PingHTTPStatusError,
    PingTimeoutError,
    TargetNotFoundError,
)
from monitoring.registry import TargetRegistry
from utils.helpers import TimeHelper
from utils.logger import PingLogger, get_logger, log_execution_time


logger = get_logger("PingExecutor")


# ============================================================================
# RESULTS
# ============================================================================

class PingResult:
    """
    Outcome of a single ping.
    """
    __slots__ = (
        "url", "success", "status_code", "response_time",
        "error_message", "error_type", "skipped",
    )

    def __init__(
        self,
        url: str,
        success: bool = False,
        status_code: Optional[int] = None,
        response_time: Optional[float] = None,
        error_message: Optional[str] = None,
        error_type: Optional[str] = None,
        skipped: bool = False,
    ):
        self.url = url
        self.success = success
        self.status_code = status_code
        self.response_time = response_time
        self.error_message = error_message
        self.error_type = error_type
        self.skipped = skipped

    def to_dict(self) -> Dict[str, Any]:
        return {slot: getattr(self, slot) for slot in self.__slots__}

    def __repr__(self) -> str:
        return f"PingResult(url={self.url!r}, success={self.success}, status_code={self.status_code})"


@dataclass
class TickReport:
    """Summary of one pass over a snapshot."""
    started_at: datetime = field(default_factory=TimeHelper.get_utc_now)
    finished_at: Optional[datetime] = None
    results: List[PingResult] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return sum(1 for r in self.results if not r.skipped)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success and not r.skipped)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.skipped)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
        }


# ============================================================================
# EXECUTOR
# ============================================================================

class PingExecutor:
    """
    Pings a tick's targets sequentially and records the outcome through
    the registry.

    Parameters
    ----------
    registry : TargetRegistry
        Where attempts and successes are counted.
    settings : Settings
        Supplies request timeout, user agent and pacing delay.
    transport : httpx.AsyncBaseTransport | None
        Optional transport handed to the HTTP client (tests use
        ``httpx.MockTransport``).
    """

    def __init__(
        self,
        registry: TargetRegistry,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.registry = registry
        self.settings = settings
        self._transport = transport
        self._timeout = settings.monitoring.request_timeout
        self._pacing_delay = settings.monitoring.pacing_delay
        self._ping_logger = PingLogger()

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=self.settings.monitoring.follow_redirects,
            headers={"User-Agent": self.settings.monitoring.user_agent},
            transport=self._transport,
        )

    # ------------------------------------------------------------------
    # TICK
    # ------------------------------------------------------------------

    @log_execution_time
    async def run(self, targets: Sequence[Target]) -> TickReport:
        """
        Ping every target in ``targets`` in order, one at a time.
        """
        report = TickReport()
        urls = [target.url for target in targets]
        logger.debug(f"Processing {len(urls)} targets")

        async with self._build_client() as client:
            for url in urls:
                try:
                    result = await self._process_target(client, url)
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.exception(f"Unhandled error while processing {url}: {e}")
                    result = PingResult(
                        url=url,
                        error_message=str(e)[:200],
                        error_type=type(e).__name__,
                    )
                report.results.append(result)

                await self._pace()

        report.finished_at = TimeHelper.get_utc_now()
        logger.info(
            f"Tick finished: {report.succeeded} ok, {report.failed} failed, "
            f"{report.skipped} skipped"
        )
        return report

    async def _process_target(self, client: httpx.AsyncClient, url: str) -> PingResult:
        """Count the attempt, ping, then count the success if there was one."""
        try:
            await self.registry.record_attempt(url)
        except TargetNotFoundError:
            self._ping_logger.log_skipped(url, "no longer registered")
            return PingResult(url=url, skipped=True, error_type="TargetNotFoundError")
        except KeepAliveException as e:
            self._ping_logger.log_skipped(url, e.user_message())
            return PingResult(
                url=url,
                skipped=True,
                error_message=e.message,
                error_type=type(e).__name__,
            )

        result = await self.ping(client, url)

        if result.success:
            self._ping_logger.log_success(url, result.status_code, result.response_time)
            try:
                await self.registry.increment_success_counter(url)
            except KeepAliveException as e:
                logger.warning(f"Could not record success for {url}: {e.message}")
        else:
            self._ping_logger.log_failure(url, result.error_message or "unknown error")

        return result

    async def _pace(self) -> None:
        if self._pacing_delay > 0:
            await asyncio.sleep(self._pacing_delay)

    # ------------------------------------------------------------------
    # SINGLE PING
    # ------------------------------------------------------------------

    async def ping(self, client: httpx.AsyncClient, url: str) -> PingResult:
        """
        GET ``url`` once. Failures come back as an unsuccessful result.
        """
        start_time = time.perf_counter()
        try:
            response = await self._request(client, url)
        except PingFailure as e:
            return PingResult(
                url=url,
                success=False,
                status_code=getattr(e, "status_code", None),
                response_time=round(time.perf_counter() - start_time, 4),
                error_message=e.message,
                error_type=type(e).__name__,
            )

        return PingResult(
            url=url,
            success=True,
            status_code=response.status_code,
            response_time=round(time.perf_counter() - start_time, 4),
        )

    async def _request(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        """
        Issue the GET and classify the outcome.

        Raises:
            PingTimeoutError: On connect/read/write/pool timeout
            PingConnectionError: On any other transport failure
            PingHTTPStatusError: On a status of 400 or above
        """
        try:
            response = await client.get(url)
        except httpx.TimeoutException as e:
            raise PingTimeoutError(url, timeout=self._timeout, cause=e) from e
        except httpx.HTTPError as e:
            raise PingConnectionError(
                f"Request to {url} failed: {str(e)[:200] or type(e).__name__}",
                url=url,
                cause=e,
            ) from e

        if response.status_code >= Defaults.OK_STATUS_CEILING:
            raise PingHTTPStatusError(url, response.status_code)

        return response
