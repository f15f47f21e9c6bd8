"""
============================================================================
URL KEEP-ALIVE - TARGET REGISTRY
============================================================================
Command operations over the target store: add, start, stop, delete and
the success counter, plus the snapshots read by the scheduler and the API.

stop() and delete() hold the caller for the configured settle delay so an
in-flight tick has a chance to finish with the URL before the caller moves
on. This narrows the race with the scheduler; it does not close it.
============================================================================
"""

import asyncio
from typing import List

from config.settings import Settings
from database.manager import DatabaseManager, TargetRepository
from database.models import Target
from exceptions import CounterConflictError, TargetNotFoundError
from utils.helpers import TimeHelper
from utils.logger import get_logger


logger = get_logger("Registry")


class TargetRegistry:
    """
    The single entry point for mutating keep-alive targets.

    Usage
    -----
        registry = TargetRegistry(db_manager, settings)
        await registry.start("https://example.com")
        targets = await registry.list_all()
    """

    def __init__(self, db_manager: DatabaseManager, settings: Settings):
        self.settings = settings
        self.repo = TargetRepository(db_manager)
        self._settle_delay = settings.monitoring.settle_delay

    # ------------------------------------------------------------------
    # QUERIES
    # ------------------------------------------------------------------

    async def list_all(self) -> List[Target]:
        """Snapshot of every target."""
        return await self.repo.get_all()

    async def list_active(self) -> List[Target]:
        """Snapshot of the targets the scheduler should ping."""
        return await self.repo.get_active()

    async def get(self, url: str) -> Target:
        """
        Fetch one target.

        Raises:
            TargetNotFoundError: If the URL is not registered
        """
        target = await self.repo.get_by_url(url)
        if target is None:
            raise TargetNotFoundError(url)
        return target

    # ------------------------------------------------------------------
    # COMMANDS
    # ------------------------------------------------------------------

    async def add(self, url: str) -> Target:
        """Register a URL in the stopped state. Existing URLs are left untouched."""
        target, created = await self.repo.create_if_absent(url)
        if created:
            logger.info(f"Added {url}")
        else:
            logger.debug(f"Add ignored, {url} already registered")
        return target

    async def start(self, url: str) -> Target:
        """
        Activate a URL, registering it first if needed.

        Resets the success counter and stamps the start time; the lifetime
        attempt counter is kept.
        """
        await self.repo.create_if_absent(url)
        updated = await self.repo.mark_started(url, TimeHelper.now_ms())
        if not updated:
            # deleted between the insert and the update
            raise TargetNotFoundError(url)
        logger.info(f"Started {url}")
        return await self.get(url)

    async def ensure_started(self, url: str) -> Target:
        """
        Add if absent, then start, leaving an already-active target as it is.
        """
        target, _ = await self.repo.create_if_absent(url)
        if target.active:
            logger.debug(f"{url} already active")
            return target
        return await self.start(url)

    async def stop(self, url: str) -> Target:
        """
        Deactivate a URL and clear its counters, then wait the settle delay.

        Raises:
            TargetNotFoundError: If the URL is not registered
        """
        updated = await self.repo.mark_stopped(url)
        if not updated:
            raise TargetNotFoundError(url)
        logger.info(f"Stopped {url}")

        await self._settle()
        return await self.get(url)

    async def delete(self, url: str) -> bool:
        """
        Remove a URL, stopping it first when it is active.

        Returns:
            True if a row was removed, False if the URL was not registered
        """
        target = await self.repo.get_by_url(url)
        if target is None:
            logger.debug(f"Delete ignored, {url} not registered")
            return False

        if target.active:
            await self.stop(url)
            await self._settle()

        deleted = await self.repo.delete(url)
        if deleted:
            logger.info(f"Deleted {url}")
        return deleted

    async def increment_success_counter(self, url: str) -> Target:
        """
        Add one successful ping to ``request_count``.

        Leaves ``total_requests`` alone. An increment that would push the
        success count past the attempt count is refused and nothing is
        written.

        Raises:
            TargetNotFoundError: If the URL is not registered
            CounterConflictError: If ``request_count`` already equals
                ``total_requests``
        """
        updated = await self.repo.increment_success(url)
        target = await self.get(url)
        if not updated:
            logger.warning(
                f"Success counter for {url} not incremented "
                f"(request_count={target.request_count}, total_requests={target.total_requests})"
            )
            raise CounterConflictError(url, target.request_count, target.total_requests)
        return target

    async def record_attempt(self, url: str) -> None:
        """
        Count one ping attempt in ``total_requests``.

        Raises:
            TargetNotFoundError: If the URL is not registered
        """
        updated = await self.repo.increment_total(url)
        if not updated:
            raise TargetNotFoundError(url)

    # ------------------------------------------------------------------
    # INTERNALS
    # ------------------------------------------------------------------

    async def _settle(self) -> None:
        if self._settle_delay > 0:
            await asyncio.sleep(self._settle_delay)
