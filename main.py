"""
============================================================================
URL KEEP-ALIVE - MAIN APPLICATION
============================================================================
Wires every layer of the service together:

    • Settings (pydantic-settings) and loguru logging
    • DatabaseManager     — SQLAlchemy async engine, target store
    • TargetRegistry      — add / start / stop / delete / counter
    • PingExecutor        — sequential, paced pings for one tick
    • PingScheduler       — periodic tick driver
    • ApiServer           — aiohttp command and query API

Startup Order
-------------
1.  Load settings & configure logging
2.  Initialize DatabaseManager (create tables if needed)
3.  Build TargetRegistry, PingExecutor, PingScheduler, ApiServer
4.  Start ApiServer
5.  Start PingScheduler
6.  Wait for SIGINT / SIGTERM

Shutdown Order (reverse)
------------------------
    stop scheduler → stop API server → close DB → exit
============================================================================
"""

import asyncio
import signal
import sys
from typing import Optional

from pydantic import ValidationError

from api.commands import CommandHandler
from api.server import ApiServer
from config.settings import Settings, get_settings
from database.manager import DatabaseManager
from exceptions import ConfigurationError, InitializationError, KeepAliveException
from monitoring.executor import PingExecutor
from monitoring.registry import TargetRegistry
from monitoring.scheduler import PingScheduler
from utils.logger import get_logger, setup_logging


logger = get_logger("Main")


# ============================================================================
# APPLICATION CLASS
# ============================================================================

class KeepAliveApplication:
    """
    Top-level application orchestrator.

    Owns every subsystem and is the single place that knows the startup /
    shutdown order. Subsystems receive their collaborators through their
    constructors.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

        self.db_manager: Optional[DatabaseManager] = None
        self.registry: Optional[TargetRegistry] = None
        self.executor: Optional[PingExecutor] = None
        self.scheduler: Optional[PingScheduler] = None
        self.api_server: Optional[ApiServer] = None

        self._stop_event = asyncio.Event()

    # ==================================================================
    # PHASE 1: DATABASE
    # ==================================================================

    async def _init_database(self) -> None:
        """Initialize the database manager and verify connectivity."""
        logger.info("── Phase 1: Database ─────────────────────────────")
        self.db_manager = DatabaseManager(self.settings)
        await self.db_manager.initialize()

        if not await self.db_manager.check_connection():
            raise InitializationError("Database connection check failed", component="database")

        db_info = await self.db_manager.get_database_info()
        logger.info(
            f"  ✓ Connected — targets={db_info.get('targets', 0)}, "
            f"active={db_info.get('active_targets', 0)}"
        )

    # ==================================================================
    # PHASE 2: KEEP-ALIVE SERVICES
    # ==================================================================

    def _init_services(self) -> None:
        """Wire up TargetRegistry, PingExecutor, PingScheduler, ApiServer."""
        logger.info("── Phase 2: Keep-alive services ──────────────────")
        self.registry = TargetRegistry(self.db_manager, self.settings)
        self.executor = PingExecutor(self.registry, self.settings)
        self.scheduler = PingScheduler(self.registry, self.executor, self.settings)
        self.api_server = ApiServer(
            self.settings,
            CommandHandler(self.registry),
            db_manager=self.db_manager,
            scheduler=self.scheduler,
        )
        logger.info("  ✓ Registry, executor, scheduler and API server created")

    # ==================================================================
    # FULL STARTUP SEQUENCE
    # ==================================================================

    async def startup(self) -> None:
        """
        Execute the complete startup sequence.

        Raises:
            KeepAliveException: If a critical phase fails
        """
        logger.info("=" * 74)
        logger.info(f"  STARTING {self.settings.app_name} v{self.settings.app_version}")
        logger.info("=" * 74)
        logger.debug(f"Effective settings: {self.settings.to_dict()}")

        await self._init_database()
        self._init_services()

        try:
            await self.api_server.start()
        except OSError as e:
            raise InitializationError(
                f"Could not bind {self.settings.web_host}:{self.settings.web_port}: {e}",
                component="api_server",
                cause=e,
            ) from e

        await self.scheduler.start()

        logger.info("=" * 74)
        logger.info("  ✓ ALL SYSTEMS OPERATIONAL")
        logger.info(
            f"  API: http://{self.settings.web_host}:{self.settings.web_port}/api/urls"
        )
        logger.info(
            f"  Tick interval: {self.settings.monitoring.tick_interval_minutes} min, "
            f"pacing {self.settings.monitoring.pacing_delay}s"
        )
        logger.info("=" * 74)

    # ==================================================================
    # SHUTDOWN SEQUENCE
    # ==================================================================

    async def shutdown(self) -> None:
        """
        Graceful shutdown in reverse order. Each step is isolated so a
        failure in one subsystem doesn't prevent the others from cleaning up.
        """
        logger.info("  SHUTTING DOWN …")

        if self.scheduler:
            try:
                await self.scheduler.stop()
            except Exception as e:
                logger.error(f"  ✗ Scheduler stop error: {e}")

        if self.api_server:
            try:
                await self.api_server.stop()
            except Exception as e:
                logger.error(f"  ✗ ApiServer stop error: {e}")

        if self.db_manager:
            try:
                await self.db_manager.close()
            except Exception as e:
                logger.error(f"  ✗ Database close error: {e}")

        logger.info("  ✓ SHUTDOWN COMPLETE")

    # ==================================================================
    # RUN
    # ==================================================================

    def request_stop(self) -> None:
        self._stop_event.set()

    async def run(self) -> None:
        """Block until a stop is requested."""
        await self._stop_event.wait()


# ============================================================================
# SIGNAL HANDLER SETUP
# ============================================================================

def _install_signal_handlers(app: KeepAliveApplication) -> None:
    """
    Install SIGTERM / SIGINT handlers so the service shuts down gracefully
    when the host stops it.
    """
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, app.request_stop)
        except (NotImplementedError, OSError):
            # not supported on Windows; KeyboardInterrupt still works
            pass


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        raise ConfigurationError.from_exception(e, f"Invalid configuration: {e}") from e


async def main(settings: Optional[Settings] = None) -> None:
    """
    Async main — creates the app, starts it, and runs until shutdown.
    """
    settings = settings or load_settings()
    setup_logging(settings)

    app = KeepAliveApplication(settings)
    _install_signal_handlers(app)

    try:
        await app.startup()
        await app.run()
        logger.info("  Signal received — initiating graceful shutdown…")
    finally:
        await app.shutdown()


def run() -> None:
    """Console entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
    except KeepAliveException as e:
        logger.error(f"Fatal error: {e.log_format()}")
        sys.exit(1)


if __name__ == "__main__":
    run()
