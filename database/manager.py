"""
============================================================================
URL KEEP-ALIVE - DATABASE MANAGER
============================================================================
Engine and session management for the target store, plus the repository
that performs every read and write against the ``targets`` table.

Counter increments are issued as single ``UPDATE ... SET col = col + 1``
statements so the database performs the read-modify-write atomically.
============================================================================
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple

from sqlalchemy import delete, event, func, select, text, update
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from config.settings import Settings
from database.models import Base, Target
from exceptions import DatabaseQueryError, StoreUnavailableError
from utils.logger import get_logger


logger = get_logger(__name__)

_UNAVAILABLE_ERRORS = (
    OperationalError,
    InterfaceError,
    DisconnectionError,
    PoolTimeoutError,
    OSError,
)


# ============================================================================
# DATABASE MANAGER CLASS
# ============================================================================

class DatabaseManager:
    """
    Owns the async engine and session factory for the target store.
    """

    def __init__(self, settings: Settings):
        """
        Initialize database manager.

        Args:
            settings: Application settings instance
        """
        self.settings = settings
        self.db_settings = settings.database
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self._is_initialized = False
        self._lock = asyncio.Lock()

        self.database_url = self.db_settings.url

        logger.info(f"DatabaseManager initialized with URL: {self._mask_password(self.database_url)}")

    @staticmethod
    def _mask_password(url: str) -> str:
        """
        Mask password in database URL for logging.

        Args:
            url: Database URL

        Returns:
            Masked URL
        """
        if "://" not in url:
            return url

        protocol, rest = url.split("://", 1)
        if "@" not in rest:
            return url

        credentials, host_part = rest.split("@", 1)
        if ":" in credentials:
            user, _ = credentials.split(":", 1)
            return f"{protocol}://{user}:****@{host_part}"

        return url

    def _get_engine_kwargs(self) -> Dict[str, Any]:
        """
        Get engine configuration kwargs based on settings.

        Returns:
            Dictionary of engine configuration options
        """
        kwargs: Dict[str, Any] = {"echo": self.db_settings.echo}

        if self.db_settings.is_sqlite:
            # connections are cheap; the busy timeout lets concurrent writers queue
            kwargs["poolclass"] = NullPool
            kwargs["connect_args"] = {"timeout": self.db_settings.pool_timeout}
        else:
            kwargs["pool_size"] = self.db_settings.pool_size
            kwargs["max_overflow"] = self.db_settings.max_overflow
            kwargs["pool_timeout"] = self.db_settings.pool_timeout
            kwargs["pool_recycle"] = self.db_settings.pool_recycle
            kwargs["pool_pre_ping"] = self.db_settings.pool_pre_ping

        return kwargs

    async def initialize(self) -> None:
        """
        Create the engine and session factory, then create the schema.

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        async with self._lock:
            if self._is_initialized:
                logger.warning("Database already initialized")
                return

            if self.db_settings.is_sqlite:
                # aiosqlite will not create missing directories
                self.db_settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)

            self.engine = create_async_engine(
                self.database_url,
                **self._get_engine_kwargs()
            )

            self._register_event_listeners()

            self.session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )

            try:
                await self.create_tables()
            except _UNAVAILABLE_ERRORS as e:
                await self.engine.dispose()
                self.engine = None
                self.session_factory = None
                logger.error(f"Failed to initialize database: {e}")
                raise StoreUnavailableError(
                    message=f"Failed to initialize database: {e}",
                    database=self._mask_password(self.database_url),
                    cause=e,
                ) from e

            self._is_initialized = True
            logger.info("Database initialized successfully")

    def _register_event_listeners(self) -> None:
        """Register SQLAlchemy event listeners for connection management."""

        @event.listens_for(self.engine.sync_engine, "connect")
        def receive_connect(dbapi_conn, connection_record):
            logger.debug("New database connection established")

        @event.listens_for(self.engine.sync_engine, "checkin")
        def receive_checkin(dbapi_conn, connection_record):
            logger.debug("Connection returned to pool")

    async def create_tables(self) -> None:
        """
        Create all database tables. Existing tables are left untouched, so
        this is safe on every startup.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ready")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a transactional scope for database operations.

        Commits on success and rolls back on failure. Connectivity
        failures surface as ``StoreUnavailableError``, other SQLAlchemy
        failures as ``DatabaseQueryError``; anything else propagates as-is.

        Example:
            async with db_manager.session() as session:
                target = await session.scalar(select(Target))
        """
        if not self._is_initialized:
            await self.initialize()

        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except _UNAVAILABLE_ERRORS as e:
            await self._rollback(session)
            logger.error(f"Target store unavailable: {e}")
            raise StoreUnavailableError(
                message=f"Target store unavailable: {e}",
                database=self._mask_password(self.database_url),
                cause=e,
            ) from e
        except SQLAlchemyError as e:
            await self._rollback(session)
            logger.error(f"Session error: {e}")
            raise DatabaseQueryError(
                message=str(e).split("\n")[0],
                query=getattr(e, "statement", None),
                cause=e,
            ) from e
        except BaseException:
            await self._rollback(session)
            raise
        finally:
            await session.close()

    @staticmethod
    async def _rollback(session: AsyncSession) -> None:
        try:
            await session.rollback()
        except SQLAlchemyError as e:
            logger.warning(f"Rollback failed: {e}")

    async def check_connection(self) -> bool:
        """
        Check if database connection is alive.

        Returns:
            True if connection is alive, False otherwise
        """
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except (StoreUnavailableError, DatabaseQueryError) as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    async def get_database_info(self) -> Dict[str, Any]:
        """
        Get database information and statistics.

        Returns:
            Dictionary with database info
        """
        try:
            async with self.session() as session:
                total = await session.scalar(select(func.count(Target.id)))
                active = await session.scalar(
                    select(func.count(Target.id)).where(Target.active.is_(True))
                )

            return {
                "status": "connected",
                "database_url": self._mask_password(self.database_url),
                "targets": total or 0,
                "active_targets": active or 0,
                "checked_at": datetime.now(timezone.utc).isoformat(),
            }
        except (StoreUnavailableError, DatabaseQueryError) as e:
            logger.error(f"Failed to get database info: {e}")
            return {
                "status": "error",
                "error": e.user_message(),
                "checked_at": datetime.now(timezone.utc).isoformat(),
            }

    async def close(self) -> None:
        """
        Close database connections and cleanup resources.
        """
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database connections closed")
        self._is_initialized = False


# ============================================================================
# TARGET REPOSITORY
# ============================================================================

class TargetRepository:
    """Repository for Target rows. Every method runs in its own session."""

    def __init__(self, db_manager: DatabaseManager):
        """
        Initialize repository.

        Args:
            db_manager: DatabaseManager instance
        """
        self.db = db_manager
        self.logger = get_logger(self.__class__.__name__)

    async def get_by_url(self, url: str) -> Optional[Target]:
        """Get a target by URL, or None."""
        async with self.db.session() as session:
            return await session.scalar(select(Target).where(Target.url == url))

    async def get_all(self) -> List[Target]:
        """Get every target in insertion order."""
        async with self.db.session() as session:
            result = await session.execute(select(Target).order_by(Target.id))
            return list(result.scalars().all())

    async def get_active(self) -> List[Target]:
        """Get active targets in insertion order."""
        async with self.db.session() as session:
            result = await session.execute(
                select(Target).where(Target.active.is_(True)).order_by(Target.id)
            )
            return list(result.scalars().all())

    async def create_if_absent(self, url: str) -> Tuple[Target, bool]:
        """
        Insert an inactive target unless one already exists.

        Returns:
            (target, created)
        """
        async with self.db.session() as session:
            existing = await session.scalar(select(Target).where(Target.url == url))
            if existing is not None:
                return existing, False

            target = Target(
                url=url,
                active=False,
                request_count=0,
                total_requests=0,
                start_time=None,
            )
            session.add(target)
            try:
                await session.flush()
            except IntegrityError:
                # a concurrent command inserted the same URL first
                await session.rollback()
                existing = await session.scalar(select(Target).where(Target.url == url))
                if existing is None:
                    raise
                return existing, False

            self.logger.debug(f"Inserted target {url}")
            return target, True

    async def mark_started(self, url: str, start_time_ms: int) -> int:
        """Activate a target and reset its success counter. Returns rows updated."""
        async with self.db.session() as session:
            result = await session.execute(
                update(Target)
                .where(Target.url == url)
                .values(active=True, start_time=start_time_ms, request_count=0)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

    async def mark_stopped(self, url: str) -> int:
        """Deactivate a target and clear both counters. Returns rows updated."""
        async with self.db.session() as session:
            result = await session.execute(
                update(Target)
                .where(Target.url == url)
                .values(active=False, request_count=0, total_requests=0, start_time=None)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

    async def increment_total(self, url: str) -> int:
        """Atomically add one to ``total_requests``. Returns rows updated."""
        async with self.db.session() as session:
            result = await session.execute(
                update(Target)
                .where(Target.url == url)
                .values(total_requests=Target.total_requests + 1)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

    async def increment_success(self, url: str) -> int:
        """
        Atomically add one to ``request_count``.

        The row only matches while ``request_count < total_requests``, so the
        success counter can never overtake the attempt counter, even when a
        stop lands between a tick's two increments.
        """
        async with self.db.session() as session:
            result = await session.execute(
                update(Target)
                .where(
                    Target.url == url,
                    Target.request_count < Target.total_requests,
                )
                .values(request_count=Target.request_count + 1)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

    async def delete(self, url: str) -> bool:
        """Remove a target row. Returns True if a row was deleted."""
        async with self.db.session() as session:
            result = await session.execute(
                delete(Target)
                .where(Target.url == url)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount > 0
