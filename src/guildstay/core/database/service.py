"""
Async engine and session lifecycle for GuildStay.

`DatabaseService` is a classmethod singleton. Call `initialize()` once at
startup and `shutdown()` on exit; everything in between opens sessions
through one of two context managers:

- `get_session()`      reads. Nothing is committed; the session is closed
                       (and any implicit transaction rolled back) on exit.
- `get_transaction()`  writes. Commits when the block exits normally; on any
                       exception it rolls back, logs, and re-raises.

Service code never calls `session.commit()` itself.

    async with DatabaseService.get_transaction() as session:
        changed = await stay_repo.set_rewarded(session, stay_id, utc_now())

PostgreSQL sessions get `SET LOCAL statement_timeout` from
DATABASE_STATEMENT_TIMEOUT_MS. SQLite URLs and the testing environment use
NullPool; everything else gets a pre-pinged queue pool sized from Config.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Dict, Optional, Type

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool, Pool

from guildstay.core.config.config import Config
from guildstay.core.database.base import Base
from guildstay.core.logging.logger import get_logger

logger = get_logger(__name__)


class DatabaseInitializationError(RuntimeError):
    """The engine could not be built (bad or missing URL, driver failure)."""


class DatabaseNotInitializedError(RuntimeError):
    """A session was requested before `initialize()` or after `shutdown()`."""


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


@dataclass(frozen=True)
class _EngineSettings:
    """Config values frozen at `initialize()` time."""

    url: str
    echo: bool
    pool_class: Type[Pool]
    pool_size: int
    max_overflow: int
    pool_recycle: int
    pool_timeout: int
    statement_timeout_ms: int

    @property
    def url_scheme(self) -> str:
        return self.url.partition(":")[0] or "unknown"

    @property
    def is_postgres(self) -> bool:
        return self.url_scheme.startswith("postgresql")

    @property
    def is_sqlite(self) -> bool:
        return self.url_scheme.startswith("sqlite")

    def engine_kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"echo": self.echo, "poolclass": self.pool_class}
        if self.pool_class is AsyncAdaptedQueuePool:
            kwargs.update(
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_recycle=self.pool_recycle,
                pool_timeout=self.pool_timeout,
                pool_pre_ping=True,
            )
        return kwargs

    @classmethod
    def from_config(cls, database_url: Optional[str] = None) -> "_EngineSettings":
        url = database_url or Config.DATABASE_URL
        if not isinstance(url, str) or not url:
            raise DatabaseInitializationError("DATABASE_URL is not configured")

        null_pool = Config.is_testing() or url.startswith("sqlite")
        return cls(
            url=url,
            echo=bool(Config.DATABASE_ECHO),
            pool_class=NullPool if null_pool else AsyncAdaptedQueuePool,
            pool_size=int(Config.DATABASE_POOL_SIZE),
            max_overflow=int(Config.DATABASE_MAX_OVERFLOW),
            pool_recycle=int(Config.DATABASE_POOL_RECYCLE),
            pool_timeout=int(Config.DATABASE_POOL_TIMEOUT),
            statement_timeout_ms=int(Config.DATABASE_STATEMENT_TIMEOUT_MS),
        )


class DatabaseService:
    """Process-wide engine, session factory, and transaction boundary."""

    _engine: Optional[AsyncEngine] = None
    _session_factory: Optional[async_sessionmaker[AsyncSession]] = None
    _settings: Optional[_EngineSettings] = None
    _init_lock: asyncio.Lock = asyncio.Lock()

    # ========================================================================
    # Lifecycle
    # ========================================================================

    @classmethod
    async def initialize(cls, database_url: Optional[str] = None) -> None:
        """
        Build the engine. A second call while initialized does nothing.

        Args:
            database_url: use this URL instead of Config.DATABASE_URL

        Raises:
            DatabaseInitializationError: on missing URL or engine failure
        """
        async with cls._init_lock:
            if cls._engine is not None:
                logger.debug("DatabaseService already initialized")
                return

            try:
                settings = _EngineSettings.from_config(database_url)
                engine = create_async_engine(settings.url, **settings.engine_kwargs())
            except Exception as exc:
                logger.error(
                    "DatabaseService initialization failed",
                    extra={"error": str(exc), "error_type": type(exc).__name__},
                    exc_info=True,
                )
                if isinstance(exc, DatabaseInitializationError):
                    raise
                raise DatabaseInitializationError(
                    f"Could not create database engine: {exc}"
                ) from exc

            cls._settings = settings
            cls._engine = engine
            cls._session_factory = async_sessionmaker(
                bind=engine, class_=AsyncSession, expire_on_commit=False
            )

            logger.info(
                "DatabaseService initialized",
                extra={
                    "url_scheme": settings.url_scheme,
                    "pool_class": settings.pool_class.__name__,
                    "statement_timeout_ms": settings.statement_timeout_ms,
                },
            )

    @classmethod
    async def shutdown(cls) -> None:
        """Dispose the engine. Safe to call repeatedly."""
        async with cls._init_lock:
            engine = cls._engine
            if engine is None:
                return

            cls._engine = None
            cls._session_factory = None
            cls._settings = None
            await engine.dispose()
            logger.info("DatabaseService shut down")

    @classmethod
    async def create_schema(cls) -> None:
        """CREATE TABLE IF NOT EXISTS for every mapped model."""
        engine = cls._require_engine()

        # Registers every mapper on Base.metadata
        import guildstay.database.models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info(
            "Database schema ensured",
            extra={"table_count": len(Base.metadata.tables)},
        )

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._engine is not None and cls._session_factory is not None

    @classmethod
    async def health_check(cls) -> bool:
        """`SELECT 1` round trip. False when uninitialized or unreachable."""
        if cls._engine is None:
            logger.warning("Health check on uninitialized DatabaseService")
            return False

        start = time.perf_counter()
        try:
            async with cls._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (OperationalError, DBAPIError) as exc:
            logger.warning(
                "Database health check failed",
                extra={
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                    "duration_ms": _elapsed_ms(start),
                },
            )
            return False

        logger.debug("Database health check ok", extra={"duration_ms": _elapsed_ms(start)})
        return True

    # ========================================================================
    # Sessions
    # ========================================================================

    @classmethod
    def _ensure_initialized(cls) -> None:
        if cls._engine is None or cls._session_factory is None:
            logger.error("DatabaseService used before initialize()")
            raise DatabaseNotInitializedError(
                "DatabaseService is not initialized; call "
                "DatabaseService.initialize() at startup"
            )

    @classmethod
    def _require_engine(cls) -> AsyncEngine:
        cls._ensure_initialized()
        assert cls._engine is not None
        return cls._engine

    @classmethod
    def _open_session(cls) -> AsyncSession:
        cls._ensure_initialized()
        assert cls._session_factory is not None
        return cls._session_factory()

    @classmethod
    async def _apply_statement_timeout(cls, session: AsyncSession) -> None:
        settings = cls._settings
        if settings is not None and settings.is_postgres:
            await session.execute(
                text(f"SET LOCAL statement_timeout = {int(settings.statement_timeout_ms)}")
            )

    @classmethod
    @asynccontextmanager
    async def get_session(cls) -> AsyncGenerator[AsyncSession, None]:
        """
        Read-only session. Raises DatabaseNotInitializedError before yielding
        when the service has not been initialized.
        """
        session = cls._open_session()
        async with session:
            await cls._apply_statement_timeout(session)
            yield session

    @classmethod
    @asynccontextmanager
    async def get_transaction(cls) -> AsyncGenerator[AsyncSession, None]:
        """
        Unit of work: commit on normal exit; on any exception roll back, log a
        WARNING and re-raise. Callers that own the failure log it at ERROR.
        """
        session = cls._open_session()
        start = time.perf_counter()
        async with session:
            try:
                await cls._apply_statement_timeout(session)
                yield session
                await session.commit()
            except Exception as exc:
                await session.rollback()
                logger.warning(
                    "Transaction rolled back",
                    extra={
                        "error": str(exc),
                        "error_type": type(exc).__name__,
                        "duration_ms": _elapsed_ms(start),
                    },
                    exc_info=True,
                )
                raise

        logger.debug("Transaction committed", extra={"duration_ms": _elapsed_ms(start)})
