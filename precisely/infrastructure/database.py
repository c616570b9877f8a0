"""Database Session Manager — pooled store handle with bounded connect/teardown and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - Connect and dispose are bounded by connect_timeout seconds
    - SQLAlchemy exceptions escaping a session are mapped to BackendUnavailableError

Design Decisions:
    - Process-wide db_manager set in the FastAPI lifespan and torn down there
      (init_db / close_db), never created at import time
    - expire_on_commit=False: records stay readable after commit in async context
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import OperationalError, DBAPIError, SQLAlchemyError
from sqlalchemy import text

from precisely.core.errors import BackendUnavailableError, ErrorCategory
from precisely.db.base import Base
import precisely.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        connect_timeout: float = 10.0,
    ):
        self.connect_timeout = connect_timeout
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=connect_timeout,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def connect(self, create_tables: bool = True) -> None:
        """Verify connectivity (and create the collection table) within connect_timeout."""
        try:
            await asyncio.wait_for(
                self._connect(create_tables), timeout=self.connect_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"DB connect timed out after {self.connect_timeout}s",
                extra={"operation": "connect"},
            )
            raise BackendUnavailableError(
                "connect timed out", "connect", ErrorCategory.TIMEOUT,
            )
        except SQLAlchemyError as e:
            logger.error(f"DB connect failed: {e}", extra={"operation": "connect"})
            raise BackendUnavailableError(str(e), "connect")

    async def _connect(self, create_tables: bool) -> None:
        async with self.engine.begin() as conn:
            if create_tables:
                await conn.run_sync(Base.metadata.create_all)
            else:
                await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        """Dispose the pool within connect_timeout."""
        try:
            await asyncio.wait_for(
                self.engine.dispose(), timeout=self.connect_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"DB dispose timed out after {self.connect_timeout}s",
                extra={"operation": "disconnect"},
            )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise BackendUnavailableError("Connection or operational error", "execute")
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise BackendUnavailableError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise BackendUnavailableError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False


# Process-wide handle (initialized on startup, disposed on shutdown)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is None:
        return
    await db_manager.close()
    db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
