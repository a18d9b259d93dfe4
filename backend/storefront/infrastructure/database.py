"""Database Session Manager - engine construction, sessions and schema helpers.

Invariants:
    - Every session rolls back on exception, so a failed request never
      leaves half a write behind
    - A unique-constraint violation surfaces as DataIntegrityError (409);
      every other SQLAlchemy failure as DatabaseError (503)
    - An in-memory SQLite URL always gets a single shared connection, so
      every session sees the same database

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: services return ORM rows after commit and the
      routes serialize them outside the session's lazy-load reach
    - Schema is owned by alembic; create_schema exists for tests and for
      throwaway SQLite databases (DATABASE_AUTO_CREATE)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import inspect, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

from storefront.core.errors import DataIntegrityError, DatabaseError
from storefront.db.base import Base

logger = logging.getLogger(__name__)


def build_engine(
    database_url: str, pool_size: int = 20, max_overflow: int = 10, echo: bool = False,
) -> AsyncEngine:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_async_engine(
            url, echo=echo, pool_pre_ping=True, pool_size=pool_size,
            max_overflow=max_overflow, pool_recycle=3600,
        )
    if url.database in (None, "", ":memory:"):
        return create_async_engine(
            url, echo=echo, poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    return create_async_engine(url, echo=echo)


def _constraint_hint(error: IntegrityError) -> str:
    """First line of the driver message, e.g. 'UNIQUE constraint failed: products.slug'."""
    return str(error.orig).splitlines()[0] if error.orig is not None else "constraint"


class DatabaseSessionManager:
    """Owns the engine and hands out sessions with rollback-on-error."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        self.engine = build_engine(database_url, pool_size, max_overflow, echo)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            hint = _constraint_hint(e)
            logger.warning(f"DB integrity conflict: {hint}")
            raise DataIntegrityError(hint) from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "query") from e
        finally:
            await session.close()

    async def create_schema(self) -> None:
        import storefront.models  # noqa: F401  registers every table on Base.metadata
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def health_check(self) -> bool:
        """SELECT 1 through a managed session (readiness check)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def missing_tables(self) -> list[str]:
        """Model tables absent from the connected database, sorted."""
        import storefront.models  # noqa: F401
        async with self.engine.connect() as conn:
            existing = await conn.run_sync(
                lambda sync_conn: set(inspect(sync_conn).get_table_names())
            )
        return sorted(set(Base.metadata.tables) - existing)

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
