"""
Journeo Backend — Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       FastAPI session dependency.
How:   One engine per process with connection pooling; one session per request
       that commits on success and rolls back on any error. Every HTTP
       operation is therefore a single transaction: a guide delete removes
       its activities, comments, media rows and user links together or not at all.
Who:   Routes inject sessions via Depends(get_db_session); services receive them.

Concurrency:
    There is no application-level locking. Two concurrent updates to the same
    row are last-writer-wins unless the database is configured otherwise.
"""

import logging
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from journeo.config import settings
from journeo.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)

# Largest value a BIGINT / SQLite INTEGER column or OFFSET accepts
MAX_BIGINT = 2**63 - 1


def _engine_options() -> Dict[str, Any]:
    """
    Pool options for the configured backend.

    SQLite (aiosqlite) does not take QueuePool sizing arguments, so they are
    only passed for server databases. An in-memory SQLite database lives
    inside a single connection, so it is pinned with StaticPool.
    """
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    elif ":memory:" in settings.database_url:
        options.update(poolclass=StaticPool)
    return options


engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_options())

if settings.is_sqlite:

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # SQLite ignores ON DELETE CASCADE unless enabled per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

# expire_on_commit=False: response models are built from ORM objects after commit
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata drives Alembic and create_all."""
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    1. Creates a new session from the factory
    2. Yields it to the route handler
    3. On success: commits the transaction
    4. On error: rolls back and re-raises for the global error handlers
    5. Always: closes the session
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def flush_or_raise(session: AsyncSession, conflict_message: Optional[str] = None) -> None:
    """
    Flush pending writes, translating driver failures into application errors.

    An IntegrityError becomes ConflictError when the caller names the
    conflict it guards against (duplicate email); everything else becomes
    DatabaseError with the driver detail kept in `context` only.
    """
    try:
        await session.flush()
    except IntegrityError as e:
        if conflict_message:
            raise ConflictError(message=conflict_message) from e
        logger.error("Integrity error on flush: %s", str(e.orig))
        raise DatabaseError(context={"error": type(e).__name__}) from e
    except SQLAlchemyError as e:
        logger.error("Database error on flush: %s", str(e), exc_info=True)
        raise DatabaseError(context={"error": type(e).__name__}) from e


async def create_schema() -> None:
    """Create all tables from ORM metadata (AUTO_CREATE_SCHEMA / tests)."""
    # Import for side effect: registers every model on Base.metadata
    import journeo.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close all pooled connections; called from the application lifespan."""
    await engine.dispose()
