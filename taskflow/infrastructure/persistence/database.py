"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations. Engine and session factory are
created lazily on first use (get_db / get_db_transactional) so import does
not trigger Settings validation.
"""

import logging
from typing import Any

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from taskflow.core.config import get_settings
from taskflow.domain.exceptions import ConcurrentModificationError

logger = logging.getLogger(__name__)

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: Any = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None

# PostgreSQL deadlock_detected and serialization_failure: the transaction was
# rolled back by the server and the caller may retry.
LOCK_CONFLICT_SQLSTATES = frozenset({"40P01", "40001"})


def _ensure_engine() -> async_sessionmaker[AsyncSession]:
    """Create engine and AsyncSessionLocal on first use; return the session factory."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return AsyncSessionLocal
    settings = get_settings()
    engine_kwargs: dict[str, Any] = {"echo": settings.database_echo}
    if not settings.is_sqlite:
        command_timeout = (
            settings.db_command_timeout if settings.db_command_timeout is not None else 60
        )
        engine_kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.db_pool_size if settings.db_pool_size is not None else 10,
            max_overflow=(
                settings.db_max_overflow if settings.db_max_overflow is not None else 20
            ),
            pool_recycle=3600,
        )
        if "postgresql" in settings.database_url:
            engine_kwargs["connect_args"] = {"command_timeout": command_timeout}
    engine = create_async_engine(settings.database_url, **engine_kwargs)
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info("Database engine created (sqlite=%s)", settings.is_sqlite)
    return AsyncSessionLocal


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the shared session factory, creating the engine if needed.

    For scripts and background jobs that open their own sessions outside a
    request.
    """
    return _ensure_engine()


def get_engine() -> Any:
    """Return the shared async engine, creating it if needed."""
    _ensure_engine()
    return engine


async def dispose_engine() -> None:
    """Close pooled connections (lifespan shutdown)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None


def sqlstate_of(exc: DBAPIError) -> str | None:
    """Return the SQLSTATE the driver reported for exc, if any."""
    orig = exc.orig
    for source in (orig, getattr(orig, "__cause__", None)):
        code = getattr(source, "sqlstate", None) or getattr(source, "pgcode", None)
        if code:
            return str(code)
    return None


def is_lock_conflict(exc: DBAPIError) -> bool:
    """Return True when the server aborted the transaction over a deadlock or serialization failure."""
    return sqlstate_of(exc) in LOCK_CONFLICT_SQLSTATES


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


async def get_db():
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    session_factory = _ensure_engine()
    async with session_factory() as session:
        yield session


async def get_db_transactional():
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    Use for POST, PUT, PATCH, DELETE endpoints.

    Raises:
        ConcurrentModificationError: The server rolled the transaction back
            over a deadlock or serialization failure.
    """
    session_factory = _ensure_engine()
    try:
        async with session_factory() as session:
            async with session.begin():
                yield session
    except DBAPIError as exc:
        if not is_lock_conflict(exc):
            raise
        sqlstate = sqlstate_of(exc)
        logger.warning("Transaction rolled back on lock conflict: sqlstate=%s", sqlstate)
        raise ConcurrentModificationError("transaction", sqlstate or "unknown") from exc
