"""Database configuration and session management."""

import threading
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from subway.core.config import settings

# Created on first use, after settings are final
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None

# Thread locks for thread-safe singleton initialization
_engine_lock = threading.Lock()
_session_factory_lock = threading.Lock()


def get_engine() -> AsyncEngine:
    """
    Get or create database engine (lazy initialization).

    The engine is built on first use so tests and the CLI can adjust
    settings before any connection pool exists.

    Returns:
        AsyncEngine: SQLAlchemy async engine
    """
    global _engine  # noqa: PLW0603
    if _engine is None:
        with _engine_lock:
            if _engine is None:  # Double-checked locking
                if settings.DEBUG or settings.DATABASE_URL.startswith("sqlite"):
                    # SQLite files and debug runs open a connection per session
                    _engine = create_async_engine(
                        settings.DATABASE_URL,
                        echo=settings.DATABASE_ECHO,
                        poolclass=NullPool,
                    )
                else:
                    _engine = create_async_engine(
                        settings.DATABASE_URL,
                        echo=settings.DATABASE_ECHO,
                        pool_size=settings.DATABASE_POOL_SIZE,
                        max_overflow=settings.DATABASE_MAX_OVERFLOW,
                    )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get or create session factory (lazy initialization).

    Returns:
        async_sessionmaker[AsyncSession]: SQLAlchemy async session factory
    """
    global _session_factory  # noqa: PLW0603
    if _session_factory is None:
        with _session_factory_lock:
            if _session_factory is None:  # Double-checked locking
                _session_factory = async_sessionmaker(
                    get_engine(),
                    class_=AsyncSession,
                    expire_on_commit=False,
                    autoflush=False,
                )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession]:
    """
    Dependency for getting async database sessions.

    Yields:
        AsyncSession: Database session
    """
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()
