"""Tests for database engine and session management."""

from collections.abc import Generator

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import NullPool
from subway.core import database


@pytest.fixture(autouse=True)
def reset_database_globals() -> Generator[None]:
    """Reset lazily created engine and session factory around each test."""
    database._engine = None
    database._session_factory = None
    yield
    database._engine = None
    database._session_factory = None


def test_get_engine_is_lazy_singleton() -> None:
    engine = database.get_engine()

    assert database.get_engine() is engine


def test_sqlite_engine_uses_null_pool() -> None:
    assert isinstance(database.get_engine().pool, NullPool)


def test_get_session_factory_is_bound_to_engine() -> None:
    factory = database.get_session_factory()

    assert database.get_session_factory() is factory
    assert factory.kw["bind"] is database.get_engine()
    assert factory.kw["expire_on_commit"] is False


async def test_get_db_yields_working_session() -> None:
    generator = database.get_db()
    session = await anext(generator)

    assert isinstance(session, AsyncSession)
    assert (await session.execute(text("SELECT 1"))).scalar_one() == 1

    with pytest.raises(StopAsyncIteration):
        await anext(generator)
    await database.get_engine().dispose()
