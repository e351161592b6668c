"""Pytest configuration and fixtures."""

import os

# Set test settings BEFORE any subway imports
# This must be done before subway.core.config loads settings
os.environ["DEBUG"] = "true"
os.environ["OTEL_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "INFO"
os.environ.setdefault("SECRET_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool
from subway.core.database import get_db
from subway.main import app
from subway.models import Base
from subway.models.subway import Station

from tests.helpers.test_data import make_unique_station_name

pytest_plugins = ["tests.fixtures.otel"]


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine]:
    """
    Create a throwaway SQLite database with all tables for one test.

    A file database (rather than :memory:) is used so every connection
    handed out by NullPool sees the same schema.

    Yields:
        AsyncEngine bound to the test database
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """
    Database session for the test database.

    Args:
        db_engine: Per-test engine

    Yields:
        Async SQLAlchemy session
    """
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """
    Async HTTP client whose requests use the test database session.

    Args:
        db_session: Test database session

    Yields:
        Async HTTP client with ASGI transport
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client() -> Generator[TestClient]:
    """
    FastAPI synchronous test client (runs the application lifespan).

    Yields:
        Synchronous test client with app context
    """
    with TestClient(app) as test_client:
        yield test_client


# Station fixtures


async def _create_station(db_session: AsyncSession, name: str) -> Station:
    station = Station(name=name)
    db_session.add(station)
    await db_session.commit()
    await db_session.refresh(station)
    return station


@pytest.fixture
async def stations(db_session: AsyncSession) -> dict[str, Station]:
    """
    Five persisted stations keyed A to E.

    Returns:
        Mapping of short key to Station row
    """
    return {key: await _create_station(db_session, make_unique_station_name(key)) for key in "ABCDE"}
