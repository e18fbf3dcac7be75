"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from testcontainers.postgres import PostgresContainer

# Must be set before any app import triggers Settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from db.session import register_sqlite_functions  # noqa: E402
from models.base import Base  # noqa: E402

USE_POSTGRES = os.environ.get("TEST_DATABASE") == "postgres"


@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer]:
    """Start a PostgreSQL container for the test session."""
    with PostgresContainer("postgres:16", driver="asyncpg") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def database_url(request: pytest.FixtureRequest) -> str:
    """
    Database URL for the test session.

    In-memory SQLite by default; set TEST_DATABASE=postgres to run the same
    tests against a PostgreSQL container.
    """
    if USE_POSTGRES:
        container = request.getfixturevalue("postgres_container")
        url = container.get_connection_url()
    else:
        url = "sqlite+aiosqlite://"
    os.environ["DATABASE_URL"] = url
    return url


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine with all tables for one test."""
    if USE_POSTGRES:
        engine = create_async_engine(database_url, echo=False)
    else:
        # One shared connection, so the in-memory database lives for the test
        engine = create_async_engine(
            database_url,
            echo=False,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        register_sqlite_functions(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    if USE_POSTGRES:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """
    Create an async session for one test.

    On PostgreSQL the session runs inside an outer transaction that is rolled
    back afterwards (commits become savepoints). The SQLite database is
    discarded with its engine, so no outer transaction is needed there.
    """
    if not USE_POSTGRES:
        session_factory = async_sessionmaker(
            async_engine, class_=AsyncSession, expire_on_commit=False,
        )
        async with session_factory() as session:
            yield session
        return

    async with async_engine.connect() as connection:
        transaction = await connection.begin()
        session_factory = async_sessionmaker(
            bind=connection,
            class_=AsyncSession,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )
        try:
            async with session_factory() as session:
                yield session
        finally:
            await transaction.rollback()


@pytest.fixture
async def client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database session override."""
    # Clear the settings cache so it picks up DATABASE_URL from environment
    from core.config import get_settings

    get_settings.cache_clear()

    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
