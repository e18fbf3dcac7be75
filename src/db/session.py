"""Async SQLAlchemy session factory."""
from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings, get_settings
from models import Base
from services.utils import storage_operation


def _unicode_lower(value: object) -> object:
    return value.lower() if isinstance(value, str) else value


def register_sqlite_functions(engine: AsyncEngine) -> None:
    """
    Replace SQLite's ``lower()`` on every new connection.

    The built-in only folds ASCII letters, and SQLAlchemy compiles ILIKE on
    SQLite to ``lower(x) LIKE lower(y)``. The replacement uses ``str.lower``,
    which is what in-memory search matching uses.
    """
    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_functions(dbapi_connection, connection_record):  # noqa: ANN001, ANN202
        dbapi_connection.create_function("lower", 1, _unicode_lower)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to server databases."""
    if settings.is_sqlite:
        sqlite_engine = create_async_engine(settings.database_url, echo=settings.db_echo)
        register_sqlite_functions(sqlite_engine)
        return sqlite_engine
    return create_async_engine(
        settings.database_url,
        echo=settings.db_echo,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
    )


settings = get_settings()

engine = build_engine(settings)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create all tables that do not exist yet. There are no migrations."""
    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """
    Yield an async database session.

    Uses unit-of-work pattern: services use flush() for refreshing objects,
    commit happens once here at request end. If anything fails, the changes
    of the current request are rolled back. A failed commit surfaces as
    ``StorageError`` like any other storage failure.
    """
    async with async_session_factory() as session:
        try:
            yield session
            with storage_operation("commit"):
                await session.commit()
        except Exception:
            await session.rollback()
            raise
