"""Tests for engine construction and the request session dependency."""
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.config import Settings
from db import session as session_module
from db.session import build_engine
from services.exceptions import StorageError


async def test__build_engine__sqlite_lower_folds_non_ascii() -> None:
    """SQLite's lower() is replaced so ILIKE folds accented letters."""
    engine = build_engine(Settings(_env_file=None, DATABASE_URL="sqlite+aiosqlite://"))
    try:
        async with engine.connect() as conn:
            result = await conn.execute(select(func.lower("ÉCOLE"), func.lower(None)))
            assert tuple(result.one()) == ("école", None)
    finally:
        await engine.dispose()


async def test__get_async_session__commit_failure_raises_storage_error(
    async_engine: AsyncEngine,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """A failing commit at request end is reported as a storage failure."""
    monkeypatch.setattr(
        session_module,
        "async_session_factory",
        async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False),
    )
    sessions = session_module.get_async_session()
    session = await anext(sessions)

    async def failing_commit() -> None:
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)

    with pytest.raises(StorageError) as exc_info:
        await anext(sessions)

    assert exc_info.value.operation == "commit"
    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert "Database error during commit" in caplog.text
