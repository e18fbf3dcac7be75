"""SQLAlchemy declarative base with common mixins."""
from datetime import UTC, datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from uuid6 import uuid7


def generate_id() -> str:
    """Generate a time-ordered opaque identifier."""
    return str(uuid7())


def utcnow() -> datetime:
    """Current wall-clock time, timezone-aware."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UUIDv7Mixin:
    """
    Mixin that adds a string primary key generated from a UUIDv7.

    Identifiers are opaque to clients; they are stored as their canonical
    36-character text form so the same schema works on PostgreSQL and SQLite.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at columns.

    Timestamps are assigned by the application rather than by a server default,
    so that rows created within one transaction still get distinct, increasing
    values on every supported database.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,  # Index for the default newest-first ordering
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
