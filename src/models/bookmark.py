"""Bookmark model for storing saved URLs."""
import enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.tag import bookmark_tags

if TYPE_CHECKING:
    from models.tag import Tag


class BookmarkStatus(str, enum.Enum):
    """Visibility partition of a bookmark. Deletion removes the row instead."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    TRASHED = "trashed"


class Bookmark(Base, UUIDv7Mixin, TimestampMixin):
    """Bookmark model - stores URLs with metadata, a collection and tags."""

    __tablename__ = "bookmarks"

    # id provided by UUIDv7Mixin
    title: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    favicon: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Weak reference: a collection may be removed without touching bookmarks
    collection_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True,
    )
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_dark_icon: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[BookmarkStatus] = mapped_column(
        Enum(
            BookmarkStatus,
            name="bookmark_status",
            native_enum=False,
            length=16,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=BookmarkStatus.ACTIVE,
        index=True,
    )

    # Read-only: association rows are written with explicit statements
    tag_objects: Mapped[list["Tag"]] = relationship(
        secondary=bookmark_tags,
        back_populates="bookmarks",
        viewonly=True,
    )
