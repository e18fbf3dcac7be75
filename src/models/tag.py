"""Tag model and the bookmark/tag association table."""
from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, UUIDv7Mixin

if TYPE_CHECKING:
    from models.bookmark import Bookmark


# Junction table for the many-to-many relationship between bookmarks and tags.
# Foreign keys do not cascade: the bookmark service removes association rows
# before it removes the bookmark.
bookmark_tags = Table(
    "bookmark_tags",
    Base.metadata,
    Column("bookmark_id", String(36), ForeignKey("bookmarks.id"), primary_key=True),
    Column("tag_id", String(36), ForeignKey("tags.id"), primary_key=True),
    # Index for lookups by tag (composite PK already indexes bookmark_id first)
    Index("ix_bookmark_tags_tag_id", "tag_id"),
)


class Tag(Base, UUIDv7Mixin):
    """
    Tag model - a named, colored label shared across bookmarks.

    Names are expected to be unique but this is only enforced by the
    lookup-or-create path in the tag service, not by a constraint. ``count`` is
    a denormalized usage counter maintained by increments on bookmark creation.
    """

    __tablename__ = "tags"

    # id provided by UUIDv7Mixin
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    color: Mapped[str] = mapped_column(String(100), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Read-only: association rows are written with explicit statements
    bookmarks: Mapped[list["Bookmark"]] = relationship(
        secondary=bookmark_tags,
        back_populates="tag_objects",
        viewonly=True,
    )
