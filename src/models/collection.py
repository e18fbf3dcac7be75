"""Collection model for grouping bookmarks."""
from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, UUIDv7Mixin


class Collection(Base, UUIDv7Mixin):
    """
    Collection model - a named bucket a bookmark may belong to.

    ``count`` is denormalized: it is incremented when a bookmark is created in
    the collection and is not recomputed afterwards.
    """

    __tablename__ = "collections"

    # id provided by UUIDv7Mixin
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    icon: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(100), nullable=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
