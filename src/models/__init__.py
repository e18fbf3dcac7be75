"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.tag import Tag, bookmark_tags  # Must be before bookmark due to import
from models.bookmark import Bookmark, BookmarkStatus
from models.collection import Collection

__all__ = [
    "Base",
    "Bookmark",
    "BookmarkStatus",
    "Collection",
    "Tag",
    "TimestampMixin",
    "UUIDv7Mixin",
    "bookmark_tags",
]
