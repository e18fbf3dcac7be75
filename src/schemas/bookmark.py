"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from models.bookmark import BookmarkStatus

if TYPE_CHECKING:
    from services.query_compiler import BookmarkRow

# Request and response bodies use camelCase keys on the wire
CAMEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    from_attributes=True,
)


def normalize_tag_names(names: Any) -> list[str]:
    """
    Normalize tag names supplied at creation.

    Names are trimmed; blank and non-text entries are dropped, duplicates are
    removed keeping the first occurrence. Case is preserved.
    """
    if not isinstance(names, list | tuple):
        return []
    normalized: list[str] = []
    for name in names:
        if not isinstance(name, str):
            continue
        trimmed = name.strip()
        if trimmed and trimmed not in normalized:
            normalized.append(trimmed)
    return normalized


def _text_or_empty(v: Any) -> str:
    return v if isinstance(v, str) else ""


def _flag(v: Any) -> bool:
    return v is True


class BookmarkCreate(BaseModel):
    """
    Schema for creating a new bookmark.

    Missing or invalid values are coerced to safe defaults instead of being
    rejected (empty string, null, false).
    """

    model_config = CAMEL_CONFIG

    title: str = ""
    url: str = ""
    description: str = ""
    favicon: str | None = None
    collection_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    is_favorite: bool = False
    has_dark_icon: bool = False

    @field_validator("title", "url", "description", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Non-text values become empty strings."""
        return _text_or_empty(v)

    @field_validator("favicon", "collection_id", mode="before")
    @classmethod
    def coerce_optional_text(cls, v: Any) -> str | None:
        """Empty or non-text values become null."""
        return v if isinstance(v, str) and v else None

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> list[str]:
        """Normalize tag names."""
        return normalize_tag_names(v)

    @field_validator("is_favorite", "has_dark_icon", mode="before")
    @classmethod
    def coerce_flags(cls, v: Any) -> bool:
        """Only a literal true sets a flag."""
        return _flag(v)


class BookmarkUpdate(BaseModel):
    """
    Schema for a partial bookmark update.

    Only fields present in the request body are applied; use
    ``model_dump(exclude_unset=True)`` to read them.
    """

    model_config = CAMEL_CONFIG

    id: str | None = None
    title: str | None = None
    url: str | None = None
    description: str | None = None
    favicon: str | None = None
    collection_id: str | None = None
    is_favorite: bool | None = None
    has_dark_icon: bool | None = None

    @field_validator("title", "url", "description", "favicon", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Non-text values become empty strings."""
        return _text_or_empty(v)

    @field_validator("collection_id", mode="before")
    @classmethod
    def coerce_collection(cls, v: Any) -> str | None:
        """Empty values clear the collection."""
        return v if isinstance(v, str) and v else None

    @field_validator("is_favorite", "has_dark_icon", mode="before")
    @classmethod
    def coerce_flags(cls, v: Any) -> bool:
        """Only a literal true sets a flag."""
        return _flag(v)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied by the caller, excluding the id."""
        return self.model_dump(exclude_unset=True, exclude={"id"})


class BookmarkResponse(BaseModel):
    """
    Schema for a bookmark in list responses.

    Also used by the client as the snapshot item type: it carries everything
    the in-memory filter needs (status, collection, flags, text and tag ids).
    """

    model_config = CAMEL_CONFIG

    id: str
    title: str
    url: str
    description: str = ""
    favicon: str = ""
    collection_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    tag_ids: list[str] = Field(default_factory=list)
    created_at: datetime
    is_favorite: bool = False
    has_dark_icon: bool = False
    status: BookmarkStatus = BookmarkStatus.ACTIVE

    @classmethod
    def from_row(cls, row: "BookmarkRow") -> "BookmarkResponse":
        """Build a response item from a bookmark and its aggregated tags."""
        bookmark = row.bookmark
        return cls(
            id=bookmark.id,
            title=bookmark.title,
            url=bookmark.url,
            description=bookmark.description or "",
            favicon=bookmark.favicon or "",
            collection_id=bookmark.collection_id,
            tags=row.tag_names,
            tag_ids=row.tag_ids,
            created_at=bookmark.created_at,
            is_favorite=bookmark.is_favorite,
            has_dark_icon=bookmark.has_dark_icon,
            status=bookmark.status,
        )


class BookmarkListResponse(BaseModel):
    """Schema for the bookmark list response."""

    bookmarks: list[BookmarkResponse]


class MutationResponse(BaseModel):
    """Schema for create/update/delete acknowledgements."""

    success: bool
    id: str | None = None


class FavoriteToggleResponse(BaseModel):
    """Schema for the favorite toggle response; carries the stored value."""

    model_config = CAMEL_CONFIG

    success: bool
    is_favorite: bool
