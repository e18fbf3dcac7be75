"""FastAPI dependencies for injection."""
from fastapi import Query

from core.config import get_settings
from db.session import get_async_session
from shared.predicates import BookmarkFilter


def get_bookmark_filter(
    status_: str | None = Query(default=None, alias="status", description="active, archived or trashed"),  # noqa: E501
    collection_id: str | None = Query(default=None, alias="collectionId", description="Collection id, or 'all'"),  # noqa: E501
    is_favorite: str | None = Query(default=None, alias="isFavorite", description="'true' to restrict to favorites"),  # noqa: E501
    search: str | None = Query(default=None, description="Substring of title, description or url (case-insensitive)"),  # noqa: E501
    tags: str | None = Query(default=None, description="Comma-separated tag ids (matches any)"),
) -> BookmarkFilter:
    """
    Read a bookmark filter from the query string.

    Values are passed through unvalidated; ``BookmarkFilter`` coerces anything
    it cannot use to "no constraint".
    """
    return BookmarkFilter(
        status=status_,
        collection_id=collection_id,
        is_favorite=is_favorite,
        search=search,
        tags=tags,
    )


__all__ = [
    "get_async_session",
    "get_bookmark_filter",
    "get_settings",
]
