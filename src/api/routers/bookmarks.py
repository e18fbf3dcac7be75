"""Bookmark endpoints: listing, creation, partial update and lifecycle actions."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_bookmark_filter
from schemas.bookmark import (
    BookmarkCreate,
    BookmarkListResponse,
    BookmarkResponse,
    BookmarkUpdate,
    FavoriteToggleResponse,
    MutationResponse,
)
from services import bookmark_service
from services.exceptions import InvalidStateError
from services.lifecycle import parse_action
from services.query_compiler import fetch_bookmarks
from shared.predicates import BookmarkFilter

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])


@router.get("", response_model=BookmarkListResponse)
async def list_bookmarks(
    request: BookmarkFilter = Depends(get_bookmark_filter),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkListResponse:
    """
    List bookmarks in one status partition, newest first.

    - **status**: partition to list (default: active); unknown values select active
    - **collectionId**: restrict to one collection; 'all' or empty means no restriction
    - **isFavorite**: only the literal 'true' restricts to favorites
    - **search**: case-insensitive substring of title, description or url
    - **tags**: comma-separated tag ids; a bookmark matches if it has any of them
    """
    rows = await fetch_bookmarks(db, request)
    return BookmarkListResponse(bookmarks=[BookmarkResponse.from_row(row) for row in rows])


@router.post("", response_model=MutationResponse, response_model_exclude_none=True)
async def create_bookmark(
    data: BookmarkCreate,
    db: AsyncSession = Depends(get_async_session),
) -> MutationResponse:
    """Create a bookmark; tags are given by name and created when missing."""
    bookmark = await bookmark_service.create_bookmark(db, data)
    return MutationResponse(success=True, id=bookmark.id)


@router.put("", response_model=MutationResponse, response_model_exclude_none=True)
async def update_bookmark(
    data: BookmarkUpdate,
    db: AsyncSession = Depends(get_async_session),
) -> MutationResponse:
    """Apply a partial update; the body carries the id and the fields to change."""
    if not data.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bookmark ID is required")  # noqa: E501
    bookmark = await bookmark_service.update_bookmark(db, data)
    if bookmark is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bookmark not found")
    return MutationResponse(success=True)


@router.post("/favorite", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    id: str | None = Query(default=None, description="Bookmark id"),  # noqa: A002
    db: AsyncSession = Depends(get_async_session),
) -> FavoriteToggleResponse:
    """Flip the favorite flag and return the stored value."""
    if not id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bookmark ID is required")  # noqa: E501
    bookmark = await bookmark_service.toggle_favorite(db, id)
    if bookmark is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bookmark not found")
    return FavoriteToggleResponse(success=True, is_favorite=bookmark.is_favorite)


@router.delete("", response_model=MutationResponse, response_model_exclude_none=True)
async def delete_bookmark(
    id: str | None = Query(default=None, description="Bookmark id"),  # noqa: A002
    action: str | None = Query(default=None, description="delete (default), archive, trash or restore"),  # noqa: E501
    db: AsyncSession = Depends(get_async_session),
) -> MutationResponse:
    """
    Apply a lifecycle action.

    - **delete**: permanently remove the bookmark and its tag links
    - **archive**: active -> archived
    - **trash**: active -> trashed
    - **restore**: archived or trashed -> active

    Returns 409 if the action is not allowed from the bookmark's current status.
    """
    if not id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Bookmark ID is required")  # noqa: E501
    try:
        lifecycle_action = parse_action(action)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown action: {action}",
        ) from e

    try:
        found = await bookmark_service.apply_action(db, id, lifecycle_action)
    except InvalidStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Bookmark not found")
    return MutationResponse(success=True)
