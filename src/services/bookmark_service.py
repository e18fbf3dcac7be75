"""Service layer for bookmark CRUD and lifecycle operations."""
import logging

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from models.base import utcnow
from models.bookmark import Bookmark, BookmarkStatus
from models.tag import bookmark_tags
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services import collection_service
from services.favicon import derive_favicon
from services.lifecycle import LifecycleAction, next_status
from services.tag_service import get_or_create_tags
from services.utils import storage_operation

logger = logging.getLogger(__name__)


async def get_bookmark(db: AsyncSession, bookmark_id: str) -> Bookmark | None:
    """Get a bookmark by ID in any status."""
    with storage_operation("fetch bookmark"):
        result = await db.execute(select(Bookmark).where(Bookmark.id == bookmark_id))
        return result.scalar_one_or_none()


async def create_bookmark(db: AsyncSession, data: BookmarkCreate) -> Bookmark:
    """
    Create a new active bookmark.

    Side effects, in order:
    1. The bookmark row is inserted with a generated id and status "active".
       A favicon is derived from the URL host when none is supplied.
    2. Each tag name is looked up or created (usage count +1 either way) and
       linked to the bookmark.
    3. The referenced collection's count is incremented.

    These counts are not decremented by archive, trash or delete.

    Args:
        db: Database session.
        data: Bookmark creation data.

    Returns:
        The created bookmark.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    favicon = data.favicon
    if favicon is None:
        favicon = derive_favicon(data.url, get_settings().favicon_service_template)

    now = utcnow()
    bookmark = Bookmark(
        title=data.title,
        url=data.url,
        description=data.description,
        favicon=favicon,
        collection_id=data.collection_id,
        is_favorite=data.is_favorite,
        has_dark_icon=data.has_dark_icon,
        status=BookmarkStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )
    with storage_operation("create bookmark"):
        db.add(bookmark)
        await db.flush()

        tags = await get_or_create_tags(db, data.tags)
        if tags:
            await db.execute(
                insert(bookmark_tags),
                [{"bookmark_id": bookmark.id, "tag_id": tag.id} for tag in tags],
            )

        if data.collection_id:
            await collection_service.increment_count(db, data.collection_id)

    logger.info("Created bookmark %s with %d tags", bookmark.id, len(tags))
    return bookmark


async def update_bookmark(db: AsyncSession, data: BookmarkUpdate) -> Bookmark | None:
    """
    Apply a partial update to a bookmark.

    Only fields present in the request are changed; ``updated_at`` is always
    bumped. Tags and status are not editable here.

    Returns:
        The updated bookmark, or None if not found.
    """
    if not data.id:
        return None
    bookmark = await get_bookmark(db, data.id)
    if bookmark is None:
        return None

    for field, value in data.changes().items():
        setattr(bookmark, field, value)
    bookmark.updated_at = utcnow()

    with storage_operation("update bookmark"):
        await db.flush()
    return bookmark


async def toggle_favorite(db: AsyncSession, bookmark_id: str) -> Bookmark | None:
    """
    Flip a bookmark's favorite flag.

    The stored value is authoritative: clients should apply the returned flag
    rather than flipping their local copy.

    Returns:
        The updated bookmark, or None if not found.
    """
    bookmark = await get_bookmark(db, bookmark_id)
    if bookmark is None:
        return None

    bookmark.is_favorite = not bookmark.is_favorite
    bookmark.updated_at = utcnow()
    with storage_operation("toggle favorite"):
        await db.flush()
    return bookmark


async def delete_bookmark(db: AsyncSession, bookmark_id: str) -> bool:
    """
    Permanently delete a bookmark.

    Tag association rows are removed first, then the bookmark row. Tag and
    collection counts are left unchanged.

    Returns:
        True if deleted, False if not found.
    """
    bookmark = await get_bookmark(db, bookmark_id)
    if bookmark is None:
        return False

    with storage_operation("delete bookmark"):
        await db.execute(
            delete(bookmark_tags).where(bookmark_tags.c.bookmark_id == bookmark_id),
        )
        await db.delete(bookmark)
        await db.flush()
    logger.info("Deleted bookmark %s", bookmark_id)
    return True


async def apply_action(
    db: AsyncSession,
    bookmark_id: str,
    action: LifecycleAction,
) -> bool:
    """
    Apply a lifecycle action (archive, trash, restore or delete).

    Actions whose target is the current status leave the bookmark unchanged.

    Args:
        db: Database session.
        bookmark_id: ID of the bookmark.
        action: The lifecycle action.

    Returns:
        True if the bookmark exists (and the action was applied), False otherwise.

    Raises:
        InvalidStateError: If the action is not allowed from the current status.
    """
    if action is LifecycleAction.DELETE:
        return await delete_bookmark(db, bookmark_id)

    bookmark = await get_bookmark(db, bookmark_id)
    if bookmark is None:
        return False

    target = next_status(bookmark.status, action)
    if target != bookmark.status:
        logger.info(
            "Bookmark %s: %s -> %s (%s)",
            bookmark_id, bookmark.status.value, target.value, action.value,
        )
        bookmark.status = target
        bookmark.updated_at = utcnow()
        with storage_operation(f"{action.value} bookmark"):
            await db.flush()
    return True
