"""Service layer for tag operations."""
import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from models.tag import Tag
from schemas.tag import TagCreate
from services.utils import storage_operation

logger = logging.getLogger(__name__)


async def get_or_create_tags(
    db: AsyncSession,
    tag_names: list[str],
) -> list[Tag]:
    """
    Look up tags by name, creating the missing ones.

    Each existing tag has its usage count incremented; a new tag is created
    with the default color and a count of 1. Names are not unique at the schema
    level, so when several tags share a name the oldest one is used.

    Args:
        db: Database session.
        tag_names: Normalized tag names.

    Returns:
        One Tag per name, in the order given.
    """
    if not tag_names:
        return []

    result = await db.execute(
        select(Tag).where(Tag.name.in_(tag_names)).order_by(Tag.id),
    )
    existing: dict[str, Tag] = {}
    for tag in result.scalars():
        existing.setdefault(tag.name, tag)

    default_color = get_settings().default_tag_color
    tags = []
    for name in tag_names:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name, color=default_color, count=1)
            db.add(tag)
            logger.info("Created tag %r", name)
        else:
            await db.execute(
                update(Tag).where(Tag.id == tag.id).values(count=Tag.count + 1),
            )
        tags.append(tag)

    await db.flush()
    return tags


async def list_tags(db: AsyncSession) -> list[Tag]:
    """Get all tags ordered by name."""
    with storage_operation("fetch tags"):
        result = await db.execute(
            select(Tag)
            .order_by(Tag.name, Tag.id)
            .execution_options(populate_existing=True),
        )
        return list(result.scalars().all())


async def create_tag(db: AsyncSession, data: TagCreate) -> Tag:
    """
    Create a tag with a usage count of 0.

    No uniqueness check is made; the lookup-or-create path used at bookmark
    creation is the only place names are de-duplicated.
    """
    tag = Tag(
        name=data.name,
        color=data.color or get_settings().default_tag_color,
        count=0,
    )
    with storage_operation("create tag"):
        db.add(tag)
        await db.flush()
    return tag
