"""Service layer for collection operations."""
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import get_settings
from models.collection import Collection
from schemas.collection import CollectionCreate
from services.utils import storage_operation


async def list_collections(db: AsyncSession) -> list[Collection]:
    """Get all collections ordered by name."""
    with storage_operation("fetch collections"):
        result = await db.execute(
            select(Collection)
            .order_by(Collection.name, Collection.id)
            .execution_options(populate_existing=True),
        )
        return list(result.scalars().all())


async def create_collection(db: AsyncSession, data: CollectionCreate) -> Collection:
    """Create an empty collection, applying the default icon and color."""
    settings = get_settings()
    collection = Collection(
        name=data.name,
        icon=data.icon or settings.default_collection_icon,
        color=data.color or settings.default_collection_color,
        count=0,
    )
    with storage_operation("create collection"):
        db.add(collection)
        await db.flush()
    return collection


async def increment_count(db: AsyncSession, collection_id: str) -> None:
    """
    Add one to a collection's bookmark count.

    An unknown id updates nothing: collection references are weak.
    """
    await db.execute(
        update(Collection)
        .where(Collection.id == collection_id)
        .values(count=Collection.count + 1),
    )
