"""
Tag and collection count drift detection.

Tag and collection counts are incremented when a bookmark is created and are
never decremented afterwards, so they drift from the real number of bookmarks
once bookmarks are deleted or moved between collections. This task compares
each stored count with the live number of references and optionally rewrites
the stored value.

Usage:
    python -m tasks.count_drift          # Report only (default)
    python -m tasks.count_drift --fix    # Report and rewrite drifted counts
"""
import argparse
import asyncio
import logging
from dataclasses import dataclass, field

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import async_session_factory
from models.bookmark import Bookmark
from models.collection import Collection
from models.tag import Tag, bookmark_tags

logger = logging.getLogger(__name__)


@dataclass
class DriftStats:
    """Statistics from a count drift run."""

    tags_checked: int = 0
    tags_drifted: int = 0
    collections_checked: int = 0
    collections_drifted: int = 0
    fixed: int = 0
    drifted_ids: dict[str, tuple[int, int]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, int]:
        """Convert to simple dict for logging/return."""
        return {
            "tags_checked": self.tags_checked,
            "tags_drifted": self.tags_drifted,
            "collections_checked": self.collections_checked,
            "collections_drifted": self.collections_drifted,
            "fixed": self.fixed,
        }


async def check_count_drift(db: AsyncSession, fix: bool = False) -> DriftStats:
    """
    Compare stored counts with live reference counts.

    A tag's live count is the number of bookmarks linked to it, in any status.
    A collection's live count is the number of bookmarks pointing at it.

    Args:
        db: Database session.
        fix: If True, overwrite drifted counts with the live value and commit.

    Returns:
        DriftStats; ``drifted_ids`` maps each drifted id to (stored, live).
    """
    stats = DriftStats()

    tag_usage = (
        select(bookmark_tags.c.tag_id, func.count().label("live"))
        .group_by(bookmark_tags.c.tag_id)
        .subquery()
    )
    tag_rows = await db.execute(
        select(Tag.id, Tag.count, func.coalesce(tag_usage.c.live, 0))
        .outerjoin(tag_usage, tag_usage.c.tag_id == Tag.id),
    )
    for tag_id, stored, live in tag_rows.all():
        stats.tags_checked += 1
        if stored != live:
            stats.tags_drifted += 1
            stats.drifted_ids[tag_id] = (stored, live)
            logger.info("Tag %s count drift: stored=%d live=%d", tag_id, stored, live)
            if fix:
                await db.execute(update(Tag).where(Tag.id == tag_id).values(count=live))
                stats.fixed += 1

    collection_usage = (
        select(Bookmark.collection_id, func.count().label("live"))
        .where(Bookmark.collection_id.is_not(None))
        .group_by(Bookmark.collection_id)
        .subquery()
    )
    collection_rows = await db.execute(
        select(Collection.id, Collection.count, func.coalesce(collection_usage.c.live, 0))
        .outerjoin(collection_usage, collection_usage.c.collection_id == Collection.id),
    )
    for collection_id, stored, live in collection_rows.all():
        stats.collections_checked += 1
        if stored != live:
            stats.collections_drifted += 1
            stats.drifted_ids[collection_id] = (stored, live)
            logger.info(
                "Collection %s count drift: stored=%d live=%d",
                collection_id, stored, live,
            )
            if fix:
                await db.execute(
                    update(Collection).where(Collection.id == collection_id).values(count=live),
                )
                stats.fixed += 1

    if fix:
        await db.commit()

    return stats


async def run_count_drift(
    db: AsyncSession | None = None,
    fix: bool = False,
) -> DriftStats:
    """
    Entry point for the count drift check.

    Args:
        db: Database session. If None, creates one from async_session_factory.
        fix: If True, rewrite drifted counts.

    Returns:
        DriftStats with results.
    """
    logger.info("Starting count drift check (fix=%s)", fix)

    if db is not None:
        stats = await check_count_drift(db, fix=fix)
    else:
        async with async_session_factory() as session:
            stats = await check_count_drift(session, fix=fix)

    logger.info("Count drift check complete: %s", stats.to_dict())
    return stats


def main() -> None:
    """CLI entry point with --fix flag."""
    parser = argparse.ArgumentParser(
        description="Report (and optionally repair) drifted tag and collection counts.",
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Rewrite drifted counts with the live value (default: report only)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_count_drift(fix=args.fix))


if __name__ == "__main__":
    main()
