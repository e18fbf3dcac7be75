"""
Compile bookmark filter predicates into a single aggregated SQL query.

The statement left-joins bookmarks to their tags, applies every predicate in
the WHERE clause, groups by bookmark and aggregates tag names and ids into
comma-separated strings. Results are always newest first; any other ordering
is applied by the client on top of this one.
"""
import logging
from dataclasses import dataclass

from sqlalchemy import ColumnElement, Select, exists, func, or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from models.tag import Tag, bookmark_tags
from shared.predicates import BookmarkFilter, Predicate, PredicateKind, build_predicates
from services.utils import LIKE_ESCAPE, escape_ilike, storage_operation

logger = logging.getLogger(__name__)

TAG_SEPARATOR = ","

# Separate alias for the tag membership test so that it does not correlate
# with the bookmark_tags join of the outer query.
_matched_tags = bookmark_tags.alias("matched_tags")


@dataclass
class BookmarkRow:
    """One bookmark with its aggregated tags."""

    bookmark: Bookmark
    tag_names: list[str]
    tag_ids: list[str]


def _split_aggregate(value: str | None) -> list[str]:
    """Split an aggregated string; NULL (no tags) becomes an empty list."""
    if not value:
        return []
    return sorted(part for part in value.split(TAG_SEPARATOR) if part)


def _search_clause(search: str) -> ColumnElement[bool]:
    pattern = f"%{escape_ilike(search)}%"
    return or_(
        Bookmark.title.ilike(pattern, escape=LIKE_ESCAPE),
        Bookmark.description.ilike(pattern, escape=LIKE_ESCAPE),
        Bookmark.url.ilike(pattern, escape=LIKE_ESCAPE),
    )


def _tag_membership_clause(tag_ids: tuple[str, ...]) -> ColumnElement[bool]:
    """
    Match bookmarks having at least one of ``tag_ids``.

    Evaluated per bookmark before aggregation, so a bookmark that matches keeps
    its full tag list in the aggregated output.
    """
    return exists(
        select(_matched_tags.c.bookmark_id).where(
            _matched_tags.c.bookmark_id == Bookmark.id,
            _matched_tags.c.tag_id.in_(tag_ids),
        ),
    )


def predicate_clause(predicate: Predicate) -> ColumnElement[bool]:
    """Translate one predicate into a SQL boolean expression."""
    if predicate.kind is PredicateKind.STATUS:
        return Bookmark.status == predicate.values[0]
    if predicate.kind is PredicateKind.COLLECTION:
        return Bookmark.collection_id == predicate.values[0]
    if predicate.kind is PredicateKind.FAVORITE:
        return Bookmark.is_favorite == true()
    if predicate.kind is PredicateKind.SEARCH:
        return _search_clause(predicate.values[0])
    return _tag_membership_clause(predicate.values)


def compile_bookmark_query(predicates: list[Predicate]) -> Select:
    """
    Build the bookmark listing statement for a predicate list.

    Bound parameters appear in the compiled statement in predicate order.
    """
    tag_names = func.aggregate_strings(Tag.name, TAG_SEPARATOR).label("tag_names")
    tag_ids = func.aggregate_strings(Tag.id, TAG_SEPARATOR).label("tag_ids")
    return (
        select(Bookmark, tag_names, tag_ids)
        .outerjoin(bookmark_tags, bookmark_tags.c.bookmark_id == Bookmark.id)
        .outerjoin(Tag, Tag.id == bookmark_tags.c.tag_id)
        .where(*[predicate_clause(p) for p in predicates])
        .group_by(Bookmark.id)
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
    )


async def fetch_bookmarks(db: AsyncSession, request: BookmarkFilter) -> list[BookmarkRow]:
    """
    Fetch the bookmarks matching a filter request, newest first.

    Args:
        db: Database session.
        request: Filter request (status, collection, favorite, search, tags).

    Returns:
        One BookmarkRow per matching bookmark.

    Raises:
        StorageError: If the query fails. No partial results are returned.
    """
    statement = compile_bookmark_query(build_predicates(request)).execution_options(
        populate_existing=True,
    )
    with storage_operation("fetch bookmarks"):
        result = await db.execute(statement)
        rows = result.all()
    logger.debug("Fetched %d bookmarks for %r", len(rows), request)
    return [
        BookmarkRow(
            bookmark=row[0],
            tag_names=_split_aggregate(row.tag_names),
            tag_ids=_split_aggregate(row.tag_ids),
        )
        for row in rows
    ]
