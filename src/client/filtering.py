"""
In-memory filtering and sorting of a bookmark snapshot.

This is the client-side counterpart of the SQL query compiler: it evaluates
the same predicates (see ``shared.predicates``) against bookmarks already held
in memory, so a view can be re-derived on every state change without a round
trip. Every function here is pure and returns a new list.
"""
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Literal, TypeVar

from shared.predicates import (
    ALL_COLLECTIONS,
    BookmarkFilter,
    FilterableBookmark,
    Predicate,
    PredicateKind,
    build_predicates,
)

SortBy = Literal["date-newest", "date-oldest", "alpha-az", "alpha-za"]
FilterType = Literal["all", "favorites", "with-tags", "without-tags"]

B = TypeVar("B", bound=FilterableBookmark)

# Order in which the view filters are applied before sorting
_VIEW_PREDICATE_ORDER = (PredicateKind.COLLECTION, PredicateKind.TAGS, PredicateKind.SEARCH)


@dataclass(frozen=True)
class ViewFilter:
    """Filter and sort selections of a bookmark list view."""

    selected_collection: str = ALL_COLLECTIONS
    selected_tags: tuple[str, ...] = ()
    search_query: str = ""
    filter_type: FilterType = "all"
    sort_by: SortBy = "date-newest"


def apply_predicates(snapshot: Iterable[B], predicates: Sequence[Predicate]) -> list[B]:
    """Keep the bookmarks matching every predicate, preserving snapshot order."""
    return [item for item in snapshot if all(p.matches(item) for p in predicates)]


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def title_collation_key(title: str) -> tuple[str, str, str]:
    """
    Sort key approximating locale collation of titles.

    Compares base letters first, ignoring accents and case ("Éclair" sorts
    between "apple" and "zoo"). Ties are broken by accents (unaccented first),
    then by case (lowercase first).
    """
    return (
        _strip_accents(title).casefold(),
        unicodedata.normalize("NFKD", title).casefold(),
        title.swapcase(),
    )


def sort_bookmarks(items: Iterable[B], sort_by: SortBy) -> list[B]:
    """
    Sort bookmarks by one of the four supported orders.

    Date orders break ties on id, matching the server's newest-first order.
    Title orders are stable: equal titles keep their current relative order.
    Unknown sort names leave the order unchanged.
    """
    items = list(items)
    if sort_by == "date-newest":
        return sorted(items, key=lambda b: (b.created_at, b.id), reverse=True)
    if sort_by == "date-oldest":
        return sorted(items, key=lambda b: (b.created_at, b.id))
    if sort_by == "alpha-az":
        return sorted(items, key=lambda b: title_collation_key(b.title))
    if sort_by == "alpha-za":
        return sorted(items, key=lambda b: title_collation_key(b.title), reverse=True)
    return items


def search_bookmarks(items: Iterable[B], query: str) -> list[B]:
    """Apply only the free-text search; an empty query keeps everything."""
    predicates = [
        p for p in build_predicates(BookmarkFilter(search=query))
        if p.kind is PredicateKind.SEARCH
    ]
    return apply_predicates(items, predicates)


def _apply_filter_type(items: list[B], filter_type: FilterType) -> list[B]:
    if filter_type == "favorites":
        return [b for b in items if b.is_favorite]
    if filter_type == "with-tags":
        return [b for b in items if b.tag_ids]
    if filter_type == "without-tags":
        return [b for b in items if not b.tag_ids]
    return items


def derive_bookmarks(snapshot: Iterable[B], view: ViewFilter) -> list[B]:
    """
    Derive the visible list for a view: collection, tags, search, type, sort.

    The tag selection matches bookmarks having any selected tag; an empty
    selection, an empty search and the "all" filter type impose no constraint.
    Sorting is always applied, even to an empty result.
    """
    request = BookmarkFilter(
        collection_id=view.selected_collection,
        tags=list(view.selected_tags),
        search=view.search_query,
    )
    by_kind = {p.kind: p for p in build_predicates(request)}

    items = list(snapshot)
    for kind in _VIEW_PREDICATE_ORDER:
        predicate = by_kind.get(kind)
        if predicate is not None:
            items = [b for b in items if predicate.matches(b)]
    items = _apply_filter_type(items, view.filter_type)
    return sort_bookmarks(items, view.sort_by)


def favorite_bookmarks(snapshot: Iterable[B], view: ViewFilter) -> list[B]:
    """Favorites view: favorites only, then search, then sort."""
    items = [b for b in snapshot if b.is_favorite]
    return sort_bookmarks(search_bookmarks(items, view.search_query), view.sort_by)
