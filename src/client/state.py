"""
Client-side application state.

``BookmarksState`` is an immutable value: every transition returns a new state
and leaves the old one untouched, so observers can compare snapshots. The
three partitions (active, archived, trashed) are caches of the server's data;
nothing here talks to the server.
"""
from dataclasses import dataclass, field, replace
from typing import Literal

from client.filtering import (
    FilterType,
    SortBy,
    ViewFilter,
    derive_bookmarks,
    favorite_bookmarks,
    search_bookmarks,
)
from models.bookmark import BookmarkStatus
from schemas.bookmark import BookmarkResponse
from schemas.collection import CollectionResponse
from schemas.tag import TagResponse
from shared.predicates import ALL_COLLECTIONS

ViewMode = Literal["grid", "list"]

_PARTITIONS = {
    BookmarkStatus.ACTIVE: "bookmarks",
    BookmarkStatus.ARCHIVED: "archived_bookmarks",
    BookmarkStatus.TRASHED: "trashed_bookmarks",
}


@dataclass(frozen=True)
class BookmarkStats:
    """Dashboard counters."""

    total: int
    favorites: int
    collections: int
    tags: int


@dataclass(frozen=True)
class BookmarksState:
    """Snapshot of cached bookmarks plus the current view selections."""

    bookmarks: tuple[BookmarkResponse, ...] = ()
    archived_bookmarks: tuple[BookmarkResponse, ...] = ()
    trashed_bookmarks: tuple[BookmarkResponse, ...] = ()
    collections: tuple[CollectionResponse, ...] = ()
    tags: tuple[TagResponse, ...] = ()
    selected_collection: str = ALL_COLLECTIONS
    selected_tags: tuple[str, ...] = ()
    search_query: str = ""
    view_mode: ViewMode = "grid"
    sort_by: SortBy = "date-newest"
    filter_type: FilterType = "all"
    last_error: str | None = field(default=None, compare=False)

    # --- View selections ---

    def with_selected_collection(self, collection_id: str) -> "BookmarksState":
        return replace(self, selected_collection=collection_id)

    def with_toggled_tag(self, tag_id: str) -> "BookmarksState":
        """Add the tag to the selection, or remove it if already selected."""
        if tag_id in self.selected_tags:
            selected = tuple(t for t in self.selected_tags if t != tag_id)
        else:
            selected = (*self.selected_tags, tag_id)
        return replace(self, selected_tags=selected)

    def with_cleared_tags(self) -> "BookmarksState":
        return replace(self, selected_tags=())

    def with_search_query(self, query: str) -> "BookmarksState":
        return replace(self, search_query=query)

    def with_view_mode(self, mode: ViewMode) -> "BookmarksState":
        return replace(self, view_mode=mode)

    def with_sort_by(self, sort_by: SortBy) -> "BookmarksState":
        return replace(self, sort_by=sort_by)

    def with_filter_type(self, filter_type: FilterType) -> "BookmarksState":
        return replace(self, filter_type=filter_type)

    def with_error(self, message: str | None) -> "BookmarksState":
        return replace(self, last_error=message)

    # --- Cached data ---

    def with_bookmarks(self, bookmarks: list[BookmarkResponse]) -> "BookmarksState":
        return replace(self, bookmarks=tuple(bookmarks))

    def with_archived_bookmarks(self, bookmarks: list[BookmarkResponse]) -> "BookmarksState":
        return replace(self, archived_bookmarks=tuple(bookmarks))

    def with_trashed_bookmarks(self, bookmarks: list[BookmarkResponse]) -> "BookmarksState":
        return replace(self, trashed_bookmarks=tuple(bookmarks))

    def with_partition(
        self, status: BookmarkStatus, bookmarks: list[BookmarkResponse],
    ) -> "BookmarksState":
        """Replace the cached partition for ``status``."""
        return replace(self, **{_PARTITIONS[status]: tuple(bookmarks)})

    def with_collections(self, collections: list[CollectionResponse]) -> "BookmarksState":
        return replace(self, collections=tuple(collections))

    def with_tags(self, tags: list[TagResponse]) -> "BookmarksState":
        return replace(self, tags=tuple(tags))

    def with_favorite(self, bookmark_id: str, is_favorite: bool) -> "BookmarksState":
        """Set the favorite flag of a cached active bookmark."""
        return replace(
            self,
            bookmarks=tuple(
                b.model_copy(update={"is_favorite": is_favorite}) if b.id == bookmark_id else b
                for b in self.bookmarks
            ),
        )

    def find(self, bookmark_id: str) -> BookmarkResponse | None:
        """Look a bookmark up in any partition."""
        for status in _PARTITIONS:
            for bookmark in self.partition(status):
                if bookmark.id == bookmark_id:
                    return bookmark
        return None

    def partition(self, status: BookmarkStatus) -> tuple[BookmarkResponse, ...]:
        return getattr(self, _PARTITIONS[status])

    def moved(self, bookmark_id: str, target: BookmarkStatus) -> "BookmarksState":
        """
        Move a bookmark to the end of the ``target`` partition.

        A bookmark that is not cached anywhere leaves the state unchanged.
        """
        bookmark = self.find(bookmark_id)
        if bookmark is None:
            return self
        state = self.without(bookmark_id)
        moved = bookmark.model_copy(update={"status": target})
        return state.with_partition(target, [*state.partition(target), moved])

    def without(self, bookmark_id: str) -> "BookmarksState":
        """Drop a bookmark from every partition."""
        return replace(
            self,
            **{
                name: tuple(b for b in getattr(self, name) if b.id != bookmark_id)
                for name in _PARTITIONS.values()
            },
        )

    # --- Derived views ---

    @property
    def view_filter(self) -> ViewFilter:
        return ViewFilter(
            selected_collection=self.selected_collection,
            selected_tags=self.selected_tags,
            search_query=self.search_query,
            filter_type=self.filter_type,
            sort_by=self.sort_by,
        )

    def filtered_bookmarks(self) -> list[BookmarkResponse]:
        """Active bookmarks after every view filter and the sort."""
        return derive_bookmarks(self.bookmarks, self.view_filter)

    def favorite_bookmarks(self) -> list[BookmarkResponse]:
        return favorite_bookmarks(self.bookmarks, self.view_filter)

    def archived_view(self) -> list[BookmarkResponse]:
        return search_bookmarks(self.archived_bookmarks, self.search_query)

    def trashed_view(self) -> list[BookmarkResponse]:
        return search_bookmarks(self.trashed_bookmarks, self.search_query)

    def stats(self) -> BookmarkStats:
        return BookmarkStats(
            total=len(self.bookmarks),
            favorites=sum(1 for b in self.bookmarks if b.is_favorite),
            collections=len(self.collections),
            tags=len(self.tags),
        )
