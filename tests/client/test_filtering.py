"""Tests for the in-memory filter and sort engine."""
from datetime import UTC, datetime, timedelta

from client.filtering import (
    ViewFilter,
    apply_predicates,
    derive_bookmarks,
    favorite_bookmarks,
    search_bookmarks,
    sort_bookmarks,
    title_collation_key,
)
from models.bookmark import BookmarkStatus
from schemas.bookmark import BookmarkResponse
from shared.predicates import BookmarkFilter, build_predicates

T0 = datetime(2024, 1, 1, tzinfo=UTC)


def make_bookmark(
    bookmark_id: str,
    title: str = "",
    minutes: int = 0,
    **fields: object,
) -> BookmarkResponse:
    """Build a snapshot item created ``minutes`` after T0."""
    return BookmarkResponse(
        id=bookmark_id,
        title=title or bookmark_id,
        url=fields.pop("url", f"https://{bookmark_id}.test"),
        created_at=T0 + timedelta(minutes=minutes),
        **fields,
    )


def ids(items: list[BookmarkResponse]) -> list[str]:
    """Ids in order."""
    return [b.id for b in items]


# =============================================================================
# Sorting
# =============================================================================


def test_sort_date_newest_and_oldest() -> None:
    """Given T1 < T2 < T3, newest gives [T3, T2, T1] and oldest the reverse."""
    items = [make_bookmark("t2", minutes=2), make_bookmark("t1", minutes=1), make_bookmark("t3", minutes=3)]  # noqa: E501

    assert ids(sort_bookmarks(items, "date-newest")) == ["t3", "t2", "t1"]
    assert ids(sort_bookmarks(items, "date-oldest")) == ["t1", "t2", "t3"]


def test_sort_date_ties_broken_by_id() -> None:
    """Equal timestamps fall back to the id, like the server ordering."""
    items = [make_bookmark("a"), make_bookmark("c"), make_bookmark("b")]
    assert ids(sort_bookmarks(items, "date-newest")) == ["c", "b", "a"]


def test_sort_alpha_is_case_insensitive() -> None:
    """Titles sort ignoring case, ascending or descending."""
    items = [
        make_bookmark("1", title="banana"),
        make_bookmark("2", title="Apple"),
        make_bookmark("3", title="cherry"),
    ]
    assert [b.title for b in sort_bookmarks(items, "alpha-az")] == ["Apple", "banana", "cherry"]
    assert [b.title for b in sort_bookmarks(items, "alpha-za")] == ["cherry", "banana", "Apple"]


def test_title_collation_puts_lowercase_first_on_case_ties() -> None:
    """Titles equal but for case order lowercase first."""
    assert sorted(["B", "b", "a", "A"], key=title_collation_key) == ["a", "A", "b", "B"]


def test_sort_alpha_places_accented_titles_by_base_letter() -> None:
    """Accented initials sort with their base letter, not after z."""
    items = [
        make_bookmark("1", title="zoo"),
        make_bookmark("2", title="Éclair"),
        make_bookmark("3", title="apple"),
    ]
    assert [b.title for b in sort_bookmarks(items, "alpha-az")] == ["apple", "Éclair", "zoo"]
    assert [b.title for b in sort_bookmarks(items, "alpha-za")] == ["zoo", "Éclair", "apple"]


def test_title_collation_puts_unaccented_first_on_accent_ties() -> None:
    """Titles equal but for accents order the unaccented form first."""
    assert sorted(["résumé", "resume", "Resume"], key=title_collation_key) == [
        "resume", "Resume", "résumé",
    ]


def test_sort_unknown_order_keeps_input_order() -> None:
    """Unknown sort names leave the order unchanged."""
    items = [make_bookmark("b"), make_bookmark("a")]
    assert ids(sort_bookmarks(items, "random")) == ["b", "a"]  # type: ignore[arg-type]


def test_sort_empty() -> None:
    """Sorting nothing gives nothing."""
    assert sort_bookmarks([], "alpha-az") == []


# =============================================================================
# Predicate evaluation
# =============================================================================


def test_apply_predicates_matches_server_semantics() -> None:
    """All predicates are ANDed; the tag predicate is an OR over ids."""
    snapshot = [
        make_bookmark("a", collection_id="c1", tag_ids=["A", "B"], is_favorite=True),
        make_bookmark("b", collection_id="c1", tag_ids=["C"]),
        make_bookmark("c", collection_id="c2", tag_ids=["B"], is_favorite=True),
        make_bookmark("d", status=BookmarkStatus.ARCHIVED, tag_ids=["B"]),
    ]
    request = BookmarkFilter(collection_id="c1", tags="B,C")
    assert ids(apply_predicates(snapshot, build_predicates(request))) == ["a", "b"]

    request = BookmarkFilter(is_favorite="true", tags="B")
    assert ids(apply_predicates(snapshot, build_predicates(request))) == ["a", "c"]

    request = BookmarkFilter(status="archived")
    assert ids(apply_predicates(snapshot, build_predicates(request))) == ["d"]


def test_search_bookmarks_empty_query_keeps_everything() -> None:
    """An empty search is no constraint and does not reorder."""
    items = [make_bookmark("b"), make_bookmark("a")]
    assert ids(search_bookmarks(items, "")) == ["b", "a"]


def test_search_bookmarks_over_title_description_url() -> None:
    """Search matches any of the three text fields, ignoring case."""
    items = [
        make_bookmark("a", title="Python tips"),
        make_bookmark("b", description="About PYTHON"),
        make_bookmark("c", url="https://python.org"),
        make_bookmark("d", title="Rust"),
    ]
    assert ids(search_bookmarks(items, "python")) == ["a", "b", "c"]


# =============================================================================
# View derivation
# =============================================================================


def test_derive_bookmarks_default_view_sorts_newest_first() -> None:
    """With no selections everything is kept, newest first."""
    snapshot = [make_bookmark("old", minutes=1), make_bookmark("new", minutes=5)]
    assert ids(derive_bookmarks(snapshot, ViewFilter())) == ["new", "old"]


def test_derive_bookmarks_applies_collection_tags_and_search() -> None:
    """Collection, tags and search narrow the view together."""
    snapshot = [
        make_bookmark("a", title="Python", collection_id="c1", tag_ids=["t1"]),
        make_bookmark("b", title="Python", collection_id="c1", tag_ids=["t2"]),
        make_bookmark("c", title="Rust", collection_id="c1", tag_ids=["t1"]),
        make_bookmark("d", title="Python", collection_id="c2", tag_ids=["t1"]),
    ]
    view = ViewFilter(selected_collection="c1", selected_tags=("t1",), search_query="py")
    assert ids(derive_bookmarks(snapshot, view)) == ["a"]


def test_derive_bookmarks_all_collection_is_no_constraint() -> None:
    """The 'all' collection keeps bookmarks from every collection."""
    snapshot = [make_bookmark("a", collection_id="c1"), make_bookmark("b")]
    assert set(ids(derive_bookmarks(snapshot, ViewFilter(selected_collection="all")))) == {"a", "b"}


def test_derive_bookmarks_filter_types() -> None:
    """Filter types restrict to favorites, tagged or untagged bookmarks."""
    snapshot = [
        make_bookmark("fav", minutes=3, is_favorite=True),
        make_bookmark("tagged", minutes=2, tags=["x"], tag_ids=["tx"]),
        make_bookmark("plain", minutes=1),
    ]
    assert ids(derive_bookmarks(snapshot, ViewFilter(filter_type="favorites"))) == ["fav"]
    assert ids(derive_bookmarks(snapshot, ViewFilter(filter_type="with-tags"))) == ["tagged"]
    assert ids(derive_bookmarks(snapshot, ViewFilter(filter_type="without-tags"))) == ["fav", "plain"]  # noqa: E501
    assert len(derive_bookmarks(snapshot, ViewFilter(filter_type="all"))) == 3


def test_derive_bookmarks_alpha_sort() -> None:
    """The view's sort order is applied last."""
    snapshot = [make_bookmark("1", title="b"), make_bookmark("2", title="a")]
    view = ViewFilter(sort_by="alpha-az")
    assert [b.title for b in derive_bookmarks(snapshot, view)] == ["a", "b"]


def test_favorite_bookmarks_ignores_collection_and_tags() -> None:
    """The favorites view filters by favorite and search only."""
    snapshot = [
        make_bookmark("a", title="Python", is_favorite=True, collection_id="c2", minutes=1),
        make_bookmark("b", title="Rust", is_favorite=True, minutes=2),
        make_bookmark("c", title="Python", minutes=3),
    ]
    view = ViewFilter(selected_collection="c1", selected_tags=("t1",))
    assert ids(favorite_bookmarks(snapshot, view)) == ["b", "a"]

    view = ViewFilter(search_query="python")
    assert ids(favorite_bookmarks(snapshot, view)) == ["a"]


def test_derive_bookmarks_does_not_mutate_snapshot() -> None:
    """Derivation returns a new list."""
    snapshot = [make_bookmark("a", minutes=1), make_bookmark("b", minutes=2)]
    derive_bookmarks(snapshot, ViewFilter())
    assert ids(snapshot) == ["a", "b"]
