"""
Bookmark filter predicates shared by the SQL and in-memory backends.

A filter request is turned into an ordered list of ``Predicate`` values
(status, collection, favorite, search, tags). The list is plain data: the query
compiler translates each predicate into a SQL clause, and ``Predicate.matches``
evaluates it against a bookmark held in memory. All predicates are combined
with AND; the tag predicate is an OR over the requested tag ids.
"""
import enum
from dataclasses import dataclass
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.bookmark import BookmarkStatus

ALL_COLLECTIONS = "all"


class FilterableBookmark(Protocol):
    """Attributes a bookmark must expose to be matched in memory."""

    status: BookmarkStatus
    collection_id: str | None
    is_favorite: bool
    title: str
    description: str
    url: str
    tag_ids: list[str]


class PredicateKind(str, enum.Enum):
    """Predicate kinds, declared in the order they are applied."""

    STATUS = "status"
    COLLECTION = "collection"
    FAVORITE = "favorite"
    SEARCH = "search"
    TAGS = "tags"


@dataclass(frozen=True)
class Predicate:
    """A single filter condition and the values bound to it."""

    kind: PredicateKind
    values: tuple[Any, ...]

    def matches(self, item: FilterableBookmark) -> bool:
        """Evaluate this predicate against an in-memory bookmark."""
        if self.kind is PredicateKind.STATUS:
            return item.status == self.values[0]
        if self.kind is PredicateKind.COLLECTION:
            return item.collection_id == self.values[0]
        if self.kind is PredicateKind.FAVORITE:
            return item.is_favorite is True
        if self.kind is PredicateKind.SEARCH:
            return text_matches(item, self.values[0])
        # tags: at least one tag in common
        return not set(self.values).isdisjoint(item.tag_ids)


def text_matches(item: FilterableBookmark, search: str) -> bool:
    """Case-insensitive substring match on title, description or url."""
    needle = search.lower()
    return (
        needle in (item.title or "").lower()
        or needle in (item.description or "").lower()
        or needle in (item.url or "").lower()
    )


def parse_tag_ids(value: Any) -> list[str]:
    """
    Parse a tag id list from a comma-separated string or a sequence.

    Blank entries are dropped. Anything that cannot be read as a list of ids
    yields an empty list, which means "no tag constraint".
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, list | tuple | set | frozenset):
        parts = list(value)
    else:
        return []
    tag_ids = []
    for part in parts:
        if not isinstance(part, str):
            continue
        stripped = part.strip()
        if stripped and stripped not in tag_ids:
            tag_ids.append(stripped)
    return tag_ids


class BookmarkFilter(BaseModel):
    """
    Filter request for a bookmark listing.

    Every field is optional. Values are coerced rather than rejected so that a
    malformed query string degrades to a wider result instead of an error.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    status: BookmarkStatus = BookmarkStatus.ACTIVE
    collection_id: str | None = Field(default=None, alias="collectionId")
    is_favorite: bool = Field(default=False, alias="isFavorite")
    search: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def coerce_status(cls, v: Any) -> BookmarkStatus:
        """Unknown or missing statuses select the active partition."""
        if isinstance(v, BookmarkStatus):
            return v
        try:
            return BookmarkStatus(v)
        except ValueError:
            return BookmarkStatus.ACTIVE

    @field_validator("collection_id", mode="before")
    @classmethod
    def coerce_collection(cls, v: Any) -> str | None:
        """The "all" sentinel and empty values mean no collection constraint."""
        if not isinstance(v, str) or not v or v == ALL_COLLECTIONS:
            return None
        return v

    @field_validator("is_favorite", mode="before")
    @classmethod
    def coerce_favorite(cls, v: Any) -> bool:
        """Only a literal true restricts to favorites."""
        return v is True or v == "true"

    @field_validator("search", mode="before")
    @classmethod
    def coerce_search(cls, v: Any) -> str | None:
        """Empty or non-text searches impose no constraint."""
        if not isinstance(v, str) or not v:
            return None
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v: Any) -> list[str]:
        """Accept "a,b,c" or a list of ids."""
        return parse_tag_ids(v)


def build_predicates(request: BookmarkFilter) -> list[Predicate]:
    """
    Translate a filter request into its ordered predicate list.

    The order (status, collection, favorite, search, tags) only determines the
    order of bound parameters in the compiled query; results do not depend on it.
    """
    predicates = [Predicate(PredicateKind.STATUS, (request.status,))]
    if request.collection_id is not None:
        predicates.append(Predicate(PredicateKind.COLLECTION, (request.collection_id,)))
    if request.is_favorite:
        predicates.append(Predicate(PredicateKind.FAVORITE, (True,)))
    if request.search:
        predicates.append(Predicate(PredicateKind.SEARCH, (request.search,)))
    if request.tags:
        predicates.append(Predicate(PredicateKind.TAGS, tuple(request.tags)))
    return predicates
