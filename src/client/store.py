"""
Observable client store.

``BookmarksStore`` holds the current ``BookmarksState`` and replaces it on every
transition. Server-backed actions await the API first and only apply the
local transition when the request succeeded. A failed request is logged and
reported through ``last_error``; it is never retried.
"""
import logging
from collections.abc import Callable

import httpx

from client.api_client import BookmarksApiClient
from client.state import BookmarksState
from models.bookmark import BookmarkStatus
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services.lifecycle import LifecycleAction
from shared.predicates import BookmarkFilter

logger = logging.getLogger(__name__)

Listener = Callable[[BookmarksState], None]


class BookmarksStore:
    """Holds the client state and notifies subscribers when it changes."""

    def __init__(
        self,
        api: BookmarksApiClient,
        state: BookmarksState | None = None,
    ) -> None:
        self._api = api
        self._state = state or BookmarksState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> BookmarksState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, transition: Callable[[BookmarksState], BookmarksState]) -> BookmarksState:
        """Apply a state transition and notify listeners if the state changed."""
        new_state = transition(self._state)
        if new_state is not self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self._state

    def _failed(self, action: str, error: httpx.HTTPError) -> bool:
        logger.warning("Bookmark %s failed: %s", action, error)
        self.dispatch(lambda s: s.with_error(f"Failed to {action}"))
        return False

    def _succeeded(self) -> None:
        if self._state.last_error is not None:
            self.dispatch(lambda s: s.with_error(None))

    # --- Loading ---

    async def refresh(self, status: BookmarkStatus = BookmarkStatus.ACTIVE) -> bool:
        """Reload one status partition from the server."""
        try:
            bookmarks = await self._api.list_bookmarks(BookmarkFilter(status=status))
        except httpx.HTTPError as e:
            return self._failed(f"load {status.value} bookmarks", e)
        self.dispatch(lambda s: s.with_partition(status, bookmarks))
        self._succeeded()
        return True

    async def load_taxonomy(self) -> bool:
        """Reload tags and collections."""
        try:
            tags = await self._api.list_tags()
            collections = await self._api.list_collections()
        except httpx.HTTPError as e:
            return self._failed("load tags and collections", e)
        self.dispatch(lambda s: s.with_tags(tags).with_collections(collections))
        self._succeeded()
        return True

    async def refresh_all(self) -> bool:
        """Reload every partition plus tags and collections."""
        results = [await self.refresh(status) for status in BookmarkStatus]
        results.append(await self.load_taxonomy())
        return all(results)

    # --- Mutations ---

    async def create(self, data: BookmarkCreate) -> str | None:
        """
        Create a bookmark and reload the active partition.

        The server fills in the id, favicon and tag ids, so the cached list is
        refreshed rather than patched. Returns the new id, or None on failure.
        """
        try:
            bookmark_id = await self._api.create_bookmark(data)
        except httpx.HTTPError as e:
            self._failed("create", e)
            return None
        await self.refresh(BookmarkStatus.ACTIVE)
        if data.tags:
            await self.load_taxonomy()
        return bookmark_id

    async def update(self, data: BookmarkUpdate) -> bool:
        """Apply a partial update and reload the active partition."""
        try:
            await self._api.update_bookmark(data)
        except httpx.HTTPError as e:
            return self._failed("update", e)
        return await self.refresh(BookmarkStatus.ACTIVE)

    async def toggle_favorite(self, bookmark_id: str) -> bool:
        """Flip the favorite flag, applying the value the server stored."""
        try:
            is_favorite = await self._api.toggle_favorite(bookmark_id)
        except httpx.HTTPError as e:
            return self._failed("toggle favorite", e)
        self.dispatch(lambda s: s.with_favorite(bookmark_id, is_favorite))
        self._succeeded()
        return True

    async def _transition(
        self,
        bookmark_id: str,
        action: LifecycleAction,
        transition: Callable[[BookmarksState], BookmarksState],
    ) -> bool:
        try:
            await self._api.apply_action(bookmark_id, action)
        except httpx.HTTPError as e:
            return self._failed(action.value, e)
        self.dispatch(transition)
        self._succeeded()
        return True

    async def archive(self, bookmark_id: str) -> bool:
        return await self._transition(
            bookmark_id, LifecycleAction.ARCHIVE,
            lambda s: s.moved(bookmark_id, BookmarkStatus.ARCHIVED),
        )

    async def restore_from_archive(self, bookmark_id: str) -> bool:
        return await self._transition(
            bookmark_id, LifecycleAction.RESTORE,
            lambda s: s.moved(bookmark_id, BookmarkStatus.ACTIVE),
        )

    async def trash(self, bookmark_id: str) -> bool:
        """Move an active bookmark to the trash."""
        return await self._transition(
            bookmark_id, LifecycleAction.TRASH,
            lambda s: s.moved(bookmark_id, BookmarkStatus.TRASHED),
        )

    async def restore_from_trash(self, bookmark_id: str) -> bool:
        return await self._transition(
            bookmark_id, LifecycleAction.RESTORE,
            lambda s: s.moved(bookmark_id, BookmarkStatus.ACTIVE),
        )

    async def permanently_delete(self, bookmark_id: str) -> bool:
        return await self._transition(
            bookmark_id, LifecycleAction.DELETE,
            lambda s: s.without(bookmark_id),
        )
