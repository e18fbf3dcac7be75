"""HTTP client for the Bookmarks API."""
from typing import Any

import httpx

from core.config import Settings, get_settings
from models.bookmark import BookmarkStatus
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from schemas.collection import CollectionCreate, CollectionResponse
from schemas.tag import TagCreate, TagResponse
from services.lifecycle import LifecycleAction
from shared.predicates import BookmarkFilter


def create_http_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Create an AsyncClient pointed at the configured API."""
    settings = settings or get_settings()
    return httpx.AsyncClient(base_url=settings.api_url, timeout=settings.api_timeout)


def filter_params(request: BookmarkFilter) -> dict[str, str]:
    """Encode a filter as query parameters, omitting unconstrained fields."""
    params = {"status": BookmarkStatus(request.status).value}
    if request.collection_id is not None:
        params["collectionId"] = request.collection_id
    if request.is_favorite:
        params["isFavorite"] = "true"
    if request.search:
        params["search"] = request.search
    if request.tags:
        params["tags"] = ",".join(request.tags)
    return params


class BookmarksApiClient:
    """
    Thin async wrapper over the HTTP surface.

    Every call makes exactly one request; there is no retry. Non-2xx responses
    raise ``httpx.HTTPStatusError`` and transport failures raise the matching
    ``httpx`` error.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        response = await self._client.request(method, path, params=params, json=json)
        response.raise_for_status()
        return response.json()

    async def list_bookmarks(self, request: BookmarkFilter) -> list[BookmarkResponse]:
        data = await self._request("GET", "/bookmarks", params=filter_params(request))
        return [BookmarkResponse.model_validate(item) for item in data["bookmarks"]]

    async def create_bookmark(self, data: BookmarkCreate) -> str:
        """Create a bookmark and return its id."""
        body = data.model_dump(by_alias=True, exclude_none=True)
        result = await self._request("POST", "/bookmarks", json=body)
        return result["id"]

    async def update_bookmark(self, data: BookmarkUpdate) -> None:
        body = data.model_dump(by_alias=True, exclude_unset=True)
        body["id"] = data.id
        await self._request("PUT", "/bookmarks", json=body)

    async def toggle_favorite(self, bookmark_id: str) -> bool:
        """Flip the favorite flag server-side and return the stored value."""
        result = await self._request("POST", "/bookmarks/favorite", params={"id": bookmark_id})
        return result["isFavorite"]

    async def apply_action(self, bookmark_id: str, action: LifecycleAction) -> None:
        await self._request(
            "DELETE", "/bookmarks", params={"id": bookmark_id, "action": action.value},
        )

    async def list_tags(self) -> list[TagResponse]:
        data = await self._request("GET", "/tags")
        return [TagResponse.model_validate(item) for item in data["tags"]]

    async def create_tag(self, data: TagCreate) -> str:
        result = await self._request("POST", "/tags", json=data.model_dump(exclude_none=True))
        return result["id"]

    async def list_collections(self) -> list[CollectionResponse]:
        data = await self._request("GET", "/collections")
        return [CollectionResponse.model_validate(item) for item in data["collections"]]

    async def create_collection(self, data: CollectionCreate) -> str:
        result = await self._request(
            "POST", "/collections", json=data.model_dump(exclude_none=True),
        )
        return result["id"]
