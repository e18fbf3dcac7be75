"""Collection endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session
from schemas.bookmark import MutationResponse
from schemas.collection import CollectionCreate, CollectionListResponse, CollectionResponse
from services.collection_service import create_collection, list_collections

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get("", response_model=CollectionListResponse)
async def list_collections_endpoint(
    db: AsyncSession = Depends(get_async_session),
) -> CollectionListResponse:
    """Get all collections ordered by name, with their bookmark counts."""
    collections = await list_collections(db)
    return CollectionListResponse(
        collections=[CollectionResponse.model_validate(c) for c in collections],
    )


@router.post("", response_model=MutationResponse)
async def create_collection_endpoint(
    data: CollectionCreate,
    db: AsyncSession = Depends(get_async_session),
) -> MutationResponse:
    """Create an empty collection."""
    collection = await create_collection(db, data)
    return MutationResponse(success=True, id=collection.id)
