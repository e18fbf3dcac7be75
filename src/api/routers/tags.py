"""Tag endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session
from schemas.bookmark import MutationResponse
from schemas.tag import TagCreate, TagListResponse, TagResponse
from services.tag_service import create_tag, list_tags

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=TagListResponse)
async def list_tags_endpoint(
    db: AsyncSession = Depends(get_async_session),
) -> TagListResponse:
    """
    Get all tags ordered by name.

    `count` is the denormalized usage counter: it is incremented when a
    bookmark is created with the tag and never decremented.
    """
    tags = await list_tags(db)
    return TagListResponse(tags=[TagResponse.model_validate(tag) for tag in tags])


@router.post("", response_model=MutationResponse)
async def create_tag_endpoint(
    data: TagCreate,
    db: AsyncSession = Depends(get_async_session),
) -> MutationResponse:
    """Create a tag with a usage count of 0."""
    tag = await create_tag(db, data)
    return MutationResponse(success=True, id=tag.id)
