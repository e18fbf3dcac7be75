"""Health check endpoint."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service status plus the result of a database round trip."""

    status: str
    database: str
    dialect: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
) -> HealthResponse:
    """
    Probe the database with a trivial query.

    A failed probe degrades the status instead of failing the request, so
    the endpoint stays usable as a liveness check.
    """
    dialect = db.get_bind().dialect.name
    try:
        await db.execute(select(1))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return HealthResponse(status="degraded", database="unhealthy", dialect=dialect)
    return HealthResponse(status="healthy", database="healthy", dialect=dialect)
