"""Pydantic schemas for tag endpoints."""
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class TagCreate(BaseModel):
    """Schema for creating a tag. A missing color falls back to the default."""

    name: str = ""
    color: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        """Non-text names become empty strings."""
        return v.strip() if isinstance(v, str) else ""

    @field_validator("color", mode="before")
    @classmethod
    def coerce_color(cls, v: Any) -> str | None:
        """Empty colors mean "use the default"."""
        return v if isinstance(v, str) and v else None


class TagResponse(BaseModel):
    """Schema for a tag with its denormalized usage count."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    color: str
    count: int


class TagListResponse(BaseModel):
    """Schema for the tags list response."""

    tags: list[TagResponse]
