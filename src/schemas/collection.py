"""Pydantic schemas for collection endpoints."""
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class CollectionCreate(BaseModel):
    """Schema for creating a collection. Missing icon/color use the defaults."""

    name: str = ""
    icon: str | None = None
    color: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        """Non-text names become empty strings."""
        return v.strip() if isinstance(v, str) else ""

    @field_validator("icon", "color", mode="before")
    @classmethod
    def coerce_token(cls, v: Any) -> str | None:
        """Empty tokens mean "use the default"."""
        return v if isinstance(v, str) and v else None


class CollectionResponse(BaseModel):
    """Schema for a collection with its denormalized bookmark count."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    icon: str
    color: str
    count: int


class CollectionListResponse(BaseModel):
    """Schema for the collections list response."""

    collections: list[CollectionResponse]
