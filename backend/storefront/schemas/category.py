"""Category Schemas - request validation and response shapes for the category tree."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=200, pattern=r"^[a-z0-9-]+$")
    image: str | None = None
    description: str | None = None
    parent_id: str | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class CategoryUpdate(BaseModel):
    """Partial update. Sending parent_id: null moves the category to the top level."""
    name: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=200, pattern=r"^[a-z0-9-]+$")
    image: str | None = None
    description: str | None = None
    parent_id: str | None = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    image: str | None = None
    description: str | None = None
    parent_id: str | None = None
    product_count: int
    created_at: datetime
    updated_at: datetime


class CategoryTreeNode(CategoryResponse):
    subcategories: list[CategoryResponse] = []
