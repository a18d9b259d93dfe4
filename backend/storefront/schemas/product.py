"""Product Schemas - catalog input validation and response shape."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=300)
    slug: str | None = Field(None, max_length=300)
    description: str = ""
    price: float = Field(ge=0)
    sale_price: float | None = Field(None, ge=0)
    on_sale: bool = False
    stock: int = Field(0, ge=0)
    is_active: bool = True
    category_id: str | None = None
    vendor_id: str | None = None
    vendor_name: str = ""
    images: list[str] = []
    tags: list[str] = []


class ProductUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=300)
    slug: str | None = Field(None, max_length=300)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    sale_price: float | None = Field(None, ge=0)
    on_sale: bool | None = None
    stock: int | None = Field(None, ge=0)
    is_active: bool | None = None
    category_id: str | None = None
    vendor_id: str | None = None
    vendor_name: str | None = None
    images: list[str] | None = None
    tags: list[str] | None = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: str
    price: float
    sale_price: float | None = None
    on_sale: bool
    stock: int
    is_active: bool
    category_id: str | None = None
    category_name: str
    category_slug: str
    vendor_id: str | None = None
    vendor_name: str
    images: list[str]
    tags: list[str]
    created_at: datetime
    updated_at: datetime
