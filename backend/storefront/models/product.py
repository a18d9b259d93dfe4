"""Product ORM - catalog entry that feeds category product counts.

Invariants:
    - category_name / category_slug mirror the assigned category at write time
    - Only active products with a category are counted in category trees
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, Float, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base, new_id, utcnow


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    slug: Mapped[str] = mapped_column(String(300), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False)
    sale_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    on_sale: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    category_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    category_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    category_slug: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    vendor_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    vendor_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
