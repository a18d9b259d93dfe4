"""Category ORM - one node of the product category tree.

Invariants:
    - parent_id is None for top-level categories
    - product_count >= 0 (check constraint backs the conditional decrement)
    - slug of a subcategory is "<parent slug>/<own slug>"

Design Decisions:
    - Self-referencing FK on parent_id: a delete with children fails at the
      database too, not only in the service guard
    - No relationship(): traversals load the whole table once and walk it in core
"""

from datetime import datetime

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base, new_id, utcnow


class Category(Base):
    __tablename__ = "categories"
    __table_args__ = (
        CheckConstraint("product_count >= 0", name="ck_categories_product_count"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    image: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("categories.id"), nullable=True, index=True,
    )
    product_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
