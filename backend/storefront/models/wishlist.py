"""Wishlist ORM - one row per user with the item list as JSON.

Invariants:
    - At most one item per product_id inside items
"""

from datetime import datetime

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base, utcnow


class Wishlist(Base):
    __tablename__ = "wishlists"

    user_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    user_email: Mapped[str] = mapped_column(String(320), nullable=False, default="")
    user_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
