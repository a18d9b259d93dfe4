"""Billing Document columns - shared by proposals and invoices.

Invariants:
    - line_items amounts and every totals column are written by the service
      from core/totals, never copied from request input
    - JSON columns are reassigned wholesale; in-place mutation is not tracked
"""

from datetime import datetime

from sqlalchemy import String, Text, Float, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import new_id, utcnow


class BillingDocumentMixin:
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    client_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    client: Mapped[dict] = mapped_column(JSON, nullable=False)
    line_items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    subtotal: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tax_config: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    tax_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    discount: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    discount_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    processing_fee_config: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    payment_method_discount: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    title: Mapped[str | None] = mapped_column(String(300), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    viewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
