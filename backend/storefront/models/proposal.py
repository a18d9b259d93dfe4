"""Proposal ORM - quote sent to a client, optionally converted into an invoice.

Invariants:
    - proposal_number is unique ("PROP-YYYY-NNN")
    - converted_to_invoice_id is set exactly once, together with status "converted"
"""

from datetime import datetime

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base
from storefront.models.billing_document import BillingDocumentMixin


class Proposal(BillingDocumentMixin, Base):
    __tablename__ = "proposals"

    proposal_number: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft", index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    valid_until: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    converted_to_invoice_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
