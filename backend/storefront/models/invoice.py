"""Invoice ORM - billable document with a running payment ledger.

Invariants:
    - invoice_number is unique ("INV-YYYY-NNN")
    - amount_paid equals the sum of payments[].amount; amount_due = total - amount_paid
"""

from datetime import datetime

from sqlalchemy import String, Float, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base
from storefront.models.billing_document import BillingDocumentMixin


class Invoice(BillingDocumentMixin, Base):
    __tablename__ = "invoices"

    invoice_number: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft", index=True)
    amount_paid: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    amount_due: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    payments: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    issue_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    proposal_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    purchase_order_number: Mapped[str | None] = mapped_column(String(100), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
