"""Invoice Service - invoice lifecycle, payments and overdue sweeps.

Invariants:
    - Only DRAFT invoices are editable; edits recompute totals and amount_due
    - amount_paid / amount_due / status after a payment come from
      core/totals.apply_payment
    - Payments are accepted only while the invoice is sent, viewed,
      partially paid or overdue
    - The overdue sweep only touches sent, viewed or partially paid invoices
      whose due date has passed with money still owed
"""

import logging
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.document_status import (
    can_record_payment, check_invoice_transition, ensure_editable,
    should_record_view,
)
from storefront.core.domain_types import DocumentKind, InvoiceStatus, PaymentMethod
from storefront.core.errors import InvalidStatusTransitionError, ResourceNotFoundError
from storefront.core.repository_protocols import Clock
from storefront.core.totals import apply_payment, is_invoice_overdue, round_currency
from storefront.db.base import new_id
from storefront.infrastructure.clock import ensure_utc, utc_now
from storefront.models.invoice import Invoice
from storefront.services.billing_documents import (
    BILLING_FIELDS, apply_fields, apply_totals, client_email_matches,
    next_document_number,
)

logger = logging.getLogger(__name__)

_INVOICE_FIELDS = BILLING_FIELDS + ("issue_date", "due_date", "purchase_order_number")


class InvoiceService:

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock = utc_now,
        number_padding: int = 3,
        due_days: int = 30,
    ):
        self.db = db
        self.clock = clock
        self.number_padding = number_padding
        self.due_days = due_days

    # ─── Reads ───────────────────────────────────────────────────

    async def get_invoice(self, invoice_id: str) -> Invoice:
        invoice = await self.db.get(Invoice, invoice_id)
        if invoice is None:
            raise ResourceNotFoundError("Invoice", invoice_id)
        return invoice

    async def get_invoice_by_number(self, invoice_number: str) -> Invoice:
        invoice = (await self.db.execute(
            select(Invoice).where(Invoice.invoice_number == invoice_number)
        )).scalar_one_or_none()
        if invoice is None:
            raise ResourceNotFoundError("Invoice", invoice_number)
        return invoice

    async def list_invoices(
        self,
        status: InvoiceStatus | None = None,
        client_email: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invoice]:
        query = select(Invoice).order_by(Invoice.created_at.desc())
        if status:
            query = query.where(Invoice.status == status.value)
        if client_email:
            query = query.where(client_email_matches(Invoice, client_email))
        result = await self.db.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())

    # ─── Writes ──────────────────────────────────────────────────

    async def build_invoice(
        self,
        data: dict,
        created_by: str | None,
        default_tax_config: dict | None = None,
        proposal_id: str | None = None,
    ) -> Invoice:
        """Add a new draft invoice to the session without committing."""
        now = self.clock()
        invoice = Invoice(
            id=new_id(),
            invoice_number=await next_document_number(
                self.db, DocumentKind.INVOICE, now, self.number_padding,
            ),
            status=InvoiceStatus.DRAFT.value,
            created_by=created_by,
            proposal_id=proposal_id,
            payments=[],
            line_items=[],
            amount_paid=0.0,
        )
        apply_fields(invoice, data, _INVOICE_FIELDS)
        if invoice.tax_config is None:
            invoice.tax_config = default_tax_config
        invoice.issue_date = data.get("issue_date") or now
        invoice.due_date = data.get("due_date") or invoice.issue_date + timedelta(days=self.due_days)
        totals = apply_totals(invoice)
        invoice.amount_due = totals.total
        self.db.add(invoice)
        return invoice

    async def create_invoice(
        self, data: dict, created_by: str | None, default_tax_config: dict | None = None,
    ) -> Invoice:
        invoice = await self.build_invoice(data, created_by, default_tax_config)
        await self.db.commit()
        logger.info(
            f"Created invoice {invoice.invoice_number}",
            extra={"invoice_id": invoice.id, "user_id": created_by},
        )
        return invoice

    async def update_invoice(self, invoice_id: str, data: dict) -> Invoice:
        invoice = await self.get_invoice(invoice_id)
        ensure_editable("Invoice", invoice.id, invoice.status)
        apply_fields(invoice, data, _INVOICE_FIELDS)
        totals = apply_totals(invoice)
        invoice.amount_due = round_currency(totals.total - invoice.amount_paid)
        await self.db.commit()
        return invoice

    async def delete_invoice(self, invoice_id: str) -> None:
        invoice = await self.get_invoice(invoice_id)
        await self.db.delete(invoice)
        await self.db.commit()
        logger.info(f"Deleted invoice {invoice.invoice_number}", extra={"invoice_id": invoice_id})

    async def _transition(self, invoice_id: str, target: InvoiceStatus) -> Invoice:
        invoice = await self.get_invoice(invoice_id)
        check_invoice_transition(InvoiceStatus(invoice.status), target)
        invoice.status = target.value
        return invoice

    async def mark_invoice_sent(self, invoice_id: str) -> Invoice:
        invoice = await self._transition(invoice_id, InvoiceStatus.SENT)
        invoice.sent_at = self.clock()
        await self.db.commit()
        return invoice

    async def mark_invoice_viewed(self, invoice_id: str) -> Invoice:
        """First view of a sent invoice. Any other status is left alone."""
        invoice = await self.get_invoice(invoice_id)
        if should_record_view(invoice.status):
            invoice.status = InvoiceStatus.VIEWED.value
            invoice.viewed_at = self.clock()
            await self.db.commit()
        return invoice

    async def cancel_invoice(self, invoice_id: str) -> Invoice:
        invoice = await self._transition(invoice_id, InvoiceStatus.CANCELLED)
        invoice.cancelled_at = self.clock()
        await self.db.commit()
        logger.info(f"Cancelled invoice {invoice.invoice_number}", extra={"invoice_id": invoice_id})
        return invoice

    async def record_payment(self, invoice_id: str, payment: dict) -> Invoice:
        invoice = await self.get_invoice(invoice_id)
        status = InvoiceStatus(invoice.status)
        if not can_record_payment(status):
            raise InvalidStatusTransitionError(
                "Invoice", status.value, InvoiceStatus.PAID.value,
            )

        now = self.clock()
        outcome = apply_payment(invoice.total, invoice.payments, payment["amount"], status)
        entry = {
            "id": new_id(),
            "amount": round_currency(payment["amount"]),
            "method": PaymentMethod(payment["method"]).value,
            "reference": payment.get("reference"),
            "notes": payment.get("notes"),
            "paid_at": (payment.get("paid_at") or now).isoformat(),
        }
        invoice.payments = [*invoice.payments, entry]
        invoice.amount_paid = outcome.amount_paid
        invoice.amount_due = outcome.amount_due
        invoice.status = outcome.status.value
        if outcome.fully_paid:
            invoice.paid_at = now
        await self.db.commit()
        logger.info(
            f"Recorded payment of {entry['amount']:.2f} on {invoice.invoice_number} "
            f"({invoice.status})",
            extra={"invoice_id": invoice.id},
        )
        return invoice

    async def sweep_overdue_invoices(self) -> list[str]:
        now = self.clock()
        result = await self.db.execute(
            select(Invoice).where(Invoice.status.in_([
                InvoiceStatus.SENT.value, InvoiceStatus.VIEWED.value,
                InvoiceStatus.PARTIALLY_PAID.value,
            ]))
        )
        updated = []
        for invoice in result.scalars().all():
            if is_invoice_overdue(
                InvoiceStatus(invoice.status), ensure_utc(invoice.due_date),
                invoice.amount_due, now,
            ):
                invoice.status = InvoiceStatus.OVERDUE.value
                updated.append(invoice.id)
        if updated:
            await self.db.commit()
            logger.info(f"Marked {len(updated)} invoices overdue")
        return updated
