"""Invoice Service - payments, status moves and the overdue sweep."""

from datetime import timedelta

import pytest

from storefront.core.errors import (
    DocumentNotEditableError, InvalidStatusTransitionError,
)
from storefront.services.invoice_service import InvoiceService


def _invoice_data(**overrides) -> dict:
    data = {
        "client": {"name": "Acme", "email": "ap@example.com"},
        "line_items": [{"description": "Hosting", "quantity": 12, "rate": 25}],
    }
    data.update(overrides)
    return data


@pytest.fixture
def invoices(test_db, clock):
    return InvoiceService(test_db, clock, due_days=30)


async def test_create_sets_due_date_and_amount_due(invoices, clock):
    invoice = await invoices.create_invoice(_invoice_data(), "admin-1")
    assert invoice.invoice_number == "INV-2026-001"
    assert invoice.total == 300
    assert invoice.amount_due == 300
    assert invoice.amount_paid == 0
    assert invoice.due_date == clock() + timedelta(days=30)


async def test_payment_on_draft_is_refused(invoices):
    invoice = await invoices.create_invoice(_invoice_data(), None)
    with pytest.raises(InvalidStatusTransitionError):
        await invoices.record_payment(invoice.id, {"amount": 10, "method": "card"})


async def test_partial_then_full_payment(invoices):
    invoice = await invoices.create_invoice(_invoice_data(), None)
    await invoices.mark_invoice_sent(invoice.id)

    partial = await invoices.record_payment(invoice.id, {"amount": 100, "method": "ach"})
    assert partial.status == "partially_paid"
    assert partial.amount_paid == 100
    assert partial.amount_due == 200
    assert partial.payments[0]["method"] == "ach"

    paid = await invoices.record_payment(invoice.id, {"amount": 200, "method": "card"})
    assert paid.status == "paid"
    assert paid.amount_due == 0
    assert paid.paid_at is not None
    assert len(paid.payments) == 2


async def test_paid_invoice_cannot_be_cancelled(invoices):
    invoice = await invoices.create_invoice(_invoice_data(), None)
    await invoices.mark_invoice_sent(invoice.id)
    await invoices.record_payment(invoice.id, {"amount": 300, "method": "cash"})
    with pytest.raises(InvalidStatusTransitionError):
        await invoices.cancel_invoice(invoice.id)


async def test_draft_edit_recomputes(invoices):
    invoice = await invoices.create_invoice(_invoice_data(), None)
    updated = await invoices.update_invoice(invoice.id, {
        "discount": {"type": "fixed", "value": 50},
    })
    assert updated.total == 250
    assert updated.amount_due == 250


async def test_sent_invoice_is_not_editable(invoices):
    invoice = await invoices.create_invoice(_invoice_data(), None)
    await invoices.mark_invoice_sent(invoice.id)
    with pytest.raises(DocumentNotEditableError):
        await invoices.update_invoice(invoice.id, {"notes": "late"})


async def test_overdue_sweep(invoices, clock):
    open_invoice = await invoices.create_invoice(_invoice_data(), None)
    draft = await invoices.create_invoice(_invoice_data(), None)
    await invoices.mark_invoice_sent(open_invoice.id)
    clock.advance(days=31)

    overdue = await invoices.sweep_overdue_invoices()

    assert overdue == [open_invoice.id]
    assert (await invoices.get_invoice(draft.id)).status == "draft"
    recovered = await invoices.record_payment(open_invoice.id, {"amount": 300, "method": "wire"})
    assert recovered.status == "paid"


async def test_view_recorded_once(invoices):
    invoice = await invoices.create_invoice(_invoice_data(), None)
    await invoices.mark_invoice_sent(invoice.id)
    first = await invoices.mark_invoice_viewed(invoice.id)
    viewed_at = first.viewed_at
    again = await invoices.mark_invoice_viewed(invoice.id)
    assert again.status == "viewed"
    assert again.viewed_at == viewed_at
