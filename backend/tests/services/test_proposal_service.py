"""Proposal Service - lifecycle, totals and conversion into invoices.

Invariants:
    - Totals are always server-computed
    - Only drafts are editable
    - Acceptance survives a failing notifier
    - A proposal converts into exactly one invoice
"""

from datetime import timedelta

import pytest

from storefront.core.errors import (
    DocumentNotEditableError, InvalidStatusTransitionError, ProposalAlreadyConvertedError,
)
from storefront.services.invoice_service import InvoiceService
from storefront.services.proposal_service import ProposalService


def _proposal_data(**overrides) -> dict:
    data = {
        "client": {"name": "Acme", "email": "buyer@example.com"},
        "line_items": [
            {"description": "Design", "quantity": 1, "rate": 100, "amount": 5000},
        ],
        "tax_config": {"tax_rate": 8, "tax_label": "Tax"},
        "discount": {"type": "percentage", "value": 10},
        "title": "Website refresh",
    }
    data.update(overrides)
    return data


@pytest.fixture
def proposals(test_db, clock):
    return ProposalService(test_db, clock)


async def test_create_numbers_and_totals(proposals):
    first = await proposals.create_proposal(_proposal_data(), "admin-1")
    second = await proposals.create_proposal(_proposal_data(), "admin-1")

    assert first.proposal_number == "PROP-2026-001"
    assert second.proposal_number == "PROP-2026-002"
    assert first.status == "draft"
    assert first.line_items[0]["amount"] == 100
    assert first.line_items[0]["id"]
    assert (first.subtotal, first.discount_amount, first.tax_amount, first.total) == (
        100, 10, 7.2, 97.2,
    )


async def test_update_with_null_client_keeps_document_whole(proposals):
    proposal = await proposals.create_proposal(_proposal_data(), None)

    updated = await proposals.update_proposal(
        proposal.id, {"client": None, "line_items": None, "title": "Renamed"},
    )

    assert updated.client["email"] == "buyer@example.com"
    assert len(updated.line_items) == 1
    assert updated.title == "Renamed"
    assert updated.total == 97.2


async def test_store_default_tax_applies_when_none_sent(proposals):
    proposal = await proposals.create_proposal(
        _proposal_data(tax_config=None, discount=None), None,
        default_tax_config={"tax_rate": 5, "tax_label": "VAT"},
    )
    assert proposal.tax_amount == 5
    assert proposal.total == 105


async def test_update_recomputes_totals(proposals):
    proposal = await proposals.create_proposal(_proposal_data(discount=None), None)
    updated = await proposals.update_proposal(proposal.id, {
        "line_items": [{"description": "Build", "quantity": 2, "rate": 50}],
        "tax_config": None,
    })
    assert updated.subtotal == 100
    assert updated.total == 100


async def test_sent_proposal_is_not_editable(proposals):
    proposal = await proposals.create_proposal(_proposal_data(), None)
    await proposals.mark_proposal_sent(proposal.id)
    with pytest.raises(DocumentNotEditableError):
        await proposals.update_proposal(proposal.id, {"title": "Changed"})


async def test_view_only_recorded_from_sent(proposals):
    proposal = await proposals.create_proposal(_proposal_data(), None)
    draft = await proposals.mark_proposal_viewed(proposal.id)
    assert draft.status == "draft"
    assert draft.viewed_at is None

    await proposals.mark_proposal_sent(proposal.id)
    viewed = await proposals.mark_proposal_viewed(proposal.id)
    assert viewed.status == "viewed"
    assert viewed.viewed_at is not None


async def test_accept_notifies_admin(proposals, notifier):
    proposal = await proposals.create_proposal(_proposal_data(), None)
    await proposals.mark_proposal_sent(proposal.id)

    accepted = await proposals.accept_proposal(proposal.id, notifier, "owner@store.test")

    assert accepted.status == "accepted"
    notifier.send_proposal_accepted.assert_awaited_once()
    recipient, summary = notifier.send_proposal_accepted.await_args.args
    assert recipient == "owner@store.test"
    assert summary["proposal_number"] == proposal.proposal_number


async def test_notifier_failure_does_not_undo_acceptance(proposals, notifier):
    notifier.send_proposal_accepted.side_effect = RuntimeError("smtp down")
    proposal = await proposals.create_proposal(_proposal_data(), None)
    await proposals.mark_proposal_sent(proposal.id)

    accepted = await proposals.accept_proposal(proposal.id, notifier, "owner@store.test")

    assert accepted.status == "accepted"
    assert (await proposals.get_proposal(proposal.id)).status == "accepted"


async def test_draft_cannot_be_accepted(proposals):
    proposal = await proposals.create_proposal(_proposal_data(), None)
    with pytest.raises(InvalidStatusTransitionError):
        await proposals.accept_proposal(proposal.id)


async def test_convert_accepted_proposal_once(test_db, clock, proposals):
    invoices = InvoiceService(test_db, clock)
    proposal = await proposals.create_proposal(_proposal_data(), "admin-1")
    await proposals.mark_proposal_sent(proposal.id)
    await proposals.accept_proposal(proposal.id)

    invoice = await proposals.convert_to_invoice(proposal.id, invoices, "admin-1")

    assert invoice.invoice_number == "INV-2026-001"
    assert invoice.proposal_id == proposal.id
    assert invoice.total == 97.2
    assert invoice.amount_due == 97.2
    assert invoice.status == "draft"
    refreshed = await proposals.get_proposal(proposal.id)
    assert refreshed.status == "converted"
    assert refreshed.converted_to_invoice_id == invoice.id

    with pytest.raises(ProposalAlreadyConvertedError):
        await proposals.convert_to_invoice(proposal.id, invoices, "admin-1")


async def test_convert_requires_acceptance(test_db, clock, proposals):
    proposal = await proposals.create_proposal(_proposal_data(), None)
    await proposals.mark_proposal_sent(proposal.id)
    with pytest.raises(InvalidStatusTransitionError):
        await proposals.convert_to_invoice(proposal.id, InvoiceService(test_db, clock), None)


async def test_expire_stale_proposals(proposals, clock):
    stale = await proposals.create_proposal(
        _proposal_data(valid_until=clock() + timedelta(days=1)), None,
    )
    fresh = await proposals.create_proposal(
        _proposal_data(valid_until=clock() + timedelta(days=30)), None,
    )
    await proposals.mark_proposal_sent(stale.id)
    await proposals.mark_proposal_sent(fresh.id)
    clock.advance(days=2)

    expired = await proposals.expire_stale_proposals()

    assert expired == [stale.id]
    assert (await proposals.get_proposal(fresh.id)).status == "sent"


async def test_list_filters_by_client_email(proposals):
    await proposals.create_proposal(_proposal_data(), None)
    await proposals.create_proposal(
        _proposal_data(client={"name": "Other", "email": "other@x.test"}), None,
    )
    found = await proposals.list_proposals(client_email="other@x.test")
    assert [p.client["name"] for p in found] == ["Other"]
