"""Document Status Rules - allowed lifecycle moves for proposals and invoices.

Invariants:
    - Only DRAFT documents are editable (line items, client, totals inputs)
    - Accept / reject only from SENT or VIEWED; convert only from ACCEPTED
    - PAID, CANCELLED, REJECTED, EXPIRED and CONVERTED are terminal
    - A view is recorded only on the first view of a SENT document

Design Decisions:
    - Transition tables as frozen dicts of frozensets: one lookup per check,
      the same table drives both validation and the error message
"""

from storefront.core.domain_types import InvoiceStatus, ProposalStatus
from storefront.core.errors import (
    DocumentNotEditableError, InvalidStatusTransitionError,
)


PROPOSAL_TRANSITIONS: dict[ProposalStatus, frozenset[ProposalStatus]] = {
    ProposalStatus.DRAFT: frozenset({ProposalStatus.SENT}),
    ProposalStatus.SENT: frozenset({
        ProposalStatus.SENT, ProposalStatus.VIEWED, ProposalStatus.ACCEPTED,
        ProposalStatus.REJECTED, ProposalStatus.EXPIRED,
    }),
    ProposalStatus.VIEWED: frozenset({
        ProposalStatus.ACCEPTED, ProposalStatus.REJECTED, ProposalStatus.EXPIRED,
    }),
    ProposalStatus.ACCEPTED: frozenset({ProposalStatus.CONVERTED}),
    ProposalStatus.REJECTED: frozenset(),
    ProposalStatus.EXPIRED: frozenset(),
    ProposalStatus.CONVERTED: frozenset(),
}

_PAYABLE = frozenset({
    InvoiceStatus.SENT, InvoiceStatus.VIEWED,
    InvoiceStatus.PARTIALLY_PAID, InvoiceStatus.OVERDUE,
})

INVOICE_TRANSITIONS: dict[InvoiceStatus, frozenset[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELLED}),
    InvoiceStatus.SENT: frozenset({
        InvoiceStatus.SENT, InvoiceStatus.VIEWED, InvoiceStatus.PARTIALLY_PAID,
        InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED,
    }),
    InvoiceStatus.VIEWED: frozenset({
        InvoiceStatus.PARTIALLY_PAID, InvoiceStatus.PAID,
        InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED,
    }),
    InvoiceStatus.PARTIALLY_PAID: frozenset({
        InvoiceStatus.PARTIALLY_PAID, InvoiceStatus.PAID,
        InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED,
    }),
    InvoiceStatus.OVERDUE: frozenset({
        InvoiceStatus.PARTIALLY_PAID, InvoiceStatus.PAID, InvoiceStatus.CANCELLED,
    }),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}


def can_transition_proposal(current: ProposalStatus, target: ProposalStatus) -> bool:
    return target in PROPOSAL_TRANSITIONS[current]


def can_transition_invoice(current: InvoiceStatus, target: InvoiceStatus) -> bool:
    return target in INVOICE_TRANSITIONS[current]


def check_proposal_transition(current: ProposalStatus, target: ProposalStatus) -> None:
    if not can_transition_proposal(current, target):
        raise InvalidStatusTransitionError("Proposal", current.value, target.value)


def check_invoice_transition(current: InvoiceStatus, target: InvoiceStatus) -> None:
    if not can_transition_invoice(current, target):
        raise InvalidStatusTransitionError("Invoice", current.value, target.value)


def ensure_editable(document_type: str, document_id: str, status: str) -> None:
    """Raise unless status is draft. Both enums share the 'draft' value."""
    if status != ProposalStatus.DRAFT.value:
        raise DocumentNotEditableError(document_type, document_id, status)


def should_record_view(status: str) -> bool:
    return status == ProposalStatus.SENT.value


def can_record_payment(status: InvoiceStatus) -> bool:
    return status in _PAYABLE
