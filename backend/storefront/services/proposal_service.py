"""Proposal Service - proposal lifecycle and conversion into invoices.

Invariants:
    - Only DRAFT proposals are editable; every edit recomputes totals
    - Status changes go through core/document_status transition tables
    - Acceptance is committed before the admin is notified; a notifier
      failure is logged and never undoes the acceptance
    - Conversion happens once, from ACCEPTED, and writes the invoice and the
      proposal's converted status in one commit
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.document_status import (
    check_proposal_transition, ensure_editable, should_record_view,
)
from storefront.core.domain_types import DocumentKind, ProposalStatus
from storefront.core.errors import ProposalAlreadyConvertedError, ResourceNotFoundError
from storefront.core.repository_protocols import Clock, Notifier
from storefront.core.totals import is_proposal_expired
from storefront.db.base import new_id
from storefront.infrastructure.clock import ensure_utc, utc_now
from storefront.models.invoice import Invoice
from storefront.models.proposal import Proposal
from storefront.services.billing_documents import (
    BILLING_FIELDS, apply_fields, apply_totals, client_email_matches,
    next_document_number,
)
from storefront.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)

_PROPOSAL_FIELDS = BILLING_FIELDS + ("description", "valid_until")

# carried from an accepted proposal onto its invoice
_CONVERTED_FIELDS = (
    "client", "client_id", "line_items", "tax_config", "discount",
    "processing_fee_config", "payment_method_discount", "title", "notes", "terms",
)


def proposal_summary(proposal: Proposal) -> dict:
    return {
        "id": proposal.id,
        "proposal_number": proposal.proposal_number,
        "title": proposal.title,
        "client": proposal.client,
        "total": proposal.total,
    }


class ProposalService:

    def __init__(
        self,
        db: AsyncSession,
        clock: Clock = utc_now,
        number_padding: int = 3,
    ):
        self.db = db
        self.clock = clock
        self.number_padding = number_padding

    # ─── Reads ───────────────────────────────────────────────────

    async def get_proposal(self, proposal_id: str) -> Proposal:
        proposal = await self.db.get(Proposal, proposal_id)
        if proposal is None:
            raise ResourceNotFoundError("Proposal", proposal_id)
        return proposal

    async def get_proposal_by_number(self, proposal_number: str) -> Proposal:
        proposal = (await self.db.execute(
            select(Proposal).where(Proposal.proposal_number == proposal_number)
        )).scalar_one_or_none()
        if proposal is None:
            raise ResourceNotFoundError("Proposal", proposal_number)
        return proposal

    async def list_proposals(
        self,
        status: ProposalStatus | None = None,
        client_email: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Proposal]:
        query = select(Proposal).order_by(Proposal.created_at.desc())
        if status:
            query = query.where(Proposal.status == status.value)
        if client_email:
            query = query.where(client_email_matches(Proposal, client_email))
        result = await self.db.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())

    # ─── Writes ──────────────────────────────────────────────────

    async def create_proposal(
        self, data: dict, created_by: str | None, default_tax_config: dict | None = None,
    ) -> Proposal:
        proposal = Proposal(
            id=new_id(),
            proposal_number=await next_document_number(
                self.db, DocumentKind.PROPOSAL, self.clock(), self.number_padding,
            ),
            status=ProposalStatus.DRAFT.value,
            created_by=created_by,
            line_items=[],
        )
        apply_fields(proposal, data, _PROPOSAL_FIELDS)
        if proposal.tax_config is None:
            proposal.tax_config = default_tax_config
        apply_totals(proposal)
        self.db.add(proposal)
        await self.db.commit()
        logger.info(
            f"Created proposal {proposal.proposal_number}",
            extra={"proposal_id": proposal.id, "user_id": created_by},
        )
        return proposal

    async def update_proposal(self, proposal_id: str, data: dict) -> Proposal:
        proposal = await self.get_proposal(proposal_id)
        ensure_editable("Proposal", proposal.id, proposal.status)
        apply_fields(proposal, data, _PROPOSAL_FIELDS)
        apply_totals(proposal)
        await self.db.commit()
        return proposal

    async def delete_proposal(self, proposal_id: str) -> None:
        proposal = await self.get_proposal(proposal_id)
        await self.db.delete(proposal)
        await self.db.commit()
        logger.info(
            f"Deleted proposal {proposal.proposal_number}",
            extra={"proposal_id": proposal_id},
        )

    async def _transition(self, proposal_id: str, target: ProposalStatus) -> Proposal:
        proposal = await self.get_proposal(proposal_id)
        check_proposal_transition(ProposalStatus(proposal.status), target)
        proposal.status = target.value
        return proposal

    async def mark_proposal_sent(self, proposal_id: str) -> Proposal:
        proposal = await self._transition(proposal_id, ProposalStatus.SENT)
        proposal.sent_at = self.clock()
        await self.db.commit()
        return proposal

    async def mark_proposal_viewed(self, proposal_id: str) -> Proposal:
        """First view of a sent proposal. Any other status is left alone."""
        proposal = await self.get_proposal(proposal_id)
        if should_record_view(proposal.status):
            proposal.status = ProposalStatus.VIEWED.value
            proposal.viewed_at = self.clock()
            await self.db.commit()
        return proposal

    async def accept_proposal(
        self,
        proposal_id: str,
        notifier: Notifier | None = None,
        admin_email: str | None = None,
    ) -> Proposal:
        proposal = await self._transition(proposal_id, ProposalStatus.ACCEPTED)
        proposal.responded_at = self.clock()
        await self.db.commit()
        logger.info(
            f"Proposal {proposal.proposal_number} accepted",
            extra={"proposal_id": proposal.id},
        )

        if notifier is not None and admin_email:
            try:
                await notifier.send_proposal_accepted(admin_email, proposal_summary(proposal))
            except Exception as e:
                logger.warning(
                    f"Acceptance notice for {proposal.proposal_number} failed: {e}",
                    extra={"proposal_id": proposal.id},
                )
        return proposal

    async def reject_proposal(self, proposal_id: str) -> Proposal:
        proposal = await self._transition(proposal_id, ProposalStatus.REJECTED)
        proposal.responded_at = self.clock()
        await self.db.commit()
        return proposal

    async def expire_stale_proposals(self) -> list[str]:
        now = self.clock()
        result = await self.db.execute(
            select(Proposal)
            .where(Proposal.status.in_([
                ProposalStatus.SENT.value, ProposalStatus.VIEWED.value,
            ]))
            .where(Proposal.valid_until.is_not(None))
        )
        expired = []
        for proposal in result.scalars().all():
            if is_proposal_expired(
                ProposalStatus(proposal.status), ensure_utc(proposal.valid_until), now,
            ):
                proposal.status = ProposalStatus.EXPIRED.value
                expired.append(proposal.id)
        if expired:
            await self.db.commit()
            logger.info(f"Expired {len(expired)} proposals")
        return expired

    async def convert_to_invoice(
        self, proposal_id: str, invoices: InvoiceService, created_by: str | None,
    ) -> Invoice:
        proposal = await self.get_proposal(proposal_id)
        if proposal.converted_to_invoice_id:
            raise ProposalAlreadyConvertedError(proposal.id, proposal.converted_to_invoice_id)
        check_proposal_transition(ProposalStatus(proposal.status), ProposalStatus.CONVERTED)

        data = {key: getattr(proposal, key) for key in _CONVERTED_FIELDS}
        invoice = await invoices.build_invoice(data, created_by, proposal_id=proposal.id)
        proposal.status = ProposalStatus.CONVERTED.value
        proposal.converted_to_invoice_id = invoice.id
        await self.db.commit()
        logger.info(
            f"Converted {proposal.proposal_number} into {invoice.invoice_number}",
            extra={"proposal_id": proposal.id, "invoice_id": invoice.id},
        )
        return invoice
