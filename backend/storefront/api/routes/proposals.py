"""Proposal Routes - proposal lifecycle and conversion into invoices.

Invariants:
    - New proposals inherit the store's default tax when none is sent
    - Acceptance notices go to admin_notification_email, else the store email
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import (
    get_acting_user, get_invoice_service, get_notifier, get_proposal_service,
    get_store_settings,
)
from storefront.core.domain_types import ProposalStatus
from storefront.core.repository_protocols import Notifier
from storefront.models.store_settings import StoreSettings
from storefront.schemas.billing import (
    InvoiceResponse, ProposalCreate, ProposalResponse, ProposalUpdate, SweepResult,
)
from storefront.services.invoice_service import InvoiceService
from storefront.services.proposal_service import ProposalService
from storefront.services.store_settings_service import default_tax_config

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/proposals", tags=["proposals"])


@router.post("", response_model=ProposalResponse, status_code=status.HTTP_201_CREATED)
async def create_proposal(
    body: ProposalCreate,
    user_id: str | None = Depends(get_acting_user),
    store: StoreSettings = Depends(get_store_settings),
    service: ProposalService = Depends(get_proposal_service),
):
    return await service.create_proposal(
        body.model_dump(), user_id, default_tax_config(store),
    )


@router.get("", response_model=list[ProposalResponse])
async def list_proposals(
    status_filter: ProposalStatus | None = Query(None, alias="status"),
    client_email: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    service: ProposalService = Depends(get_proposal_service),
):
    return await service.list_proposals(status_filter, client_email, limit, offset)


@router.post("/expire-stale", response_model=SweepResult)
async def expire_stale_proposals(service: ProposalService = Depends(get_proposal_service)):
    ids = await service.expire_stale_proposals()
    return SweepResult(updated=len(ids), ids=ids)


@router.get("/by-number/{proposal_number}", response_model=ProposalResponse)
async def get_proposal_by_number(
    proposal_number: str, service: ProposalService = Depends(get_proposal_service),
):
    return await service.get_proposal_by_number(proposal_number)


@router.get("/{proposal_id}", response_model=ProposalResponse)
async def get_proposal(
    proposal_id: str, service: ProposalService = Depends(get_proposal_service),
):
    return await service.get_proposal(proposal_id)


@router.patch("/{proposal_id}", response_model=ProposalResponse)
async def update_proposal(
    proposal_id: str,
    body: ProposalUpdate,
    service: ProposalService = Depends(get_proposal_service),
):
    return await service.update_proposal(proposal_id, body.model_dump(exclude_unset=True))


@router.delete("/{proposal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_proposal(
    proposal_id: str, service: ProposalService = Depends(get_proposal_service),
):
    await service.delete_proposal(proposal_id)


@router.post("/{proposal_id}/send", response_model=ProposalResponse)
async def send_proposal(
    proposal_id: str, service: ProposalService = Depends(get_proposal_service),
):
    return await service.mark_proposal_sent(proposal_id)


@router.post("/{proposal_id}/view", response_model=ProposalResponse)
async def view_proposal(
    proposal_id: str, service: ProposalService = Depends(get_proposal_service),
):
    return await service.mark_proposal_viewed(proposal_id)


@router.post("/{proposal_id}/accept", response_model=ProposalResponse)
async def accept_proposal(
    proposal_id: str,
    store: StoreSettings = Depends(get_store_settings),
    notifier: Notifier = Depends(get_notifier),
    service: ProposalService = Depends(get_proposal_service),
):
    return await service.accept_proposal(
        proposal_id, notifier, store.admin_notification_email or store.email,
    )


@router.post("/{proposal_id}/reject", response_model=ProposalResponse)
async def reject_proposal(
    proposal_id: str, service: ProposalService = Depends(get_proposal_service),
):
    return await service.reject_proposal(proposal_id)


@router.post(
    "/{proposal_id}/convert",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def convert_to_invoice(
    proposal_id: str,
    user_id: str | None = Depends(get_acting_user),
    service: ProposalService = Depends(get_proposal_service),
    invoices: InvoiceService = Depends(get_invoice_service),
):
    return await service.convert_to_invoice(proposal_id, invoices, user_id)
