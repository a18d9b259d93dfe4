"""Invoice Routes - invoice lifecycle, payments and the overdue sweep."""

import logging

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import (
    get_acting_user, get_invoice_service, get_store_settings,
)
from storefront.core.domain_types import InvoiceStatus
from storefront.models.store_settings import StoreSettings
from storefront.schemas.billing import (
    InvoiceCreate, InvoiceResponse, InvoiceUpdate, PaymentCreate, SweepResult,
)
from storefront.services.invoice_service import InvoiceService
from storefront.services.store_settings_service import default_tax_config

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/invoices", tags=["invoices"])


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    body: InvoiceCreate,
    user_id: str | None = Depends(get_acting_user),
    store: StoreSettings = Depends(get_store_settings),
    service: InvoiceService = Depends(get_invoice_service),
):
    return await service.create_invoice(body.model_dump(), user_id, default_tax_config(store))


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    status_filter: InvoiceStatus | None = Query(None, alias="status"),
    client_email: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    service: InvoiceService = Depends(get_invoice_service),
):
    return await service.list_invoices(status_filter, client_email, limit, offset)


@router.post("/sweep-overdue", response_model=SweepResult)
async def sweep_overdue_invoices(service: InvoiceService = Depends(get_invoice_service)):
    ids = await service.sweep_overdue_invoices()
    return SweepResult(updated=len(ids), ids=ids)


@router.get("/by-number/{invoice_number}", response_model=InvoiceResponse)
async def get_invoice_by_number(
    invoice_number: str, service: InvoiceService = Depends(get_invoice_service),
):
    return await service.get_invoice_by_number(invoice_number)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: str, service: InvoiceService = Depends(get_invoice_service),
):
    return await service.get_invoice(invoice_id)


@router.patch("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: str,
    body: InvoiceUpdate,
    service: InvoiceService = Depends(get_invoice_service),
):
    return await service.update_invoice(invoice_id, body.model_dump(exclude_unset=True))


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str, service: InvoiceService = Depends(get_invoice_service),
):
    await service.delete_invoice(invoice_id)


@router.post("/{invoice_id}/send", response_model=InvoiceResponse)
async def send_invoice(
    invoice_id: str, service: InvoiceService = Depends(get_invoice_service),
):
    return await service.mark_invoice_sent(invoice_id)


@router.post("/{invoice_id}/view", response_model=InvoiceResponse)
async def view_invoice(
    invoice_id: str, service: InvoiceService = Depends(get_invoice_service),
):
    return await service.mark_invoice_viewed(invoice_id)


@router.post("/{invoice_id}/cancel", response_model=InvoiceResponse)
async def cancel_invoice(
    invoice_id: str, service: InvoiceService = Depends(get_invoice_service),
):
    return await service.cancel_invoice(invoice_id)


@router.post("/{invoice_id}/payments", response_model=InvoiceResponse)
async def record_payment(
    invoice_id: str,
    body: PaymentCreate,
    user_id: str | None = Depends(get_acting_user),
    service: InvoiceService = Depends(get_invoice_service),
):
    logger.info(f"Payment posted by {user_id or 'anonymous'}", extra={"invoice_id": invoice_id})
    return await service.record_payment(invoice_id, body.model_dump())
