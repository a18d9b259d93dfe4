"""Contact Message Routes - public contact form and the admin inbox."""

import logging

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import get_acting_user, get_contact_message_service
from storefront.core.domain_types import MessageSource
from storefront.schemas.contact_message import ContactMessageCreate, ContactMessageResponse
from storefront.services.contact_message_service import ContactMessageService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/contact-messages", tags=["contact-messages"])


@router.post("", response_model=ContactMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_message(
    body: ContactMessageCreate,
    service: ContactMessageService = Depends(get_contact_message_service),
):
    return await service.create_message(body.model_dump())


@router.get("", response_model=list[ContactMessageResponse])
async def list_messages(
    unread_only: bool = Query(False),
    include_archived: bool = Query(False),
    source: MessageSource | None = Query(None),
    service: ContactMessageService = Depends(get_contact_message_service),
):
    return await service.list_messages(unread_only, include_archived, source)


@router.get("/unread-count")
async def unread_count(service: ContactMessageService = Depends(get_contact_message_service)):
    return {"count": await service.unread_count()}


@router.get("/{message_id}", response_model=ContactMessageResponse)
async def get_message(
    message_id: str, service: ContactMessageService = Depends(get_contact_message_service),
):
    return await service.get_message(message_id)


@router.post("/{message_id}/read", response_model=ContactMessageResponse)
async def mark_read(
    message_id: str,
    user_id: str | None = Depends(get_acting_user),
    service: ContactMessageService = Depends(get_contact_message_service),
):
    return await service.mark_read(message_id, user_id)


@router.post("/{message_id}/unread", response_model=ContactMessageResponse)
async def mark_unread(
    message_id: str, service: ContactMessageService = Depends(get_contact_message_service),
):
    return await service.mark_unread(message_id)


@router.post("/{message_id}/archive", response_model=ContactMessageResponse)
async def archive_message(
    message_id: str, service: ContactMessageService = Depends(get_contact_message_service),
):
    return await service.archive_message(message_id)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: str, service: ContactMessageService = Depends(get_contact_message_service),
):
    await service.delete_message(message_id)
