"""Contact Message Service - admin inbox for contact-form and calculator leads.

Invariants:
    - New messages start unread and unarchived
    - Marking read records who read it and when; marking unread clears both
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import MessageSource
from storefront.core.errors import ResourceNotFoundError
from storefront.core.repository_protocols import Clock
from storefront.infrastructure.clock import utc_now
from storefront.models.contact_message import ContactMessage

logger = logging.getLogger(__name__)


def build_contact_message(
    data: dict, source: MessageSource = MessageSource.CONTACT_FORM, meta: dict | None = None,
) -> ContactMessage:
    return ContactMessage(
        name=data["name"],
        email=data["email"],
        subject=data["subject"],
        message=data["message"],
        source=source.value,
        meta=meta or {},
        is_read=False,
        is_archived=False,
    )


class ContactMessageService:

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.clock = clock

    async def create_message(self, data: dict) -> ContactMessage:
        message = build_contact_message(data)
        self.db.add(message)
        await self.db.commit()
        logger.info(f"Contact message from {message.email}")
        return message

    async def get_message(self, message_id: str) -> ContactMessage:
        message = await self.db.get(ContactMessage, message_id)
        if message is None:
            raise ResourceNotFoundError("ContactMessage", message_id)
        return message

    async def list_messages(
        self,
        unread_only: bool = False,
        include_archived: bool = False,
        source: MessageSource | None = None,
    ) -> list[ContactMessage]:
        query = select(ContactMessage).order_by(ContactMessage.created_at.desc())
        if unread_only:
            query = query.where(ContactMessage.is_read.is_(False))
        if not include_archived:
            query = query.where(ContactMessage.is_archived.is_(False))
        if source:
            query = query.where(ContactMessage.source == source.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def mark_read(self, message_id: str, user_id: str | None) -> ContactMessage:
        message = await self.get_message(message_id)
        message.is_read = True
        message.read_at = self.clock()
        message.read_by = user_id
        await self.db.commit()
        return message

    async def mark_unread(self, message_id: str) -> ContactMessage:
        message = await self.get_message(message_id)
        message.is_read = False
        message.read_at = None
        message.read_by = None
        await self.db.commit()
        return message

    async def archive_message(self, message_id: str) -> ContactMessage:
        message = await self.get_message(message_id)
        message.is_archived = True
        await self.db.commit()
        return message

    async def delete_message(self, message_id: str) -> None:
        message = await self.get_message(message_id)
        await self.db.delete(message)
        await self.db.commit()

    async def unread_count(self) -> int:
        return await self.db.scalar(
            select(func.count()).select_from(ContactMessage)
            .where(ContactMessage.is_read.is_(False))
            .where(ContactMessage.is_archived.is_(False))
        )
