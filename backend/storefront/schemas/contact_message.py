"""Contact Message Schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field

from storefront.core.domain_types import MessageSource


class ContactMessageCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    subject: str = Field(min_length=1, max_length=300)
    message: str = Field(min_length=1, max_length=10_000)


class ContactMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    subject: str
    message: str
    source: MessageSource
    metadata: dict = Field(
        default_factory=dict, validation_alias=AliasChoices("meta", "metadata"),
    )
    is_read: bool
    is_archived: bool
    created_at: datetime
    read_at: datetime | None = None
    read_by: str | None = None
