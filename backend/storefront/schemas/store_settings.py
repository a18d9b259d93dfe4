"""Store Settings Schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class StoreSettingsUpdate(BaseModel):
    business_name: str | None = Field(None, min_length=1, max_length=200)
    email: EmailStr | None = None
    admin_notification_email: EmailStr | None = None
    phone: str | None = None
    default_tax_rate: float | None = Field(None, ge=0, le=100)
    tax_label: str | None = Field(None, max_length=50)


class StoreSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    business_name: str
    email: str | None = None
    admin_notification_email: str | None = None
    phone: str | None = None
    default_tax_rate: float
    tax_label: str
