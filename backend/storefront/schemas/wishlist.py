"""Wishlist Schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class WishlistAddRequest(BaseModel):
    product_id: str = Field(min_length=1)
    user_email: EmailStr
    user_name: str = ""
    notes: str | None = Field(None, max_length=1000)


class RestockToggleRequest(BaseModel):
    enabled: bool


class WishlistItemSchema(BaseModel):
    id: str
    product_id: str
    product_name: str
    product_slug: str
    product_image: str
    product_price: float
    was_in_stock_when_added: bool
    notify_when_restocked: bool
    notification_sent: bool = False
    notification_sent_at: str | None = None
    vendor_id: str
    vendor_name: str
    added_at: str
    notes: str | None = None


class WishlistResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    user_email: str
    user_name: str
    items: list[WishlistItemSchema]
    updated_at: datetime | None = None


class WaitingUser(BaseModel):
    user_id: str
    user_email: str
    user_name: str
    item: WishlistItemSchema


class AnalyticsUser(BaseModel):
    user_id: str
    user_name: str
    user_email: str
    added_at: str
    notification_sent: bool


class WishlistAnalyticsRow(BaseModel):
    product_id: str
    product_name: str
    product_slug: str
    product_image: str
    current_stock: int
    is_in_stock: bool
    total_wishlisted: int
    waiting_for_restock: int
    notifications_pending: int
    users: list[AnalyticsUser]


class RestockNotificationResult(BaseModel):
    product_id: str
    notified: list[str]
    failed: list[dict]
