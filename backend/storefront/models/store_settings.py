"""Store Settings ORM - singleton row (id "main") with business identity and tax defaults."""

from datetime import datetime

from sqlalchemy import String, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base, utcnow
from storefront.models.seo_settings import SINGLETON_ID


class StoreSettings(Base):
    __tablename__ = "store_settings"

    id: Mapped[str] = mapped_column(String(20), primary_key=True, default=SINGLETON_ID)
    business_name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    admin_notification_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    default_tax_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tax_label: Mapped[str] = mapped_column(String(50), nullable=False, default="Tax")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
