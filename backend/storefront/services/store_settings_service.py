"""Store Settings Service - singleton business identity and tax defaults.

Invariants:
    - Reads never create the row; an absent row yields unsaved defaults
    - The first update creates the row (id "main")
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.seo_settings import SINGLETON_ID
from storefront.models.store_settings import StoreSettings

logger = logging.getLogger(__name__)


class StoreSettingsService:

    def __init__(self, db: AsyncSession, default_business_name: str = "Our Store"):
        self.db = db
        self.default_business_name = default_business_name

    def _defaults(self) -> StoreSettings:
        return StoreSettings(
            id=SINGLETON_ID,
            business_name=self.default_business_name,
            default_tax_rate=0.0,
            tax_label="Tax",
        )

    async def get_store_settings(self) -> StoreSettings:
        settings = await self.db.get(StoreSettings, SINGLETON_ID)
        return settings if settings is not None else self._defaults()

    async def update_store_settings(self, updates: dict) -> StoreSettings:
        settings = await self.db.get(StoreSettings, SINGLETON_ID)
        if settings is None:
            settings = self._defaults()
            self.db.add(settings)
        for key, value in updates.items():
            setattr(settings, key, value)
        await self.db.commit()
        await self.db.refresh(settings)
        logger.info("Store settings updated")
        return settings


def default_tax_config(settings: StoreSettings) -> dict | None:
    """Tax config new billing documents start from, or None when no rate is set."""
    if not settings.default_tax_rate:
        return None
    return {"tax_rate": settings.default_tax_rate, "tax_label": settings.tax_label}
