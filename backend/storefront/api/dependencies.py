"""Request Dependencies - per-request settings, acting user and services.

Invariants:
    - Store and SEO settings are read at most once per request and passed
      explicitly into services and core
    - The acting admin is whatever X-User-Id says; verifying it is the
      auth layer's job, not this service's

Design Decisions:
    - Services are built per request around the request's AsyncSession;
      FastAPI caches each dependency within a request, so a route asking for
      two services shares one session
"""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config import Settings, get_settings
from storefront.core.repository_protocols import Notifier
from storefront.core.seo_resolution import SEOSettings
from storefront.infrastructure.database import get_db
from storefront.infrastructure.notifier import LoggingNotifier
from storefront.models.store_settings import StoreSettings
from storefront.services.calculator_service import CalculatorService
from storefront.services.category_service import CategoryService
from storefront.services.contact_message_service import ContactMessageService
from storefront.services.invoice_service import InvoiceService
from storefront.services.product_service import ProductService
from storefront.services.proposal_service import ProposalService
from storefront.services.seo_service import SEOService
from storefront.services.store_settings_service import StoreSettingsService
from storefront.services.wishlist_service import WishlistService

_notifier = LoggingNotifier()


def get_acting_user(x_user_id: str | None = Header(None)) -> str | None:
    return x_user_id


def get_notifier() -> Notifier:
    return _notifier


async def get_store_settings(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> StoreSettings:
    return await StoreSettingsService(db, settings.default_business_name).get_store_settings()


async def get_seo_settings(db: AsyncSession = Depends(get_db)) -> SEOSettings:
    return await SEOService(db).load_settings()


def get_category_service(db: AsyncSession = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


def get_product_service(db: AsyncSession = Depends(get_db)) -> ProductService:
    return ProductService(db)


def get_seo_service(db: AsyncSession = Depends(get_db)) -> SEOService:
    return SEOService(db)


def get_store_settings_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> StoreSettingsService:
    return StoreSettingsService(db, settings.default_business_name)


def get_invoice_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> InvoiceService:
    return InvoiceService(
        db,
        number_padding=settings.document_number_padding,
        due_days=settings.invoice_due_days,
    )


def get_proposal_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ProposalService:
    return ProposalService(db, number_padding=settings.document_number_padding)


def get_calculator_service(db: AsyncSession = Depends(get_db)) -> CalculatorService:
    return CalculatorService(db)


def get_contact_message_service(
    db: AsyncSession = Depends(get_db),
) -> ContactMessageService:
    return ContactMessageService(db)


def get_wishlist_service(db: AsyncSession = Depends(get_db)) -> WishlistService:
    return WishlistService(db)
