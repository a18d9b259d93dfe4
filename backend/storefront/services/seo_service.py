"""SEO Service - settings persistence and metadata for stored records.

Invariants:
    - An absent settings row behaves exactly like the default document
    - update_seo_settings merges top-level sections; unsent sections are kept
    - Resolution itself is pure (core/seo_resolution); this layer only loads
      records and fills template variables

Design Decisions:
    - {business_name} is substituted here, after resolution, so stored page
      titles stay store-agnostic
"""

import logging
from collections.abc import Mapping

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import SEOTemplateType
from storefront.core.seo_resolution import (
    SEOPageConfig, SEOSettings, apply_template_variables,
    default_settings_document, generate_meta_description,
    merge_settings_document, resolve_route_seo, resolve_template_seo,
)
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.models.seo_settings import SINGLETON_ID, SEOSettingsRecord

logger = logging.getLogger(__name__)


def fill_business_name(config: SEOPageConfig, business_name: str) -> SEOPageConfig:
    variables = {"business_name": business_name}
    return SEOPageConfig(
        title=apply_template_variables(config.title, variables) if config.title else None,
        description=(
            apply_template_variables(config.description, variables)
            if config.description else None
        ),
        keywords=config.keywords,
        og_image=config.og_image,
        noindex=config.noindex,
    )


class SEOService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all_seo_settings(self) -> dict:
        record = await self.db.get(SEOSettingsRecord, SINGLETON_ID)
        if record is None:
            return default_settings_document()
        return record.to_document()

    async def load_settings(self) -> SEOSettings:
        return SEOSettings.from_dict(await self.get_all_seo_settings())

    async def update_seo_settings(self, updates: Mapping) -> dict:
        record = await self.db.get(SEOSettingsRecord, SINGLETON_ID)
        merged = merge_settings_document(
            record.to_document() if record else None, updates,
        )
        if record is None:
            record = SEOSettingsRecord(id=SINGLETON_ID)
            self.db.add(record)
        record.global_config = merged["global"]
        record.pages = merged["pages"]
        record.patterns = merged["patterns"]
        record.templates = merged["templates"]
        await self.db.commit()
        logger.info(f"SEO settings updated: {sorted(k for k in updates if updates[k] is not None)}")
        return record.to_document()

    async def initialize_seo_settings(self) -> bool:
        """Write the defaults if no settings row exists. True when created."""
        if await self.db.get(SEOSettingsRecord, SINGLETON_ID) is not None:
            return False
        await self.update_seo_settings(default_settings_document())
        return True


def route_metadata(
    settings: SEOSettings, route: str, business_name: str,
) -> SEOPageConfig:
    return fill_business_name(resolve_route_seo(settings, route), business_name)


def product_metadata(
    settings: SEOSettings, product: Product, business_name: str,
) -> SEOPageConfig:
    return resolve_template_seo(settings, SEOTemplateType.PRODUCT, {
        "name": product.name,
        "description": generate_meta_description(product.description or ""),
        "category_name": product.category_name,
        "price": f"{product.price:.2f}",
        "business_name": business_name,
    })


def category_metadata(
    settings: SEOSettings, category: Category, business_name: str,
) -> SEOPageConfig:
    return resolve_template_seo(settings, SEOTemplateType.CATEGORY, {
        "name": category.name,
        "description": generate_meta_description(category.description or ""),
        "business_name": business_name,
    })
