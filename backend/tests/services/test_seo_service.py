"""SEO Service - settings persistence and record metadata."""

from storefront.services.seo_service import (
    SEOService, category_metadata, product_metadata, route_metadata,
)
from storefront.services.store_settings_service import (
    StoreSettingsService, default_tax_config,
)


async def test_absent_settings_behave_like_defaults(test_db):
    document = await SEOService(test_db).get_all_seo_settings()
    assert "/about" in document["pages"]
    assert document["global"]["twitter_card"] == "summary_large_image"


async def test_initialize_only_once(test_db):
    service = SEOService(test_db)
    assert await service.initialize_seo_settings() is True
    assert await service.initialize_seo_settings() is False


async def test_update_merges_sections(test_db):
    service = SEOService(test_db)
    await service.update_seo_settings({"pages": {"/faq": {"title": "FAQ | {business_name}"}}})
    document = await service.get_all_seo_settings()
    assert list(document["pages"]) == ["/faq"]
    assert "/account/*" in document["patterns"]


async def test_route_metadata_fills_business_name(test_db):
    settings = await SEOService(test_db).load_settings()
    config = route_metadata(settings, "/shop", "Green Market")
    assert config.title == "Shop All Products | Green Market"


async def test_product_and_category_metadata(test_db, category_tree, honey):
    settings = await SEOService(test_db).load_settings()
    honey.category_name = "Pantry"
    product_config = product_metadata(settings, honey, "Green Market")
    assert product_config.title == "Raw Honey - Pantry | Green Market"
    assert product_config.description == "Local raw honey"

    category_config = category_metadata(settings, category_tree["fruit"], "Green Market")
    assert category_config.title == "Fruit | Green Market"


async def test_store_settings_defaults_then_upsert(test_db):
    service = StoreSettingsService(test_db, "Fallback Shop")
    defaults = await service.get_store_settings()
    assert defaults.business_name == "Fallback Shop"
    assert default_tax_config(defaults) is None

    saved = await service.update_store_settings({"business_name": "Green Market", "default_tax_rate": 6})
    assert saved.business_name == "Green Market"
    assert default_tax_config(saved) == {"tax_rate": 6, "tax_label": "Tax"}
