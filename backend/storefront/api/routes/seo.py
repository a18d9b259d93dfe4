"""SEO Routes - settings management and metadata resolution.

Invariants:
    - Resolution endpoints read SEO and store settings once per request
      (dependencies) and never write
    - Validation is advisory: findings never block a save
"""

import logging

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import (
    get_category_service, get_product_service, get_seo_service, get_seo_settings,
    get_store_settings,
)
from storefront.core.seo_resolution import (
    SEOPageConfig, SEOSettings, resolve_template_seo, validate_seo_config,
)
from storefront.core.domain_types import ValidationSeverity
from storefront.models.store_settings import StoreSettings
from storefront.schemas.seo import (
    SEOFindingSchema, SEOPageConfigSchema, SEOSettingsSchema, SEOValidationResponse,
    TemplateResolveRequest,
)
from storefront.services.category_service import CategoryService
from storefront.services.product_service import ProductService
from storefront.services.seo_service import (
    SEOService, category_metadata, product_metadata, route_metadata,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/seo", tags=["seo"])


def _page(config: SEOPageConfig) -> SEOPageConfigSchema:
    return SEOPageConfigSchema(**config.to_dict())


@router.get("/settings")
async def get_seo_settings_document(service: SEOService = Depends(get_seo_service)):
    return await service.get_all_seo_settings()


@router.put("/settings")
async def update_seo_settings(
    body: SEOSettingsSchema, service: SEOService = Depends(get_seo_service),
):
    """Merge the sent sections over the stored document."""
    updates = body.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return await service.update_seo_settings(updates)


@router.post("/settings/initialize")
async def initialize_seo_settings(service: SEOService = Depends(get_seo_service)):
    return {"created": await service.initialize_seo_settings()}


@router.get("/route", response_model=SEOPageConfigSchema)
async def resolve_route(
    path: str = Query(..., min_length=1),
    seo: SEOSettings = Depends(get_seo_settings),
    store: StoreSettings = Depends(get_store_settings),
):
    return _page(route_metadata(seo, path, store.business_name))


@router.post("/template", response_model=SEOPageConfigSchema)
async def resolve_template(
    body: TemplateResolveRequest,
    seo: SEOSettings = Depends(get_seo_settings),
    store: StoreSettings = Depends(get_store_settings),
):
    variables = {"business_name": store.business_name, **body.variables}
    return _page(resolve_template_seo(seo, body.template_type, variables))


@router.get("/products/{product_id}", response_model=SEOPageConfigSchema)
async def product_seo(
    product_id: str,
    seo: SEOSettings = Depends(get_seo_settings),
    store: StoreSettings = Depends(get_store_settings),
    products: ProductService = Depends(get_product_service),
):
    product = await products.get_product(product_id)
    return _page(product_metadata(seo, product, store.business_name))


@router.get("/categories/{category_id}", response_model=SEOPageConfigSchema)
async def category_seo(
    category_id: str,
    seo: SEOSettings = Depends(get_seo_settings),
    store: StoreSettings = Depends(get_store_settings),
    categories: CategoryService = Depends(get_category_service),
):
    category = await categories.get_category(category_id)
    return _page(category_metadata(seo, category, store.business_name))


@router.post("/validate", response_model=SEOValidationResponse)
async def validate_config(body: SEOPageConfigSchema):
    findings = validate_seo_config(SEOPageConfig.from_dict(body.model_dump()))
    return SEOValidationResponse(
        valid=not any(f.severity is ValidationSeverity.ERROR for f in findings),
        findings=[
            SEOFindingSchema(field=f.field, message=f.message, severity=f.severity)
            for f in findings
        ],
    )
