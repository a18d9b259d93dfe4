"""Category Routes - category tree reads, writes and count maintenance.

Invariants:
    - Static paths (/hierarchy, /by-slug, /recount) are declared before /{category_id}
    - Slugs of subcategories contain "/", so the by-slug route takes a path parameter
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import get_category_service, get_product_service
from storefront.schemas.category import (
    CategoryCreate, CategoryResponse, CategoryTreeNode, CategoryUpdate,
)
from storefront.schemas.product import ProductResponse
from storefront.services.category_service import CategoryService
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    top_level: bool = Query(False),
    service: CategoryService = Depends(get_category_service),
):
    if top_level:
        return await service.get_top_level_categories()
    return await service.get_categories()


@router.get("/hierarchy", response_model=list[CategoryTreeNode])
async def get_hierarchy(service: CategoryService = Depends(get_category_service)):
    return [
        CategoryTreeNode(
            **CategoryResponse.model_validate(parent).model_dump(),
            subcategories=[CategoryResponse.model_validate(c) for c in children],
        )
        for parent, children in await service.get_category_hierarchy()
    ]


@router.get("/by-slug/{slug:path}", response_model=CategoryResponse)
async def get_category_by_slug(
    slug: str, service: CategoryService = Depends(get_category_service),
):
    return await service.get_category_by_slug(slug)


@router.post("/recount")
async def recount_product_counts(service: CategoryService = Depends(get_category_service)):
    """Rebuild every product_count from active products."""
    return {"counts": await service.recount_product_counts()}


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate, service: CategoryService = Depends(get_category_service),
):
    return await service.create_category(body.model_dump())


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: str, service: CategoryService = Depends(get_category_service),
):
    return await service.get_category(category_id)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
):
    return await service.update_category(category_id, body.model_dump(exclude_unset=True))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str, service: CategoryService = Depends(get_category_service),
):
    await service.delete_category(category_id)


@router.get("/{category_id}/subcategories", response_model=list[CategoryResponse])
async def get_subcategories(
    category_id: str, service: CategoryService = Depends(get_category_service),
):
    return await service.get_subcategories(category_id)


@router.get("/{category_id}/descendants")
async def get_descendant_ids(
    category_id: str, service: CategoryService = Depends(get_category_service),
):
    return {"ids": await service.get_all_descendant_category_ids(category_id)}


@router.get("/{category_id}/breadcrumbs", response_model=list[CategoryResponse])
async def get_breadcrumbs(
    category_id: str, service: CategoryService = Depends(get_category_service),
):
    return await service.get_category_breadcrumbs(category_id)


@router.get("/{category_id}/products", response_model=list[ProductResponse])
async def get_category_products(
    category_id: str, service: ProductService = Depends(get_product_service),
):
    return await service.get_products_by_category(category_id)


@router.post("/{category_id}/product-count/increment")
async def increment_product_count(
    category_id: str, service: CategoryService = Depends(get_category_service),
):
    return {"updated": await service.increment_category_product_count(category_id)}


@router.post("/{category_id}/product-count/decrement")
async def decrement_product_count(
    category_id: str, service: CategoryService = Depends(get_category_service),
):
    return {"updated": await service.decrement_category_product_count(category_id)}
