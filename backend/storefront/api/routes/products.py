"""Product Routes - catalog CRUD (category counts are maintained by the service)."""

import logging

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_product_service
from storefront.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from storefront.services.product_service import ProductService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate, service: ProductService = Depends(get_product_service),
):
    return await service.create_product(body.model_dump())


@router.get("/by-slug/{slug}", response_model=ProductResponse)
async def get_product_by_slug(
    slug: str, service: ProductService = Depends(get_product_service),
):
    return await service.get_product_by_slug(slug)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str, service: ProductService = Depends(get_product_service),
):
    return await service.get_product(product_id)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    return await service.update_product(product_id, body.model_dump(exclude_unset=True))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str, service: ProductService = Depends(get_product_service),
):
    await service.delete_product(product_id)
