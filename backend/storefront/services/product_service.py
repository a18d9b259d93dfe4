"""Product Service - catalog writes that keep category product counts in step.

Invariants:
    - A product is counted iff it is active AND has a category
    - Every count change happens in the same commit as the product write
    - category_name / category_slug are refreshed whenever category_id is written
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.category_tree import slugify
from storefront.core.errors import ResourceNotFoundError
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.services.category_service import CategoryService

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "name", "slug", "description", "price", "sale_price", "on_sale", "stock",
    "is_active", "vendor_id", "vendor_name", "images", "tags",
)


def _is_counted(is_active: bool, category_id: str | None) -> bool:
    return bool(is_active and category_id)


def product_snapshot(product: Product) -> dict:
    """Plain-dict view used by wishlist items and notifications."""
    return {
        "id": product.id,
        "name": product.name,
        "slug": product.slug,
        "price": product.price,
        "stock": product.stock,
        "images": list(product.images or []),
        "vendor_id": product.vendor_id,
        "vendor_name": product.vendor_name,
    }


class ProductService:
    """Product CRUD plus category-count maintenance."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.categories = CategoryService(db)

    async def get_product(self, product_id: str) -> Product:
        product = await self.db.get(Product, product_id)
        if product is None:
            raise ResourceNotFoundError("Product", product_id)
        return product

    async def get_product_by_slug(self, slug: str) -> Product:
        result = await self.db.execute(select(Product).where(Product.slug == slug))
        product = result.scalar_one_or_none()
        if product is None:
            raise ResourceNotFoundError("Product", slug)
        return product

    async def get_products_by_category(self, category_id: str) -> list[Product]:
        """Active products anywhere in the category's subtree, name order."""
        await self.categories.get_category(category_id)
        ids = await self.categories.get_all_descendant_category_ids(category_id)
        result = await self.db.execute(
            select(Product)
            .where(Product.category_id.in_(ids))
            .where(Product.is_active.is_(True))
            .order_by(Product.name)
        )
        return list(result.scalars().all())

    async def _category_or_404(self, category_id: str) -> Category:
        category = await self.db.get(Category, category_id)
        if category is None:
            raise ResourceNotFoundError("Category", category_id)
        return category

    async def create_product(self, data: dict) -> Product:
        category_id = data.get("category_id")
        category = await self._category_or_404(category_id) if category_id else None

        product = Product(
            **{k: data[k] for k in _EDITABLE_FIELDS if data.get(k) is not None},
        )
        product.slug = data.get("slug") or slugify(data["name"])
        product.is_active = data.get("is_active", True)
        product.category_id = category_id or None
        product.category_name = category.name if category else ""
        product.category_slug = category.slug if category else ""
        self.db.add(product)

        if _is_counted(product.is_active, category_id):
            await self.categories.adjust_product_count(category_id, 1)
        await self.db.commit()
        await self.db.refresh(product)
        logger.info(f"Created product {product.slug}", extra={"product_id": product.id})
        return product

    async def update_product(self, product_id: str, data: dict) -> Product:
        product = await self.get_product(product_id)
        was_counted = _is_counted(product.is_active, product.category_id)
        old_category_id = product.category_id

        if "category_id" in data and data["category_id"] != old_category_id:
            new_category_id = data["category_id"] or None
            category = await self._category_or_404(new_category_id) if new_category_id else None
            product.category_id = new_category_id
            product.category_name = category.name if category else ""
            product.category_slug = category.slug if category else ""

        for key in _EDITABLE_FIELDS:
            if key in data and data[key] is not None:
                setattr(product, key, data[key])
        if "sale_price" in data:
            product.sale_price = data["sale_price"]

        is_counted = _is_counted(product.is_active, product.category_id)
        if was_counted and (not is_counted or product.category_id != old_category_id):
            await self.categories.adjust_product_count(old_category_id, -1)
        if is_counted and (not was_counted or product.category_id != old_category_id):
            await self.categories.adjust_product_count(product.category_id, 1)

        await self.db.commit()
        await self.db.refresh(product)
        logger.info(f"Updated product {product.slug}", extra={"product_id": product.id})
        return product

    async def delete_product(self, product_id: str) -> None:
        product = await self.get_product(product_id)
        if _is_counted(product.is_active, product.category_id):
            await self.categories.adjust_product_count(product.category_id, -1)
        await self.db.delete(product)
        await self.db.commit()
        logger.info(f"Deleted product {product.slug}", extra={"product_id": product_id})
