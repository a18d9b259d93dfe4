"""Category Service - hierarchy reads, writes and product-count maintenance.

Invariants:
    - Parent existence, child and cycle checks run BEFORE any write
    - A product-count change touches the category and every ancestor in ONE
      UPDATE statement and ONE commit
    - Decrements are conditional (product_count > 0) and clamp at zero
    - Reparenting re-prefixes the slug of the category and of every descendant,
      and moves the subtree's product count from the old chain to the new one

Design Decisions:
    - Traversals load the whole categories table once and hand it to
      core/category_tree; category tables are small and this avoids one
      query per tree level
    - adjust_product_count does not commit: ProductService calls it inside
      its own transaction; the public increment/decrement wrappers commit
"""

import logging

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.category_tree import (
    build_breadcrumbs, build_category_slug, build_hierarchy,
    collect_descendant_ids, compute_subtree_counts, index_by_id, is_in_subtree,
    leaf_slug, slugify,
)
from storefront.core.errors import (
    CategoryCycleError, CategoryHasChildrenError, ParentCategoryNotFoundError,
    ResourceNotFoundError,
)
from storefront.models.category import Category
from storefront.models.product import Product

logger = logging.getLogger(__name__)


class CategoryService:
    """Category tree operations over one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ───────────────────────────────────────────────────

    async def get_categories(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_category(self, category_id: str) -> Category:
        category = await self.db.get(Category, category_id)
        if category is None:
            raise ResourceNotFoundError("Category", category_id)
        return category

    async def get_category_by_slug(self, slug: str) -> Category:
        result = await self.db.execute(select(Category).where(Category.slug == slug))
        category = result.scalars().first()
        if category is None:
            raise ResourceNotFoundError("Category", slug)
        return category

    async def get_top_level_categories(self) -> list[Category]:
        result = await self.db.execute(
            select(Category)
            .where(Category.parent_id.is_(None))
            .order_by(Category.name)
        )
        return list(result.scalars().all())

    async def get_subcategories(self, parent_id: str) -> list[Category]:
        result = await self.db.execute(
            select(Category)
            .where(Category.parent_id == parent_id)
            .order_by(Category.name)
        )
        return list(result.scalars().all())

    async def get_category_hierarchy(self) -> list[tuple[Category, list[Category]]]:
        return build_hierarchy(await self.get_categories())

    async def get_all_descendant_category_ids(self, category_id: str) -> list[str]:
        """[category_id, ...descendants], depth-first, children in name order."""
        return collect_descendant_ids(category_id, await self.get_categories())

    async def get_category_breadcrumbs(self, category_id: str) -> list[Category]:
        """Root-to-leaf trail. Empty for an unknown id."""
        return build_breadcrumbs(category_id, index_by_id(await self.get_categories()))

    # ─── Writes ──────────────────────────────────────────────────

    async def create_category(self, data: dict) -> Category:
        slug = data.get("slug") or slugify(data["name"])
        parent_id = data.get("parent_id")
        if parent_id:
            parent = await self.db.get(Category, parent_id)
            if parent is None:
                raise ParentCategoryNotFoundError(parent_id)
            slug = build_category_slug(slug, parent.slug)

        category = Category(
            name=data["name"],
            slug=slug,
            image=data.get("image"),
            description=data.get("description"),
            parent_id=parent_id or None,
            product_count=0,
        )
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        logger.info(
            f"Created category {category.slug}", extra={"category_id": category.id},
        )
        return category

    async def update_category(self, category_id: str, data: dict) -> Category:
        """Apply a partial update. A parent_id key (even None) means reparent."""
        categories = await self.get_categories()
        by_id = index_by_id(categories)
        category = by_id.get(category_id)
        if category is None:
            raise ResourceNotFoundError("Category", category_id)

        old_parent_id = category.parent_id
        new_parent_id = data["parent_id"] if "parent_id" in data else old_parent_id
        new_parent_id = new_parent_id or None
        reparent = new_parent_id != old_parent_id

        parent = None
        if new_parent_id:
            if is_in_subtree(new_parent_id, category_id, categories):
                raise CategoryCycleError(category_id, new_parent_id)
            parent = by_id.get(new_parent_id)
            if parent is None:
                raise ParentCategoryNotFoundError(new_parent_id)

        for key in ("name", "image", "description"):
            if key in data and data[key] is not None:
                setattr(category, key, data[key])

        own_slug = data.get("slug") or leaf_slug(category.slug)
        new_slug = build_category_slug(own_slug, parent.slug if parent else None)
        renamed = self._apply_slug(category, new_slug, categories)

        if reparent:
            moved = category.product_count
            category.parent_id = new_parent_id
            if moved:
                if old_parent_id:
                    await self.adjust_product_count(old_parent_id, -moved)
                if new_parent_id:
                    await self.adjust_product_count(new_parent_id, moved)

        if "name" in data:
            renamed.add(category.id)
        await self._sync_product_labels(renamed, by_id)
        await self.db.commit()
        await self.db.refresh(category)
        logger.info(
            f"Updated category {category.slug}", extra={"category_id": category.id},
        )
        return category

    def _apply_slug(
        self, category: Category, new_slug: str, categories: list[Category],
    ) -> set[str]:
        """Rename category and re-prefix its descendants. Returns changed ids."""
        old_slug = category.slug
        if new_slug == old_slug:
            return set()
        changed = {category.id}
        category.slug = new_slug
        prefix = old_slug + "/"
        by_id = index_by_id(categories)
        for descendant_id in collect_descendant_ids(category.id, categories)[1:]:
            descendant = by_id[descendant_id]
            if descendant.slug.startswith(prefix):
                descendant.slug = new_slug + "/" + descendant.slug[len(prefix):]
                changed.add(descendant_id)
        return changed

    async def _sync_product_labels(
        self, category_ids: set[str], by_id: dict[str, Category],
    ) -> None:
        if not category_ids:
            return
        for category_id in category_ids:
            category = by_id[category_id]
            await self.db.execute(
                update(Product)
                .where(Product.category_id == category_id)
                .values(category_name=category.name, category_slug=category.slug)
                .execution_options(synchronize_session=False)
            )
        await self.db.execute(
            select(Product).where(Product.category_id.in_(category_ids))
            .execution_options(populate_existing=True)
        )

    async def delete_category(self, category_id: str) -> None:
        category = await self.get_category(category_id)
        child_count = await self.db.scalar(
            select(func.count()).select_from(Category)
            .where(Category.parent_id == category_id)
        )
        if child_count:
            raise CategoryHasChildrenError(category_id, child_count)
        await self.db.delete(category)
        await self.db.commit()
        logger.info(f"Deleted category {category.slug}", extra={"category_id": category_id})

    # ─── Product counts ──────────────────────────────────────────

    async def _ancestor_ids(self, category_id: str) -> list[str]:
        """[category_id, parent, ..., root] walking parent_id one row at a time."""
        chain: list[str] = []
        current: str | None = category_id
        while current and current not in chain:
            row = (await self.db.execute(
                select(Category.id, Category.parent_id).where(Category.id == current)
            )).first()
            if row is None:
                break
            chain.append(row.id)
            current = row.parent_id
        return chain

    async def adjust_product_count(self, category_id: str, delta: int) -> list[str]:
        """Shift product_count by delta on the chain. Does not commit."""
        chain = await self._ancestor_ids(category_id)
        if not chain:
            logger.warning(
                f"Product count change for unknown category {category_id}",
                extra={"category_id": category_id},
            )
            return []
        stmt = update(Category).where(Category.id.in_(chain))
        if delta >= 0:
            stmt = stmt.values(product_count=Category.product_count + delta)
        else:
            stmt = stmt.where(Category.product_count > 0).values(
                product_count=case(
                    (Category.product_count > -delta, Category.product_count + delta),
                    else_=0,
                ),
            )
        await self.db.execute(stmt.execution_options(synchronize_session=False))
        # reload rows already in the identity map with the new counts
        await self.db.execute(
            select(Category).where(Category.id.in_(chain))
            .execution_options(populate_existing=True)
        )
        return chain

    async def increment_category_product_count(self, category_id: str) -> list[str]:
        chain = await self.adjust_product_count(category_id, 1)
        await self.db.commit()
        return chain

    async def decrement_category_product_count(self, category_id: str) -> list[str]:
        chain = await self.adjust_product_count(category_id, -1)
        await self.db.commit()
        return chain

    async def recount_product_counts(self) -> dict[str, int]:
        """Recompute every count from active products and write them in one commit."""
        categories = await self.get_categories()
        result = await self.db.execute(
            select(Product.category_id, func.count())
            .where(Product.is_active.is_(True))
            .where(Product.category_id.is_not(None))
            .group_by(Product.category_id)
        )
        direct = {category_id: count for category_id, count in result.all()}
        totals = compute_subtree_counts(categories, direct)
        for category in categories:
            category.product_count = totals[category.id]
        await self.db.commit()
        logger.info(f"Recounted products for {len(categories)} categories")
        return totals
