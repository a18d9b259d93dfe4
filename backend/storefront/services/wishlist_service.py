"""Wishlist Service - per-user wishlists and restock notifications.

Invariants:
    - Adding a product already on the wishlist raises DuplicateWishlistItemError
      and writes nothing
    - Restock notices go only to items awaiting restock, only while the
      product is in stock; each delivered notice is marked sent
    - One recipient's notifier failure is collected and does not stop the others

Design Decisions:
    - items is reassigned as a new list on every write: JSON columns do not
      track in-place mutation
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.errors import BusinessRuleError, ResourceNotFoundError
from storefront.core.repository_protocols import Clock, Notifier
from storefront.core.wishlist_rules import (
    aggregate_analytics, build_wishlist_item, ensure_not_in_wishlist,
    find_item, is_awaiting_restock, mark_notification_sent,
)
from storefront.infrastructure.clock import utc_now
from storefront.models.product import Product
from storefront.models.wishlist import Wishlist
from storefront.services.product_service import ProductService, product_snapshot

logger = logging.getLogger(__name__)


class WishlistService:

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.clock = clock

    async def get_wishlist(self, user_id: str) -> Wishlist | None:
        return await self.db.get(Wishlist, user_id)

    async def _wishlist_or_404(self, user_id: str) -> Wishlist:
        wishlist = await self.get_wishlist(user_id)
        if wishlist is None:
            raise ResourceNotFoundError("Wishlist", user_id)
        return wishlist

    async def add_item(
        self,
        user_id: str,
        product_id: str,
        user_email: str,
        user_name: str = "",
        notes: str | None = None,
    ) -> Wishlist:
        product = await ProductService(self.db).get_product(product_id)
        wishlist = await self.get_wishlist(user_id)
        if wishlist is None:
            wishlist = Wishlist(user_id=user_id, items=[])
            self.db.add(wishlist)
        else:
            ensure_not_in_wishlist(wishlist.items, product_id)

        item = build_wishlist_item(user_id, product_snapshot(product), self.clock(), notes)
        wishlist.items = [*wishlist.items, item]
        wishlist.user_email = user_email
        wishlist.user_name = user_name or wishlist.user_name or ""
        await self.db.commit()
        logger.info(
            f"Wishlisted {product.slug}",
            extra={"user_id": user_id, "product_id": product_id},
        )
        return wishlist

    async def remove_item(self, user_id: str, product_id: str) -> Wishlist:
        wishlist = await self._wishlist_or_404(user_id)
        wishlist.items = [i for i in wishlist.items if i["product_id"] != product_id]
        await self.db.commit()
        return wishlist

    async def toggle_restock_notification(
        self, user_id: str, product_id: str, enabled: bool,
    ) -> Wishlist:
        wishlist = await self._wishlist_or_404(user_id)
        if find_item(wishlist.items, product_id) is None:
            raise ResourceNotFoundError("Wishlist item", product_id)
        wishlist.items = [
            {**i, "notify_when_restocked": enabled} if i["product_id"] == product_id else i
            for i in wishlist.items
        ]
        await self.db.commit()
        return wishlist

    async def clear_wishlist(self, user_id: str) -> Wishlist:
        wishlist = await self._wishlist_or_404(user_id)
        wishlist.items = []
        await self.db.commit()
        return wishlist

    async def _all_wishlists(self) -> list[Wishlist]:
        result = await self.db.execute(select(Wishlist))
        return list(result.scalars().all())

    async def get_users_waiting_for_restock(self, product_id: str) -> list[dict]:
        waiting = []
        for wishlist in await self._all_wishlists():
            item = find_item(wishlist.items, product_id)
            if item is not None and is_awaiting_restock(item):
                waiting.append({
                    "user_id": wishlist.user_id,
                    "user_email": wishlist.user_email,
                    "user_name": wishlist.user_name,
                    "item": item,
                })
        return waiting

    async def get_wishlist_analytics(self) -> list[dict]:
        wishlists = await self._all_wishlists()
        product_ids = {i["product_id"] for w in wishlists for i in w.items}
        stock = {}
        if product_ids:
            result = await self.db.execute(
                select(Product.id, Product.stock).where(Product.id.in_(product_ids))
            )
            stock = {product_id: count for product_id, count in result.all()}
        return aggregate_analytics(
            (
                {
                    "user_id": w.user_id,
                    "user_name": w.user_name,
                    "user_email": w.user_email,
                    "items": w.items,
                }
                for w in wishlists
            ),
            stock,
        )

    async def send_restock_notifications(
        self, product_id: str, notifier: Notifier,
    ) -> dict:
        product = await ProductService(self.db).get_product(product_id)
        if product.stock <= 0:
            raise BusinessRuleError(
                f"Product '{product.name}' is still out of stock",
                "PRODUCT_OUT_OF_STOCK",
            )

        snapshot = product_snapshot(product)
        notified: list[str] = []
        failed: list[dict] = []
        for wishlist in await self._all_wishlists():
            item = find_item(wishlist.items, product_id)
            if item is None or not is_awaiting_restock(item):
                continue
            try:
                await notifier.send_restock_notice(
                    wishlist.user_email, wishlist.user_name, snapshot,
                )
            except Exception as e:
                logger.warning(
                    f"Restock notice to {wishlist.user_email} failed: {e}",
                    extra={"user_id": wishlist.user_id, "product_id": product_id},
                )
                failed.append({"user_id": wishlist.user_id, "error": str(e)})
                continue
            now = self.clock()
            wishlist.items = [
                mark_notification_sent(i, now) if i["product_id"] == product_id else i
                for i in wishlist.items
            ]
            notified.append(wishlist.user_id)

        await self.db.commit()
        logger.info(
            f"Restock notices for {product.slug}: {len(notified)} sent, {len(failed)} failed",
            extra={"product_id": product_id},
        )
        return {"product_id": product_id, "notified": notified, "failed": failed}
