"""Wishlist Rules - item snapshots, duplicate checks and restock analytics.

Invariants:
    - A product appears at most once per wishlist
    - notify_when_restocked is switched on automatically for products added
      while out of stock
    - An item is awaiting restock while notify_when_restocked is set and no
      notification has been sent yet
    - Analytics rows are ordered by total_wishlisted, most popular first

Design Decisions:
    - Items are plain dicts (stored as a JSON array on the wishlist row);
      timestamps are ISO-8601 strings so the array round-trips unchanged
"""

from datetime import datetime
from collections.abc import Iterable, Mapping

from storefront.core.errors import DuplicateWishlistItemError


def find_item(items: Iterable[Mapping], product_id: str) -> Mapping | None:
    return next((i for i in items if i["product_id"] == product_id), None)


def is_in_wishlist(items: Iterable[Mapping], product_id: str) -> bool:
    return find_item(items, product_id) is not None


def ensure_not_in_wishlist(items: Iterable[Mapping], product_id: str) -> None:
    if is_in_wishlist(items, product_id):
        raise DuplicateWishlistItemError(product_id)


def build_wishlist_item(
    user_id: str, product: Mapping, now: datetime, notes: str | None = None,
) -> dict:
    """Snapshot of the product as it looks when it is wishlisted."""
    in_stock = product.get("stock", 0) > 0
    images = product.get("images") or []
    return {
        "id": f"{user_id}_{product['id']}",
        "product_id": product["id"],
        "product_name": product["name"],
        "product_slug": product["slug"],
        "product_image": images[0] if images else "",
        "product_price": product["price"],
        "was_in_stock_when_added": in_stock,
        "notify_when_restocked": not in_stock,
        "notification_sent": False,
        "notification_sent_at": None,
        "vendor_id": product.get("vendor_id") or "",
        "vendor_name": product.get("vendor_name") or "",
        "added_at": now.isoformat(),
        "notes": notes,
    }


def is_awaiting_restock(item: Mapping) -> bool:
    return bool(item.get("notify_when_restocked")) and not item.get("notification_sent")


def mark_notification_sent(item: Mapping, now: datetime) -> dict:
    return {**item, "notification_sent": True, "notification_sent_at": now.isoformat()}


def aggregate_analytics(
    wishlists: Iterable[Mapping], stock_by_product: Mapping[str, int],
) -> list[dict]:
    """Per-product counts across every wishlist.

    Each wishlist mapping carries user_id, user_name, user_email and items.
    Products missing from stock_by_product are reported with zero stock.
    """
    by_product: dict[str, dict] = {}
    for wishlist in wishlists:
        for item in wishlist["items"]:
            product_id = item["product_id"]
            row = by_product.get(product_id)
            if row is None:
                stock = stock_by_product.get(product_id, 0)
                row = by_product[product_id] = {
                    "product_id": product_id,
                    "product_name": item["product_name"],
                    "product_slug": item["product_slug"],
                    "product_image": item.get("product_image", ""),
                    "current_stock": stock,
                    "is_in_stock": stock > 0,
                    "total_wishlisted": 0,
                    "waiting_for_restock": 0,
                    "notifications_pending": 0,
                    "users": [],
                }
            row["total_wishlisted"] += 1
            if item.get("notify_when_restocked"):
                row["waiting_for_restock"] += 1
                if not item.get("notification_sent"):
                    row["notifications_pending"] += 1
            row["users"].append({
                "user_id": wishlist["user_id"],
                "user_name": wishlist.get("user_name") or "",
                "user_email": wishlist.get("user_email") or "",
                "added_at": item["added_at"],
                "notification_sent": bool(item.get("notification_sent")),
            })
    return sorted(by_product.values(), key=lambda r: r["total_wishlisted"], reverse=True)
