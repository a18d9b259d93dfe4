"""Wishlist Rules - tests for item snapshots, duplicates and analytics."""

from datetime import datetime, timezone

import pytest

from storefront.core.errors import DuplicateWishlistItemError
from storefront.core.wishlist_rules import (
    aggregate_analytics, build_wishlist_item, ensure_not_in_wishlist,
    is_awaiting_restock, is_in_wishlist, mark_notification_sent,
)

NOW = datetime(2026, 5, 4, 12, 0, tzinfo=timezone.utc)


def _product(product_id="p1", stock=0):
    return {
        "id": product_id, "name": "Honey", "slug": "honey", "price": 9.5,
        "stock": stock, "images": ["honey.jpg"], "vendor_id": "v1", "vendor_name": "Bee Farm",
    }


def test_out_of_stock_item_opts_into_restock_notice():
    item = build_wishlist_item("u1", _product(stock=0), NOW)
    assert item["id"] == "u1_p1"
    assert item["notify_when_restocked"] is True
    assert item["was_in_stock_when_added"] is False
    assert item["product_image"] == "honey.jpg"
    assert item["added_at"] == NOW.isoformat()


def test_in_stock_item_does_not_opt_in():
    item = build_wishlist_item("u1", _product(stock=3), NOW, notes="gift")
    assert item["notify_when_restocked"] is False
    assert item["notes"] == "gift"


def test_duplicate_product_is_rejected():
    items = [build_wishlist_item("u1", _product(), NOW)]
    assert is_in_wishlist(items, "p1")
    with pytest.raises(DuplicateWishlistItemError) as exc:
        ensure_not_in_wishlist(items, "p1")
    assert exc.value.http_status == 409


def test_sent_notification_stops_waiting():
    item = build_wishlist_item("u1", _product(), NOW)
    assert is_awaiting_restock(item)
    sent = mark_notification_sent(item, NOW)
    assert not is_awaiting_restock(sent)
    assert sent["notification_sent_at"] == NOW.isoformat()
    assert item["notification_sent"] is False


def test_analytics_ranks_most_wishlisted_first():
    wishlists = [
        {"user_id": "u1", "user_name": "Ann", "user_email": "a@x.io", "items": [
            build_wishlist_item("u1", _product("p1"), NOW),
            build_wishlist_item("u1", _product("p2", stock=5), NOW),
        ]},
        {"user_id": "u2", "user_name": "Bo", "user_email": "b@x.io", "items": [
            mark_notification_sent(build_wishlist_item("u2", _product("p1"), NOW), NOW),
        ]},
    ]
    rows = aggregate_analytics(wishlists, {"p1": 4, "p2": 5})
    assert [r["product_id"] for r in rows] == ["p1", "p2"]
    top = rows[0]
    assert top["total_wishlisted"] == 2
    assert top["waiting_for_restock"] == 2
    assert top["notifications_pending"] == 1
    assert top["is_in_stock"] is True
    assert {u["user_id"] for u in top["users"]} == {"u1", "u2"}
