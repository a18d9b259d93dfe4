"""Wishlist Service - items, restock waiting lists and notifications."""

import pytest

from storefront.core.errors import BusinessRuleError, DuplicateWishlistItemError
from storefront.models.product import Product
from storefront.services.wishlist_service import WishlistService


@pytest.fixture
def wishlists(test_db, clock):
    return WishlistService(test_db, clock)


async def test_add_creates_wishlist_with_snapshot(wishlists, honey):
    wishlist = await wishlists.add_item("u1", honey.id, "ann@example.com", "Ann")
    assert wishlist.user_email == "ann@example.com"
    item = wishlist.items[0]
    assert item["product_name"] == "Raw Honey"
    assert item["notify_when_restocked"] is True


async def test_duplicate_add_is_refused(wishlists, honey):
    await wishlists.add_item("u1", honey.id, "ann@example.com")
    with pytest.raises(DuplicateWishlistItemError):
        await wishlists.add_item("u1", honey.id, "ann@example.com")
    assert len((await wishlists.get_wishlist("u1")).items) == 1


async def test_remove_and_clear(wishlists, honey, test_db):
    test_db.add(Product(id="jam", name="Jam", slug="jam", price=4, stock=3, images=[], tags=[]))
    await test_db.commit()
    await wishlists.add_item("u1", honey.id, "ann@example.com")
    await wishlists.add_item("u1", "jam", "ann@example.com")

    after_remove = await wishlists.remove_item("u1", honey.id)
    assert [i["product_id"] for i in after_remove.items] == ["jam"]
    assert (await wishlists.clear_wishlist("u1")).items == []


async def test_waiting_list_respects_toggle(wishlists, honey):
    await wishlists.add_item("u1", honey.id, "ann@example.com")
    await wishlists.add_item("u2", honey.id, "bo@example.com")
    await wishlists.toggle_restock_notification("u2", honey.id, False)

    waiting = await wishlists.get_users_waiting_for_restock(honey.id)

    assert [w["user_id"] for w in waiting] == ["u1"]


async def test_restock_notice_refused_while_out_of_stock(wishlists, honey, notifier):
    await wishlists.add_item("u1", honey.id, "ann@example.com")
    with pytest.raises(BusinessRuleError) as exc:
        await wishlists.send_restock_notifications(honey.id, notifier)
    assert exc.value.code == "PRODUCT_OUT_OF_STOCK"
    notifier.send_restock_notice.assert_not_awaited()


async def test_restock_notices_continue_past_failures(wishlists, honey, notifier, test_db):
    await wishlists.add_item("u1", honey.id, "ann@example.com", "Ann")
    await wishlists.add_item("u2", honey.id, "bo@example.com", "Bo")
    honey.stock = 10
    await test_db.commit()

    async def flaky(recipient, name, product):
        if recipient == "ann@example.com":
            raise RuntimeError("mailbox full")

    notifier.send_restock_notice.side_effect = flaky

    result = await wishlists.send_restock_notifications(honey.id, notifier)

    assert result["notified"] == ["u2"]
    assert [f["user_id"] for f in result["failed"]] == ["u1"]
    waiting = await wishlists.get_users_waiting_for_restock(honey.id)
    assert [w["user_id"] for w in waiting] == ["u1"]


async def test_analytics(wishlists, honey):
    await wishlists.add_item("u1", honey.id, "ann@example.com")
    await wishlists.add_item("u2", honey.id, "bo@example.com")
    rows = await wishlists.get_wishlist_analytics()
    assert rows[0]["product_id"] == honey.id
    assert rows[0]["total_wishlisted"] == 2
    assert rows[0]["current_stock"] == 0
