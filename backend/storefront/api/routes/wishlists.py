"""Wishlist Routes - customer wishlists and admin restock tooling.

Invariants:
    - Reading a wishlist that was never created returns an empty one (200)
    - Admin paths (/analytics, /waiting, /restock) are declared before /{user_id}
"""

import logging

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_notifier, get_wishlist_service
from storefront.core.repository_protocols import Notifier
from storefront.schemas.wishlist import (
    RestockNotificationResult, RestockToggleRequest, WaitingUser, WishlistAddRequest,
    WishlistAnalyticsRow, WishlistResponse,
)
from storefront.services.wishlist_service import WishlistService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/wishlists", tags=["wishlists"])


@router.get("/analytics", response_model=list[WishlistAnalyticsRow])
async def wishlist_analytics(service: WishlistService = Depends(get_wishlist_service)):
    return await service.get_wishlist_analytics()


@router.get("/waiting/{product_id}", response_model=list[WaitingUser])
async def users_waiting_for_restock(
    product_id: str, service: WishlistService = Depends(get_wishlist_service),
):
    return await service.get_users_waiting_for_restock(product_id)


@router.post("/restock/{product_id}", response_model=RestockNotificationResult)
async def send_restock_notifications(
    product_id: str,
    notifier: Notifier = Depends(get_notifier),
    service: WishlistService = Depends(get_wishlist_service),
):
    return await service.send_restock_notifications(product_id, notifier)


@router.get("/{user_id}", response_model=WishlistResponse)
async def get_wishlist(
    user_id: str, service: WishlistService = Depends(get_wishlist_service),
):
    wishlist = await service.get_wishlist(user_id)
    if wishlist is None:
        return WishlistResponse(user_id=user_id, user_email="", user_name="", items=[])
    return wishlist


@router.post(
    "/{user_id}/items", response_model=WishlistResponse, status_code=status.HTTP_201_CREATED,
)
async def add_item(
    user_id: str,
    body: WishlistAddRequest,
    service: WishlistService = Depends(get_wishlist_service),
):
    return await service.add_item(
        user_id, body.product_id, body.user_email, body.user_name, body.notes,
    )


@router.delete("/{user_id}/items/{product_id}", response_model=WishlistResponse)
async def remove_item(
    user_id: str, product_id: str, service: WishlistService = Depends(get_wishlist_service),
):
    return await service.remove_item(user_id, product_id)


@router.patch("/{user_id}/items/{product_id}/notify", response_model=WishlistResponse)
async def toggle_restock_notification(
    user_id: str,
    product_id: str,
    body: RestockToggleRequest,
    service: WishlistService = Depends(get_wishlist_service),
):
    return await service.toggle_restock_notification(user_id, product_id, body.enabled)


@router.delete("/{user_id}/items", response_model=WishlistResponse)
async def clear_wishlist(
    user_id: str, service: WishlistService = Depends(get_wishlist_service),
):
    return await service.clear_wishlist(user_id)
