"""Store Settings Routes."""

from fastapi import APIRouter, Depends

from storefront.api.dependencies import get_store_settings_service
from storefront.schemas.store_settings import StoreSettingsResponse, StoreSettingsUpdate
from storefront.services.store_settings_service import StoreSettingsService

router = APIRouter(prefix="/api/v1/store-settings", tags=["store-settings"])


@router.get("", response_model=StoreSettingsResponse)
async def get_store_settings(
    service: StoreSettingsService = Depends(get_store_settings_service),
):
    return await service.get_store_settings()


@router.put("", response_model=StoreSettingsResponse)
async def update_store_settings(
    body: StoreSettingsUpdate,
    service: StoreSettingsService = Depends(get_store_settings_service),
):
    return await service.update_store_settings(body.model_dump(exclude_unset=True))
