"""Admin API routes for platform settings."""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pkasla.database import get_db
from pkasla.schemas.common import APIResponse
from pkasla.schemas.settings import TestTelegramRequest, UpdateSettingsRequest
from pkasla.services.settings_service import get_settings_service
from pkasla.services.telegram_service import get_telegram_service
from pkasla.utils.permissions import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/settings", tags=["Settings"])


@router.get("")
@require_admin()
async def get_settings(
    include_sensitive: bool = Query(False),
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    """Get current settings (secrets only with include_sensitive=true)."""
    settings_service = get_settings_service()
    if include_sensitive:
        data = await settings_service.get_with_sensitive(db)
    else:
        data = await settings_service.get_safe(db)

    return APIResponse(
        status="success",
        data=data,
        message="Settings retrieved successfully",
    )


@router.put("")
@router.patch("")
@require_admin()
async def update_settings(
    request: UpdateSettingsRequest,
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    """Partially update settings. Empty secrets keep their stored value."""
    settings_service = get_settings_service()
    data = await settings_service.update(db, request)
    # Readers may refill the cache before commit; drop it again once committed
    await db.commit()
    settings_service.invalidate_cache()

    return APIResponse(
        status="success",
        data=data,
        message="Settings updated successfully",
    )


@router.get("/system-info")
@require_admin()
async def get_system_info(
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    """Get environment, version, uptime and maintenance status."""
    settings_service = get_settings_service()
    info = await settings_service.get_system_info(db)

    return APIResponse(
        status="success",
        data=info,
        message="System information retrieved successfully",
    )


@router.post("/test-telegram")
@require_admin()
async def test_telegram(request: TestTelegramRequest) -> APIResponse:
    """Verify a Telegram bot token and chat ID by sending a test message."""
    telegram_service = get_telegram_service()
    result = await telegram_service.test_connection(request.bot_token, request.chat_id)

    return APIResponse(
        status="success" if result.success else "error",
        data=result,
        message=result.message,
    )
