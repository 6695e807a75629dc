"""User API endpoints (current user profile and Telegram linking)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pkasla.database import get_db
from pkasla.schemas.common import APIResponse
from pkasla.schemas.user import UpdateTelegramRequest, UserResponse
from pkasla.services.user_service import get_user_service
from pkasla.utils.permissions import require_authenticated
from pkasla.utils.request_context import get_current_user_id

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me")
@require_authenticated()
async def get_me(db: AsyncSession = Depends(get_db)) -> APIResponse:
    """Get the current user's profile."""
    user = await get_user_service().get_user(db, get_current_user_id())
    return APIResponse(status="success", data=UserResponse.model_validate(user))


@router.put("/me/telegram")
@require_authenticated()
async def link_telegram(
    request: UpdateTelegramRequest,
    db: AsyncSession = Depends(get_db),
) -> APIResponse:
    """Connect the current user's Telegram chat for personal notifications."""
    user = await get_user_service().link_telegram(
        db,
        get_current_user_id(),
        chat_id=request.telegram_chat_id,
        is_telegram_bot=request.is_telegram_bot,
    )
    return APIResponse(
        status="success",
        data=UserResponse.model_validate(user),
        message="Telegram connected successfully",
    )


@router.delete("/me/telegram")
@require_authenticated()
async def unlink_telegram(db: AsyncSession = Depends(get_db)) -> APIResponse:
    """Disconnect the current user's Telegram chat."""
    user = await get_user_service().unlink_telegram(db, get_current_user_id())
    return APIResponse(
        status="success",
        data=UserResponse.model_validate(user),
        message="Telegram disconnected successfully",
    )
