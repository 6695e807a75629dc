"""User schemas."""

import uuid

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Public user profile. The personal bot token is never exposed."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str
    role: str
    is_active: bool
    is_telegram_bot: bool
    telegram_chat_id: str | None = None


class UpdateTelegramRequest(BaseModel):
    """Link the current user's Telegram chat."""

    model_config = ConfigDict(str_strip_whitespace=True)

    telegram_chat_id: str = Field(..., min_length=1, max_length=100, pattern=r"^-?\d+$")
    is_telegram_bot: bool = True
