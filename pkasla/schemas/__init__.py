"""Pydantic schemas for request/response validation."""

from pkasla.schemas.common import APIResponse
from pkasla.schemas.settings import (
    SensitiveSettingsResponse,
    SettingsResponse,
    SystemInfoResponse,
    TestTelegramRequest,
    UpdateSettingsRequest,
)
from pkasla.schemas.user import UpdateTelegramRequest, UserResponse

__all__ = [
    # Common
    "APIResponse",
    # Settings
    "UpdateSettingsRequest",
    "SettingsResponse",
    "SensitiveSettingsResponse",
    "SystemInfoResponse",
    "TestTelegramRequest",
    # User
    "UserResponse",
    "UpdateTelegramRequest",
]
