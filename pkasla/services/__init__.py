"""Service layer for business logic."""

from pkasla.services.notification_service import (
    NotificationResult,
    NotificationService,
    NotificationStatus,
    get_notification_service,
)
from pkasla.services.settings_service import SettingsService, get_settings_service
from pkasla.services.telegram_service import TelegramService, get_telegram_service
from pkasla.services.user_service import UserService, get_user_service

__all__ = [
    "SettingsService",
    "get_settings_service",
    "TelegramService",
    "get_telegram_service",
    "NotificationService",
    "NotificationResult",
    "NotificationStatus",
    "get_notification_service",
    "UserService",
    "get_user_service",
]
