"""Notification dispatch for platform events.

Business operations (guest check-in, new guest, event created, gift added)
call this service after they succeed. Whether a Telegram message goes out is
decided from the current site settings; a failed notification never fails the
operation that triggered it.
"""

import logging
import uuid
from collections.abc import Awaitable, Callable
from datetime import date
from enum import Enum

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from pkasla.config import get_settings
from pkasla.models.user import User
from pkasla.services.settings_service import SettingsService, get_settings_service
from pkasla.services.telegram_service import (
    TelegramMessage,
    TelegramService,
    get_telegram_service,
)

logger = logging.getLogger(__name__)
settings = get_settings()

SendFn = Callable[[str, str], Awaitable[bool]]


class NotificationStatus(str, Enum):
    """Outcome of a notification attempt."""

    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


class NotificationTrigger(str, Enum):
    """Events that can produce an admin Telegram notification."""

    GUEST_CHECK_IN = "guest_check_in"
    NEW_GUEST = "new_guest"
    EVENT_CREATED = "event_created"
    GIFT_ADDED = "gift_added"
    CUSTOM = "custom"


# Per-trigger toggle on SiteSettings (custom messages only need the bot enabled)
TRIGGER_TOGGLES: dict[NotificationTrigger, str | None] = {
    NotificationTrigger.GUEST_CHECK_IN: "telegram_notify_on_guest_check_in",
    NotificationTrigger.NEW_GUEST: "telegram_notify_on_new_guest",
    NotificationTrigger.EVENT_CREATED: "telegram_notify_on_event_created",
    NotificationTrigger.GIFT_ADDED: "telegram_notify_on_gift_added",
    NotificationTrigger.CUSTOM: None,
}


class NotificationResult(BaseModel):
    """Result of a single best-effort notification."""

    status: NotificationStatus
    reason: str | None = None

    @classmethod
    def sent(cls) -> "NotificationResult":
        return cls(status=NotificationStatus.SENT)

    @classmethod
    def skipped(cls, reason: str) -> "NotificationResult":
        return cls(status=NotificationStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "NotificationResult":
        return cls(status=NotificationStatus.FAILED, reason=reason)


class NotificationService:
    """Sends Telegram notifications according to the site settings."""

    def __init__(
        self,
        settings_service: SettingsService | None = None,
        telegram_service: TelegramService | None = None,
    ):
        self.settings_service = settings_service or get_settings_service()
        self.telegram = telegram_service or get_telegram_service()

    async def _dispatch(
        self,
        db: AsyncSession,
        trigger: NotificationTrigger,
        send: SendFn,
    ) -> NotificationResult:
        """Check settings for the trigger and run ``send(token, chat_id)``.

        The admin chat falls back to TELEGRAM_CHAT_ID when the settings leave
        it empty. Never raises; every failure is logged and returned as FAILED.
        """
        try:
            current = await self.settings_service.get_with_sensitive(db)

            if not current.telegram_bot_enabled:
                return NotificationResult.skipped("telegram disabled")

            toggle = TRIGGER_TOGGLES[trigger]
            if toggle and not getattr(current, toggle):
                return NotificationResult.skipped(f"{trigger.value} notifications disabled")

            token = current.telegram_bot_token
            chat_id = current.telegram_chat_id or settings.telegram_chat_id
            if not token or not chat_id:
                logger.warning("Telegram bot enabled but credentials missing")
                return NotificationResult.skipped("telegram credentials missing")

            if await send(token, chat_id):
                return NotificationResult.sent()
            return NotificationResult.failed("telegram rejected the message")

        except Exception as e:
            logger.error(f"Failed to send {trigger.value} notification: {e}")
            return NotificationResult.failed(str(e))

    async def notify_guest_check_in(
        self,
        db: AsyncSession,
        guest_name: str,
        event_name: str,
    ) -> NotificationResult:
        """Notify the admin chat that a guest checked in."""
        return await self._dispatch(
            db,
            NotificationTrigger.GUEST_CHECK_IN,
            lambda token, chat_id: self.telegram.notify_guest_check_in(
                token, chat_id, guest_name, event_name
            ),
        )

    async def notify_new_guest(
        self,
        db: AsyncSession,
        guest_name: str,
        event_name: str,
    ) -> NotificationResult:
        """Notify the admin chat that a guest was added."""
        return await self._dispatch(
            db,
            NotificationTrigger.NEW_GUEST,
            lambda token, chat_id: self.telegram.notify_new_guest(
                token, chat_id, guest_name, event_name
            ),
        )

    async def notify_event_created(
        self,
        db: AsyncSession,
        event_name: str,
        event_date: date,
    ) -> NotificationResult:
        """Notify the admin chat that an event was created."""
        return await self._dispatch(
            db,
            NotificationTrigger.EVENT_CREATED,
            lambda token, chat_id: self.telegram.notify_event_created(
                token, chat_id, event_name, event_date
            ),
        )

    async def notify_gift_added(
        self,
        db: AsyncSession,
        guest_name: str,
        event_name: str,
        amount: float,
        currency: str,
        payment_method: str,
    ) -> NotificationResult:
        """Notify the admin chat that a gift was recorded."""
        return await self._dispatch(
            db,
            NotificationTrigger.GIFT_ADDED,
            lambda token, chat_id: self.telegram.notify_gift_added(
                token, chat_id, guest_name, event_name, amount, currency, payment_method
            ),
        )

    async def send_custom_message(self, db: AsyncSession, text: str) -> NotificationResult:
        """Send an arbitrary message to the admin chat."""
        return await self._dispatch(
            db,
            NotificationTrigger.CUSTOM,
            lambda token, chat_id: self.telegram.send_message(
                token, TelegramMessage(chat_id=chat_id, text=text)
            ),
        )

    # ============== Per-user Notifications ==============

    async def send_to_user(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        send_fn: SendFn,
    ) -> NotificationResult:
        """Deliver a message to a user's own Telegram chat.

        The bot token is taken from the user's dedicated bot, then the site
        settings, then the TELEGRAM_BOT_TOKEN environment fallback.
        ``send_fn(token, chat_id)`` performs the actual send.
        """
        try:
            user = await db.get(User, user_id)
            if user is None:
                return NotificationResult.skipped("user not found")
            if not user.has_telegram:
                return NotificationResult.skipped("user has not connected telegram")

            token = user.telegram_bot_token
            if not token:
                current = await self.settings_service.get_with_sensitive(db)
                token = current.telegram_bot_token or settings.telegram_bot_token
            if not token:
                logger.warning(f"No Telegram bot token available for user {user_id}")
                return NotificationResult.skipped("no telegram bot token configured")

            if await send_fn(token, user.telegram_chat_id):
                return NotificationResult.sent()
            return NotificationResult.failed("telegram rejected the message")

        except Exception as e:
            logger.error(f"Failed to send Telegram notification to user {user_id}: {e}")
            return NotificationResult.failed(str(e))

    async def notify_user_gift_added(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        guest_name: str,
        event_name: str,
        amount: float,
        currency: str,
        payment_method: str,
    ) -> NotificationResult:
        """Tell an event host that a gift was recorded for their event."""
        return await self.send_to_user(
            db,
            user_id,
            lambda token, chat_id: self.telegram.notify_gift_added(
                token, chat_id, guest_name, event_name, amount, currency, payment_method
            ),
        )


# Singleton instance
_notification_service: NotificationService | None = None


def get_notification_service() -> NotificationService:
    """Get the notification service singleton."""
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service
