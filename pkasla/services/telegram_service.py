"""Telegram service using the Bot HTTP API.

Every call is best effort: failures are logged and reported through the
return value, never raised to the caller.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Literal

import httpx
from pydantic import BaseModel

from pkasla.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

INVALID_TOKEN_MESSAGE = "Invalid bot token. Please check your Telegram Bot Token."
INVALID_CHAT_ID_MESSAGE = "Failed to send test message. Please check your Chat ID."
INVALID_CREDENTIALS_MESSAGE = "Invalid chat ID or bot token. Please verify your credentials."
CONNECTION_FAILED_MESSAGE = (
    "Failed to connect to Telegram. Please check your bot token and chat ID."
)
TEST_SUCCESS_MESSAGE = "Test message sent successfully! Check your Telegram."

# Commands the bot answers with the sender's chat ID
CHAT_ID_COMMANDS = ("/start", "/chatid")


class TelegramMessage(BaseModel):
    """Outgoing Telegram message."""

    chat_id: str
    text: str
    parse_mode: Literal["Markdown", "HTML"] = "Markdown"


class TelegramTestResult(BaseModel):
    """Outcome of a connection test."""

    success: bool
    message: str


def escape_markdown(text: str) -> str:
    """Escape characters that have meaning in Telegram legacy Markdown."""
    for char in ("_", "*", "`", "["):
        text = text.replace(char, f"\\{char}")
    return text


def _now() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class TelegramService:
    """Service for sending messages through a Telegram bot."""

    def __init__(
        self,
        api_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the Telegram service.

        Args:
            api_url: Bot API base URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            transport: Optional httpx transport, used to stub the API in tests
        """
        self.api_url = (api_url or settings.telegram_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.telegram_timeout_seconds
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    def _method_url(self, bot_token: str, method: str) -> str:
        return f"{self.api_url}/bot{bot_token}/{method}"

    async def send_message(self, bot_token: str, message: TelegramMessage) -> bool:
        """Send a message via the bot.

        Returns:
            True if Telegram accepted the message, False otherwise
        """
        try:
            async with self._client() as client:
                response = await client.post(
                    self._method_url(bot_token, "sendMessage"),
                    json={
                        "chat_id": message.chat_id,
                        "text": message.text,
                        "parse_mode": message.parse_mode,
                    },
                )

            data = response.json()
            if response.status_code == 200 and data.get("ok"):
                logger.info(f"Telegram message sent to chat {message.chat_id}")
                return True

            logger.error(
                f"Failed to send Telegram message to chat {message.chat_id}: "
                f"{response.status_code} - {data.get('description')}"
            )
            return False

        except Exception as e:
            logger.error(f"Error sending Telegram message to chat {message.chat_id}: {e}")
            return False

    async def test_connection(self, bot_token: str, chat_id: str) -> TelegramTestResult:
        """Verify a bot token and chat ID.

        Fetches the bot identity first, then sends a confirmation message to
        the chat. The returned message tells an invalid token apart from an
        invalid chat ID.
        """
        try:
            async with self._client() as client:
                response = await client.get(self._method_url(bot_token, "getMe"))
                response.raise_for_status()
                bot_info = response.json()

            if not bot_info.get("ok"):
                return TelegramTestResult(success=False, message=INVALID_TOKEN_MESSAGE)

            bot_username = bot_info.get("result", {}).get("username", "")

            sent = await self.send_message(
                bot_token,
                TelegramMessage(
                    chat_id=chat_id,
                    text=(
                        "✅ *Connection Successful!*\n\n"
                        f"Your Telegram bot (@{escape_markdown(bot_username)}) is now connected.\n\n"
                        "You will receive notifications for your events here."
                    ),
                ),
            )
            if sent:
                return TelegramTestResult(success=True, message=TEST_SUCCESS_MESSAGE)
            return TelegramTestResult(success=False, message=INVALID_CHAT_ID_MESSAGE)

        except httpx.HTTPStatusError as e:
            logger.error(f"Telegram connection test failed: {e.response.status_code}")
            if e.response.status_code in (401, 404):
                return TelegramTestResult(success=False, message=INVALID_TOKEN_MESSAGE)
            if e.response.status_code == 400:
                return TelegramTestResult(success=False, message=INVALID_CREDENTIALS_MESSAGE)
            return TelegramTestResult(success=False, message=CONNECTION_FAILED_MESSAGE)

        except Exception as e:
            logger.error(f"Error testing Telegram connection: {e}")
            return TelegramTestResult(success=False, message=CONNECTION_FAILED_MESSAGE)

    # ============== Chat ID Bot ==============

    async def get_updates(
        self,
        bot_token: str,
        offset: int | None = None,
        poll_timeout: int = 30,
    ) -> list[dict]:
        """Long-poll the Bot API for new messages.

        Raises:
            httpx.HTTPError: On transport errors or non-2xx responses
        """
        params: dict[str, int | str] = {"timeout": poll_timeout, "allowed_updates": '["message"]'}
        if offset is not None:
            params["offset"] = offset

        # The request stays open for up to poll_timeout seconds
        async with httpx.AsyncClient(
            timeout=self.timeout + poll_timeout, transport=self.transport
        ) as client:
            response = await client.get(self._method_url(bot_token, "getUpdates"), params=params)
            response.raise_for_status()
            data = response.json()

        if not data.get("ok"):
            raise httpx.HTTPStatusError(
                f"getUpdates failed: {data.get('description')}",
                request=response.request,
                response=response,
            )
        return data.get("result", [])

    async def handle_update(self, bot_token: str, update: dict) -> bool:
        """Answer a chat ID command with the sender's chat ID.

        Returns:
            True if a reply was sent
        """
        message = update.get("message") or {}
        text = (message.get("text") or "").strip()
        chat_id = message.get("chat", {}).get("id")
        if chat_id is None or not text:
            return False

        # "/chatid@pkasla_bot" in groups
        command = text.split()[0].split("@")[0].lower()
        if command not in CHAT_ID_COMMANDS:
            return False

        return await self.send_message(
            bot_token,
            TelegramMessage(
                chat_id=str(chat_id),
                text=(
                    f"Your chat ID is `{chat_id}`\n\n"
                    "Paste it into your PKASLA profile to receive event notifications here."
                ),
            ),
        )

    async def run_chat_id_bot(
        self,
        bot_token: str,
        poll_timeout: int = 30,
        retry_delay: float = 5.0,
    ) -> None:
        """Poll for chat ID commands until cancelled."""
        offset: int | None = None
        logger.info("Telegram chat ID bot polling started")

        while True:
            try:
                updates = await self.get_updates(bot_token, offset, poll_timeout)
            except Exception as e:
                logger.error(f"Telegram getUpdates failed: {e}")
                await asyncio.sleep(retry_delay)
                continue

            for update in updates:
                offset = update["update_id"] + 1
                await self.handle_update(bot_token, update)

    # ============== Notification Templates ==============

    async def notify_guest_check_in(
        self,
        bot_token: str,
        chat_id: str,
        guest_name: str,
        event_name: str,
    ) -> bool:
        """Send a guest check-in notification."""
        return await self.send_message(
            bot_token,
            TelegramMessage(
                chat_id=chat_id,
                text=(
                    "✅ *Guest Checked In*\n\n"
                    f"👤 *Guest:* {escape_markdown(guest_name)}\n"
                    f"📅 *Event:* {escape_markdown(event_name)}\n"
                    f"⏰ *Time:* {_now()}"
                ),
            ),
        )

    async def notify_new_guest(
        self,
        bot_token: str,
        chat_id: str,
        guest_name: str,
        event_name: str,
    ) -> bool:
        """Send a new guest notification."""
        return await self.send_message(
            bot_token,
            TelegramMessage(
                chat_id=chat_id,
                text=(
                    "🆕 *New Guest Added*\n\n"
                    f"👤 *Guest:* {escape_markdown(guest_name)}\n"
                    f"📅 *Event:* {escape_markdown(event_name)}\n"
                    f"⏰ *Added:* {_now()}"
                ),
            ),
        )

    async def notify_event_created(
        self,
        bot_token: str,
        chat_id: str,
        event_name: str,
        event_date: date,
    ) -> bool:
        """Send a new event notification."""
        return await self.send_message(
            bot_token,
            TelegramMessage(
                chat_id=chat_id,
                text=(
                    "🎉 *New Event Created*\n\n"
                    f"📅 *Event:* {escape_markdown(event_name)}\n"
                    f"📆 *Date:* {event_date.strftime('%Y-%m-%d')}\n"
                    f"⏰ *Created:* {_now()}"
                ),
            ),
        )

    async def notify_gift_added(
        self,
        bot_token: str,
        chat_id: str,
        guest_name: str,
        event_name: str,
        amount: float,
        currency: str,
        payment_method: str,
    ) -> bool:
        """Send a gift received notification."""
        return await self.send_message(
            bot_token,
            TelegramMessage(
                chat_id=chat_id,
                text=(
                    "🎁 *New Gift Received*\n\n"
                    f"👤 *Guest:* {escape_markdown(guest_name)}\n"
                    f"📅 *Event:* {escape_markdown(event_name)}\n"
                    f"💰 *Amount:* {amount:,.2f} {escape_markdown(currency.upper())}\n"
                    f"💳 *Method:* {escape_markdown(payment_method)}\n"
                    f"⏰ *Time:* {_now()}"
                ),
            ),
        )


# Singleton instance
_telegram_service: TelegramService | None = None


def get_telegram_service() -> TelegramService:
    """Get the Telegram service singleton."""
    global _telegram_service
    if _telegram_service is None:
        _telegram_service = TelegramService()
    return _telegram_service
