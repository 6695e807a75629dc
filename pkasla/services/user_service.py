"""User service (profile and Telegram linking)."""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from pkasla.exceptions import NotFoundException
from pkasla.models.user import User

logger = logging.getLogger(__name__)


class UserService:
    """Service for user operations."""

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        """Get a user by ID.

        Raises:
            NotFoundException: If the user does not exist
        """
        user = await db.get(User, user_id)
        if not user:
            raise NotFoundException("User")
        return user

    async def link_telegram(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        chat_id: str,
        is_telegram_bot: bool = True,
    ) -> User:
        """Connect a user's personal Telegram chat."""
        user = await self.get_user(db, user_id)
        user.telegram_chat_id = chat_id
        user.is_telegram_bot = is_telegram_bot
        await db.flush()
        await db.refresh(user)
        logger.info(f"User {user_id} linked Telegram chat")
        return user

    async def unlink_telegram(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        """Disconnect a user's Telegram chat."""
        user = await self.get_user(db, user_id)
        user.telegram_chat_id = None
        user.is_telegram_bot = False
        await db.flush()
        await db.refresh(user)
        logger.info(f"User {user_id} unlinked Telegram chat")
        return user


# Singleton instance
_user_service: UserService | None = None


def get_user_service() -> UserService:
    """Get the user service singleton."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
