"""User model (subset used by settings and Telegram notifications)."""

from enum import Enum

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from pkasla.models.base import BaseModel


class Role(str, Enum):
    """User roles."""

    ADMIN = "admin"  # Platform admin, manages site settings
    USER = "user"  # Event host


class User(BaseModel):
    """User account.

    A host can link a personal Telegram chat (and optionally a dedicated bot
    token) to receive gift notifications for their own events.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=Role.USER.value)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Telegram bot fields
    is_telegram_bot: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    telegram_chat_id: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    telegram_bot_token: Mapped[str | None] = mapped_column(String(255), nullable=True)

    @property
    def is_admin(self) -> bool:
        """Check if user is a platform admin."""
        return self.role == Role.ADMIN.value

    @property
    def has_telegram(self) -> bool:
        """Check if the user has connected a Telegram chat."""
        return bool(self.is_telegram_bot and self.telegram_chat_id)
