"""SiteSettings model: the single platform-wide configuration row."""

from sqlalchemy import Boolean, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from pkasla.models.base import Base, TimestampMixin

# The settings table holds exactly one row with this primary key.
SETTINGS_ID = 1

# Columns that are never returned by the safe settings view.
SENSITIVE_FIELDS = frozenset(
    {
        "email_password",
        "stripe_secret_key",
        "stripe_webhook_secret",
        "bakong_access_token",
        "bakong_webhook_secret",
        "telegram_bot_token",
    }
)


class SiteSettings(Base, TimestampMixin):
    """Platform-wide settings managed at runtime from the admin UI.

    Groups: general, security, storage, email notifications, payment
    gateways (Stripe, Bakong) and the Telegram bot integration.
    """

    __tablename__ = "settings"
    __table_args__ = (CheckConstraint(f"id = {SETTINGS_ID}", name="ck_settings_singleton"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=SETTINGS_ID)

    # General
    site_name: Mapped[str] = mapped_column(String(100), nullable=False, default="PKASLA")
    site_url: Mapped[str] = mapped_column(
        String(255), nullable=False, default="https://pkasla.com"
    )
    site_description: Mapped[str] = mapped_column(
        String(500), nullable=False, default="Professional Event Platform"
    )
    maintenance_mode: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    allow_registration: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Security
    session_timeout: Mapped[int] = mapped_column(Integer, nullable=False, default=3600)
    max_login_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    require_email_verification: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    enable_2fa: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    password_min_length: Mapped[int] = mapped_column(Integer, nullable=False, default=8)

    # Storage
    storage_provider: Mapped[str] = mapped_column(String(20), nullable=False, default="local")
    storage_local_path: Mapped[str] = mapped_column(
        String(200), nullable=False, default="uploads"
    )
    r2_account_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    r2_bucket_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    r2_public_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Email notifications
    email_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_from: Mapped[str] = mapped_column(
        String(255), nullable=False, default="noreply@pkasla.com"
    )
    email_host: Mapped[str] = mapped_column(
        String(200), nullable=False, default="smtp.example.com"
    )
    email_port: Mapped[int] = mapped_column(Integer, nullable=False, default=587)
    email_user: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notification_on_user_registration: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    notification_on_user_status_change: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )

    # Stripe
    stripe_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    stripe_secret_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stripe_publishable_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    stripe_webhook_secret: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Bakong (KHQR)
    bakong_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    bakong_access_token: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    bakong_merchant_account_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bakong_webhook_secret: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bakong_api_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    bakong_environment: Mapped[str] = mapped_column(String(20), nullable=False, default="sit")

    # Telegram bot
    telegram_bot_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    telegram_bot_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    telegram_chat_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    telegram_notify_on_guest_check_in: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    telegram_notify_on_new_guest: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    telegram_notify_on_event_created: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    telegram_notify_on_gift_added: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
