"""Site settings schemas."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    UrlConstraints,
)

# http(s) URLs; dumped as plain strings before persisting
SiteUrl = Annotated[HttpUrl, UrlConstraints(max_length=255)]
ServiceUrl = Annotated[HttpUrl, UrlConstraints(max_length=500)]


class UpdateSettingsRequest(BaseModel):
    """Partial settings update. Every field is optional.

    Sensitive fields (passwords, secret keys, tokens) sent as an empty
    string mean "keep the stored value".
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    # General
    site_name: str | None = Field(None, min_length=1, max_length=100)
    site_url: SiteUrl | None = None
    site_description: str | None = Field(None, max_length=500)
    maintenance_mode: bool | None = None
    allow_registration: bool | None = None

    # Security
    session_timeout: int | None = Field(None, ge=300, le=86400)
    max_login_attempts: int | None = Field(None, ge=3, le=10)
    require_email_verification: bool | None = None
    enable_2fa: bool | None = None
    password_min_length: int | None = Field(None, ge=6, le=32)

    # Storage
    storage_provider: Literal["local", "r2"] | None = None
    storage_local_path: str | None = Field(None, min_length=1, max_length=200)
    r2_account_id: str | None = Field(None, max_length=255)
    r2_bucket_name: str | None = Field(None, max_length=255)
    r2_public_url: ServiceUrl | Literal[""] | None = None  # "" clears the value

    # Email notifications
    email_enabled: bool | None = None
    email_from: EmailStr | None = None
    email_host: str | None = Field(None, min_length=1, max_length=200)
    email_port: int | None = Field(None, ge=1, le=65535)
    email_user: str | None = Field(None, max_length=255)
    email_password: str | None = Field(None, max_length=255)
    notification_on_user_registration: bool | None = None
    notification_on_user_status_change: bool | None = None

    # Stripe
    stripe_enabled: bool | None = None
    stripe_secret_key: str | None = Field(None, max_length=255)
    stripe_publishable_key: str | None = Field(None, max_length=255)
    stripe_webhook_secret: str | None = Field(None, max_length=255)

    # Bakong
    bakong_enabled: bool | None = None
    bakong_access_token: str | None = Field(None, max_length=1000)
    bakong_merchant_account_id: str | None = Field(None, max_length=255)
    bakong_webhook_secret: str | None = Field(None, max_length=255)
    bakong_api_url: ServiceUrl | Literal[""] | None = None
    bakong_environment: Literal["sit", "production"] | None = None

    # Telegram bot
    telegram_bot_enabled: bool | None = None
    telegram_bot_token: str | None = Field(None, max_length=255)
    telegram_chat_id: str | None = Field(None, max_length=100)
    telegram_notify_on_guest_check_in: bool | None = None
    telegram_notify_on_new_guest: bool | None = None
    telegram_notify_on_event_created: bool | None = None
    telegram_notify_on_gift_added: bool | None = None


class SettingsResponse(BaseModel):
    """Settings as exposed to admins. Never carries secrets."""

    model_config = ConfigDict(from_attributes=True)

    id: int

    # General
    site_name: str
    site_url: str
    site_description: str
    maintenance_mode: bool
    allow_registration: bool

    # Security
    session_timeout: int
    max_login_attempts: int
    require_email_verification: bool
    enable_2fa: bool
    password_min_length: int

    # Storage
    storage_provider: str
    storage_local_path: str
    r2_account_id: str | None = None
    r2_bucket_name: str | None = None
    r2_public_url: str | None = None

    # Email notifications
    email_enabled: bool
    email_from: str
    email_host: str
    email_port: int
    email_user: str | None = None
    notification_on_user_registration: bool
    notification_on_user_status_change: bool

    # Stripe
    stripe_enabled: bool
    stripe_publishable_key: str | None = None

    # Bakong
    bakong_enabled: bool
    bakong_merchant_account_id: str | None = None
    bakong_api_url: str | None = None
    bakong_environment: str

    # Telegram bot
    telegram_bot_enabled: bool
    telegram_chat_id: str | None = None
    telegram_notify_on_guest_check_in: bool
    telegram_notify_on_new_guest: bool
    telegram_notify_on_event_created: bool
    telegram_notify_on_gift_added: bool

    created_at: datetime | None = None
    updated_at: datetime | None = None


class SensitiveSettingsResponse(SettingsResponse):
    """Full settings including secrets, for internal callers only."""

    email_password: str | None = None
    stripe_secret_key: str | None = None
    stripe_webhook_secret: str | None = None
    bakong_access_token: str | None = None
    bakong_webhook_secret: str | None = None
    telegram_bot_token: str | None = None


class SystemInfoResponse(BaseModel):
    """Runtime information shown on the admin settings page."""

    environment: str
    version: str
    uptime: float  # Seconds since process start
    maintenance_mode: bool


class TestTelegramRequest(BaseModel):
    """Credentials to verify against the Telegram Bot API."""

    model_config = ConfigDict(str_strip_whitespace=True)

    bot_token: str = Field(..., min_length=1)
    chat_id: str = Field(..., min_length=1)
