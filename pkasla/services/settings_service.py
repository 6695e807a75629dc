"""Site settings service.

Owns the single settings row: lazy creation, safe/sensitive reads, validated
partial updates and the in-process settings cache.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from pkasla.config import get_settings
from pkasla.exceptions import ValidationException, field_errors
from pkasla.models.site_settings import SENSITIVE_FIELDS, SETTINGS_ID, SiteSettings
from pkasla.schemas.settings import (
    SensitiveSettingsResponse,
    SettingsResponse,
    SystemInfoResponse,
    UpdateSettingsRequest,
)

logger = logging.getLogger(__name__)
settings = get_settings()

_PROCESS_STARTED_AT = time.monotonic()

# enable flag -> (gateway name, [(credential field, label)]) required on first enable
GATEWAY_CREDENTIALS: dict[str, tuple[str, list[tuple[str, str]]]] = {
    "stripe_enabled": (
        "Stripe",
        [
            ("stripe_secret_key", "Secret Key"),
            ("stripe_publishable_key", "Publishable Key"),
        ],
    ),
    "bakong_enabled": (
        "Bakong",
        [
            ("bakong_access_token", "Access Token"),
            ("bakong_merchant_account_id", "Merchant Account ID"),
        ],
    ),
    "telegram_bot_enabled": (
        "Telegram",
        [
            ("telegram_bot_token", "Bot Token"),
            ("telegram_chat_id", "Chat ID"),
        ],
    ),
}


def _missing_fields_error(missing: list[tuple[str, str]], context: str) -> ValidationException:
    labels = " and ".join(label for _, label in missing)
    verb = "are" if len(missing) > 1 else "is"
    return ValidationException(
        [{"field": name, "message": f"{label} is required {context}"} for name, label in missing],
        message=f"{labels} {verb} required {context}",
        status_code=400,
    )


class SettingsCache:
    """TTL cache for the full settings view."""

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds
        self._value: SensitiveSettingsResponse | None = None
        self._expires_at = 0.0

    def get(self) -> SensitiveSettingsResponse | None:
        """Return the cached settings, or None if empty or expired."""
        if self._value is None or time.monotonic() >= self._expires_at:
            return None
        return self._value

    def set(self, value: SensitiveSettingsResponse) -> None:
        """Store settings for the configured TTL."""
        self._value = value
        self._expires_at = time.monotonic() + self.ttl_seconds

    def clear(self) -> None:
        """Drop the cached value."""
        self._value = None
        self._expires_at = 0.0


class SettingsService:
    """Service for the platform settings singleton."""

    def __init__(self, cache_ttl_seconds: int | None = None):
        if cache_ttl_seconds is None:
            cache_ttl_seconds = settings.settings_cache_ttl_seconds
        self.cache = SettingsCache(cache_ttl_seconds)

    async def _get_or_create(self, db: AsyncSession) -> SiteSettings:
        """Load the settings row, inserting the defaults on first access."""
        row = await db.get(SiteSettings, SETTINGS_ID)
        if row is None:
            row = SiteSettings(id=SETTINGS_ID)
            db.add(row)
            await db.flush()
            await db.refresh(row)
            logger.info("Created default site settings")
        return row

    async def get_safe(self, db: AsyncSession) -> SettingsResponse:
        """Get current settings with all sensitive fields removed."""
        row = await self._get_or_create(db)
        return SettingsResponse.model_validate(row)

    async def get_with_sensitive(self, db: AsyncSession) -> SensitiveSettingsResponse:
        """Get current settings including secrets. Internal use only."""
        row = await self._get_or_create(db)
        return SensitiveSettingsResponse.model_validate(row)

    async def get_cached(self, db: AsyncSession) -> SensitiveSettingsResponse:
        """Get full settings from the in-process cache, reloading when stale."""
        cached = self.cache.get()
        if cached is not None:
            return cached
        value = await self.get_with_sensitive(db)
        self.cache.set(value)
        return value

    def invalidate_cache(self) -> None:
        """Invalidate the cached settings."""
        self.cache.clear()

    def _validate_cross_fields(self, current: SiteSettings, changes: dict[str, Any]) -> None:
        """Check rules that span several fields or depend on stored state.

        Raises:
            ValidationException: (400) naming every missing field
        """

        def merged(field: str) -> Any:
            return changes[field] if field in changes else getattr(current, field)

        if merged("storage_provider") == "r2":
            missing = [
                (name, label)
                for name, label in (
                    ("r2_account_id", "R2 Account ID"),
                    ("r2_bucket_name", "R2 Bucket Name"),
                )
                if not merged(name)
            ]
            if missing:
                raise _missing_fields_error(missing, "when using R2 storage")

        # Enabling email needs the sender and host in the same update
        if changes.get("email_enabled"):
            missing = [
                (name, label)
                for name, label in (("email_from", "Email From"), ("email_host", "Email Host"))
                if not changes.get(name)
            ]
            if missing:
                raise _missing_fields_error(missing, "when email is enabled")

        # First-time enable only: the credentials must come with the same update
        for flag, (gateway, credentials) in GATEWAY_CREDENTIALS.items():
            if changes.get(flag) is not True or getattr(current, flag):
                continue
            missing = [
                (name, f"{gateway} {label}")
                for name, label in credentials
                if not changes.get(name)
            ]
            if missing:
                raise _missing_fields_error(missing, f"to enable {gateway}")

    async def update(
        self,
        db: AsyncSession,
        data: UpdateSettingsRequest | Mapping[str, Any],
    ) -> SettingsResponse:
        """Apply a partial settings update and return the safe view.

        Unset and null fields are left untouched. A sensitive field sent as
        an empty string keeps its stored secret.

        Raises:
            ValidationException: 422 for invalid field values, 400 for
                cross-field rules (missing credentials, incomplete storage
                or email configuration)
        """
        if not isinstance(data, UpdateSettingsRequest):
            try:
                data = UpdateSettingsRequest.model_validate(dict(data))
            except ValidationError as e:
                raise ValidationException(field_errors(e.errors())) from e

        changes = {
            field: value
            for field, value in data.model_dump(mode="json", exclude_unset=True).items()
            if value is not None and not (field in SENSITIVE_FIELDS and value == "")
        }

        current = await self._get_or_create(db)
        self._validate_cross_fields(current, changes)

        if changes:
            await db.execute(
                update(SiteSettings)
                .where(SiteSettings.id == SETTINGS_ID)
                .values(**changes)
                .execution_options(synchronize_session=False)
            )
            await db.flush()
            await db.refresh(current)
            logger.info(f"Site settings updated: {sorted(changes)}")

        self.invalidate_cache()
        return SettingsResponse.model_validate(current)

    async def get_system_info(self, db: AsyncSession) -> SystemInfoResponse:
        """Get environment, version, uptime and maintenance status."""
        current = await self.get_safe(db)
        return SystemInfoResponse(
            environment=settings.app_env,
            version=settings.app_version,
            uptime=round(time.monotonic() - _PROCESS_STARTED_AT, 3),
            maintenance_mode=current.maintenance_mode,
        )


# Singleton instance
_settings_service: SettingsService | None = None


def get_settings_service() -> SettingsService:
    """Get the settings service singleton."""
    global _settings_service
    if _settings_service is None:
        _settings_service = SettingsService()
    return _settings_service
