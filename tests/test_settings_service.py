"""Tests for SettingsService: singleton row, validation, secrets and cache."""

import pytest
from sqlalchemy import func, select

from pkasla.exceptions import ValidationException
from pkasla.models import SENSITIVE_FIELDS, SiteSettings
from pkasla.schemas.settings import SettingsResponse, UpdateSettingsRequest
from pkasla.services.settings_service import SettingsService


async def _row_count(db) -> int:
    return (await db.execute(select(func.count()).select_from(SiteSettings))).scalar_one()


@pytest.fixture
def service() -> SettingsService:
    return SettingsService(cache_ttl_seconds=60)


@pytest.mark.asyncio
async def test_first_read_creates_single_default_row(db, service):
    settings = await service.get_safe(db)

    assert settings.id == 1
    assert settings.site_name == "PKASLA"
    assert settings.site_url == "https://pkasla.com"
    assert settings.session_timeout == 3600
    assert settings.max_login_attempts == 5
    assert settings.password_min_length == 8
    assert settings.storage_provider == "local"
    assert settings.email_port == 587
    assert settings.bakong_environment == "sit"
    assert settings.maintenance_mode is False
    assert settings.stripe_enabled is False
    assert settings.telegram_bot_enabled is False
    assert settings.telegram_notify_on_guest_check_in is True

    await service.get_safe(db)
    await service.get_with_sensitive(db)
    assert await _row_count(db) == 1


@pytest.mark.asyncio
async def test_safe_view_never_contains_secrets(db, service):
    await service.update(
        db,
        {
            "stripe_enabled": True,
            "stripe_secret_key": "sk_test_123",
            "stripe_publishable_key": "pk_test_123",
            "email_password": "hunter2",
        },
    )

    safe = (await service.get_safe(db)).model_dump()
    for field in SENSITIVE_FIELDS:
        assert field not in safe

    full = await service.get_with_sensitive(db)
    assert full.stripe_secret_key == "sk_test_123"
    assert full.email_password == "hunter2"


@pytest.mark.asyncio
async def test_update_returns_safe_view(db, service):
    result = await service.update(db, UpdateSettingsRequest(site_name="Wedding Hub"))

    assert isinstance(result, SettingsResponse)
    assert result.site_name == "Wedding Hub"
    assert "telegram_bot_token" not in result.model_dump()


@pytest.mark.asyncio
async def test_empty_secret_keeps_stored_value(db, service):
    await service.update(
        db,
        {
            "stripe_enabled": True,
            "stripe_secret_key": "sk_live_original",
            "stripe_publishable_key": "pk_live_original",
        },
    )

    await service.update(db, {"stripe_secret_key": "", "site_name": "Renamed"})

    full = await service.get_with_sensitive(db)
    assert full.stripe_secret_key == "sk_live_original"
    assert full.site_name == "Renamed"


@pytest.mark.asyncio
async def test_null_fields_are_ignored(db, service):
    await service.update(db, {"site_name": "Kept"})
    await service.update(db, {"site_name": None, "session_timeout": 7200})

    settings = await service.get_safe(db)
    assert settings.site_name == "Kept"
    assert settings.session_timeout == 7200


@pytest.mark.asyncio
async def test_empty_update_is_idempotent(db, service):
    before = await service.get_with_sensitive(db)
    after = await service.update(db, {})

    assert after.model_dump(exclude={"updated_at"}) == SettingsResponse.model_validate(
        before.model_dump()
    ).model_dump(exclude={"updated_at"})
    assert await _row_count(db) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("changes", "missing"),
    [
        ({"stripe_enabled": True}, {"stripe_secret_key", "stripe_publishable_key"}),
        (
            {"stripe_enabled": True, "stripe_secret_key": "sk_test_1"},
            {"stripe_publishable_key"},
        ),
        ({"bakong_enabled": True}, {"bakong_access_token", "bakong_merchant_account_id"}),
        ({"telegram_bot_enabled": True}, {"telegram_bot_token", "telegram_chat_id"}),
        (
            {"telegram_bot_enabled": True, "telegram_bot_token": "123:abc"},
            {"telegram_chat_id"},
        ),
    ],
)
async def test_first_enable_requires_credentials(db, service, changes, missing):
    with pytest.raises(ValidationException) as exc_info:
        await service.update(db, changes)

    assert exc_info.value.status_code == 400
    assert {error["field"] for error in exc_info.value.errors} == missing

    full = await service.get_with_sensitive(db)
    for field in changes:
        assert getattr(full, field) in (False, None)


@pytest.mark.asyncio
async def test_stripe_error_message_names_both_keys(db, service):
    with pytest.raises(ValidationException) as exc_info:
        await service.update(db, {"stripe_enabled": True})

    assert exc_info.value.message == (
        "Stripe Secret Key and Stripe Publishable Key are required to enable Stripe"
    )


@pytest.mark.asyncio
async def test_resave_of_enabled_gateway_needs_no_credentials(db, service):
    await service.update(
        db,
        {
            "telegram_bot_enabled": True,
            "telegram_bot_token": "123:abc",
            "telegram_chat_id": "-1001",
        },
    )

    # The admin UI sends secrets back blank on every save
    result = await service.update(
        db, {"telegram_bot_enabled": True, "telegram_bot_token": "", "site_name": "Again"}
    )

    assert result.telegram_bot_enabled is True
    full = await service.get_with_sensitive(db)
    assert full.telegram_bot_token == "123:abc"
    assert full.site_name == "Again"


@pytest.mark.asyncio
async def test_disable_gateway_without_credentials(db, service):
    result = await service.update(db, {"bakong_enabled": False})
    assert result.bakong_enabled is False


@pytest.mark.asyncio
async def test_session_timeout_bounds(db, service):
    with pytest.raises(ValidationException) as exc_info:
        await service.update(db, {"session_timeout": 100})

    assert exc_info.value.status_code == 422
    assert exc_info.value.errors[0]["field"] == "session_timeout"
    assert (await service.get_safe(db)).session_timeout == 3600

    result = await service.update(db, {"session_timeout": 3600})
    assert result.session_timeout == 3600


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes",
    [
        {"max_login_attempts": 2},
        {"max_login_attempts": 11},
        {"password_min_length": 5},
        {"password_min_length": 33},
        {"email_port": 0},
        {"email_port": 70000},
        {"storage_provider": "s3"},
        {"bakong_environment": "staging"},
        {"email_from": "not-an-email"},
        {"site_url": "ftp://pkasla.com"},
        {"site_name": ""},
    ],
)
async def test_field_validation_rejects_invalid_values(db, service, changes):
    with pytest.raises(ValidationException) as exc_info:
        await service.update(db, changes)

    assert exc_info.value.status_code == 422


@pytest.mark.asyncio
async def test_r2_requires_account_and_bucket(db, service):
    with pytest.raises(ValidationException) as exc_info:
        await service.update(db, {"storage_provider": "r2"})

    assert exc_info.value.status_code == 400
    assert {error["field"] for error in exc_info.value.errors} == {
        "r2_account_id",
        "r2_bucket_name",
    }
    assert "R2 Account ID and R2 Bucket Name" in exc_info.value.message
    assert (await service.get_safe(db)).storage_provider == "local"


@pytest.mark.asyncio
async def test_r2_accepts_stored_values(db, service):
    await service.update(db, {"r2_account_id": "acc-1", "r2_bucket_name": "uploads"})

    result = await service.update(db, {"storage_provider": "r2"})

    assert result.storage_provider == "r2"


@pytest.mark.asyncio
async def test_enable_email_with_sender_and_host(db, service):
    result = await service.update(
        db,
        {
            "email_enabled": True,
            "email_from": "noreply@pkasla.com",
            "email_host": "smtp.pkasla.com",
            "email_port": 465,
            "email_password": "smtp-secret",
        },
    )

    assert result.email_enabled is True
    assert result.email_port == 465
    assert "email_password" not in result.model_dump()
    assert (await service.get_with_sensitive(db)).email_password == "smtp-secret"


@pytest.mark.asyncio
async def test_cache_is_invalidated_by_update(db, service):
    cached = await service.get_cached(db)
    assert cached.maintenance_mode is False
    assert await service.get_cached(db) is cached

    await service.update(db, {"maintenance_mode": True})

    refreshed = await service.get_cached(db)
    assert refreshed is not cached
    assert refreshed.maintenance_mode is True


@pytest.mark.asyncio
async def test_cache_expires(db):
    service = SettingsService(cache_ttl_seconds=0)

    first = await service.get_cached(db)
    second = await service.get_cached(db)

    assert first is not second


@pytest.mark.asyncio
async def test_system_info(db, service):
    await service.update(db, {"maintenance_mode": True})

    info = await service.get_system_info(db)

    assert info.environment == "test"
    assert info.version == "1.0.0"
    assert info.uptime >= 0
    assert info.maintenance_mode is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("changes", "missing"),
    [
        ({"email_enabled": True}, {"email_from", "email_host"}),
        ({"email_enabled": True, "email_from": "noreply@pkasla.com"}, {"email_host"}),
        ({"email_enabled": True, "email_host": "smtp.pkasla.com"}, {"email_from"}),
    ],
)
async def test_enable_email_requires_sender_and_host_in_update(db, service, changes, missing):
    with pytest.raises(ValidationException) as exc_info:
        await service.update(db, changes)

    assert exc_info.value.status_code == 400
    assert {error["field"] for error in exc_info.value.errors} == missing
    assert (await service.get_safe(db)).email_enabled is False


@pytest.mark.asyncio
async def test_sensitive_read_after_orm_flush(db, service):
    await service.get_safe(db)
    row = await db.get(SiteSettings, 1)
    row.site_description = "Edited in place"
    await db.flush()

    full = await service.get_with_sensitive(db)

    assert full.site_description == "Edited in place"
    assert full.updated_at is not None


@pytest.mark.asyncio
async def test_urls_are_validated_and_stored_as_strings(db, service):
    result = await service.update(
        db,
        {
            "site_url": "https://events.pkasla.com",
            "bakong_api_url": "https://api-bakong.nbc.gov.kh/v1",
            "r2_public_url": "",
        },
    )

    assert isinstance(result.site_url, str)
    assert result.site_url.startswith("https://events.pkasla.com")
    assert result.bakong_api_url == "https://api-bakong.nbc.gov.kh/v1"
    assert result.r2_public_url == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes",
    [
        {"site_url": "not a url"},
        {"site_url": ""},
        {"r2_public_url": "mailto:ops@pkasla.com"},
        {"bakong_api_url": "https://" + "a" * 500 + ".com"},
    ],
)
async def test_invalid_urls_are_rejected(db, service, changes):
    with pytest.raises(ValidationException) as exc_info:
        await service.update(db, changes)

    assert exc_info.value.status_code == 422
