"""Pytest configuration.

Settings are read from the environment at import time, so the minimal test
defaults are set here before importing the app. Every test runs against a
fresh schema in a temporary SQLite file.
"""

import os
import tempfile
from pathlib import Path

_TEST_DB_DIR = tempfile.mkdtemp(prefix="pkasla-tests-")

os.environ.setdefault("APP_SECRET_KEY", "test-secret-key")
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_TEST_DB_DIR) / 'test.db'}"
os.environ.setdefault("SETTINGS_CACHE_TTL_SECONDS", "60")
os.environ.pop("TELEGRAM_BOT_TOKEN", None)

from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from pkasla.database import async_session_factory, drop_db, init_db
from pkasla.main import app
from pkasla.models import Role, User
from pkasla.services.settings_service import get_settings_service
from pkasla.utils.security import create_access_token


@pytest_asyncio.fixture(autouse=True)
async def fresh_schema() -> AsyncGenerator[None, None]:
    """Create all tables before each test and drop them afterwards."""
    await init_db()
    get_settings_service().invalidate_cache()
    yield
    get_settings_service().invalidate_cache()
    await drop_db()


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """Session for service-level tests; rolled back at the end."""
    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the ASGI app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create_user(email: str, name: str, role: Role) -> User:
    async with async_session_factory() as session:
        user = User(email=email, name=name, role=role.value)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest_asyncio.fixture
async def admin_user() -> User:
    return await _create_user("admin@pkasla.test", "Site Admin", Role.ADMIN)


@pytest_asyncio.fixture
async def host_user() -> User:
    return await _create_user("host@pkasla.test", "Event Host", Role.USER)


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    token = create_access_token(admin_user.id, role=admin_user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers(host_user: User) -> dict[str, str]:
    token = create_access_token(host_user.id, role=host_user.role)
    return {"Authorization": f"Bearer {token}"}
