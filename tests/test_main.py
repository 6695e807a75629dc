"""Tests for application startup and shutdown."""

import asyncio

import pytest

from pkasla import main as main_module
from pkasla.main import create_app


class FakeBot:
    def __init__(self):
        self.started = asyncio.Event()
        self.cancelled = False
        self.tokens: list[str] = []

    async def run_chat_id_bot(self, bot_token: str) -> None:
        self.tokens.append(bot_token)
        self.started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise


@pytest.mark.asyncio
async def test_lifespan_runs_chat_id_bot_when_token_configured(monkeypatch):
    bot = FakeBot()
    monkeypatch.setattr(main_module.settings, "telegram_bot_token", "999:env-bot")
    monkeypatch.setattr(main_module, "get_telegram_service", lambda: bot)
    app = create_app()

    async with app.router.lifespan_context(app):
        await asyncio.wait_for(bot.started.wait(), timeout=2)
        assert bot.cancelled is False

    assert bot.tokens == ["999:env-bot"]
    assert bot.cancelled is True


@pytest.mark.asyncio
async def test_lifespan_skips_bot_without_token(monkeypatch):
    bot = FakeBot()
    monkeypatch.setattr(main_module.settings, "telegram_bot_token", None)
    monkeypatch.setattr(main_module, "get_telegram_service", lambda: bot)
    app = create_app()

    async with app.router.lifespan_context(app):
        await asyncio.sleep(0)

    assert bot.tokens == []
