"""Tests for gum_taper_bot/entrypoints/bot_main.py trigger handling."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

os.environ.setdefault("BOT_TOKEN", "123456:TEST-TOKEN")
os.environ.setdefault("CHAT_ID", "42")

from gum_taper_bot.core.entities.errors import InvalidTimeFormat  # noqa: E402
from gum_taper_bot.entrypoints import bot_main  # noqa: E402
from gum_taper_bot.utils import hub  # noqa: E402
from tests.fakes import FakeAlarmFacility, MemoryProfileStore  # noqa: E402


@pytest.fixture
def sent(monkeypatch) -> AsyncMock:
    send = AsyncMock()
    monkeypatch.setattr(bot_main.bot, "send_message", send)
    monkeypatch.setattr(bot_main, "scheduler", MagicMock(running=True))
    return send


def _texts(send: AsyncMock) -> list[str]:
    return [c.args[1] for c in send.await_args_list]


class TestStartup:
    @pytest.mark.asyncio
    async def test_invalid_saved_time_is_reported(self, monkeypatch, sent, profile):
        profile.wake_up_time = "7am"
        monkeypatch.setattr(bot_main, "profile_store", MemoryProfileStore(profile))
        monkeypatch.setattr(bot_main, "alarm_facility", FakeAlarmFacility())

        await bot_main.startup()

        assert _texts(sent) == [hub.describe_error(InvalidTimeFormat("x"))]

    @pytest.mark.asyncio
    async def test_partial_failure_is_reported(self, monkeypatch, sent, profile):
        monkeypatch.setattr(bot_main, "profile_store", MemoryProfileStore(profile))
        monkeypatch.setattr(bot_main, "alarm_facility", FakeAlarmFacility(reject={1}))

        await bot_main.startup()

        assert len(sent.await_args_list) == 1
        assert "1 of" in _texts(sent)[0]

    @pytest.mark.asyncio
    async def test_clean_start_is_silent(self, monkeypatch, sent, profile):
        alarms = FakeAlarmFacility()
        monkeypatch.setattr(bot_main, "profile_store", MemoryProfileStore(profile))
        monkeypatch.setattr(bot_main, "alarm_facility", alarms)

        await bot_main.startup()

        sent.assert_not_awaited()
        assert alarms.installed


class TestDailyRollover:
    @pytest.mark.asyncio
    async def test_partial_failure_is_reported(self, monkeypatch, sent, profile):
        monkeypatch.setattr(bot_main, "profile_store", MemoryProfileStore(profile))
        monkeypatch.setattr(bot_main, "alarm_facility", FakeAlarmFacility(reject={0, 2}))

        await bot_main.run_daily_rollover()

        assert "2 of" in _texts(sent)[0]

    @pytest.mark.asyncio
    async def test_without_profile_does_nothing(self, monkeypatch, sent):
        monkeypatch.setattr(bot_main, "profile_store", MemoryProfileStore())

        await bot_main.run_daily_rollover()

        sent.assert_not_awaited()


class TestHandlerOrder:
    def test_commands_win_over_onboarding_states(self):
        callbacks = [h.callback for h in bot_main.dp.message.handlers]
        first_state_handler = callbacks.index(bot_main.setup_gender_text)

        for command in (bot_main.cmd_start, bot_main.cmd_settings, bot_main.cmd_reset):
            assert callbacks.index(command) < first_state_handler
