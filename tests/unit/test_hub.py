"""Tests for gum_taper_bot/utils/hub.py"""

import datetime as dt

import pytest

from gum_taper_bot.core.entities.errors import ExcessiveSlotCount, InvalidTimeFormat, MissingProfile, WindowTooShort
from gum_taper_bot.core.usecases import progress_summary as progress_summary_uc
from gum_taper_bot.core.usecases.generate_reminder_times import generate, parse_time
from gum_taper_bot.utils import hub


class TestSplitByNow:
    def test_same_day(self):
        times = generate(parse_time("07:00"), parse_time("22:00"), 180)
        upcoming, done = hub.split_by_now(times, dt.datetime(2024, 3, 15, 12, 0))
        assert [t.hour for t in done] == [7, 10]
        assert [t.hour for t in upcoming] == [13, 16, 19, 22]

    def test_after_midnight_slots_are_upcoming(self):
        times = generate(parse_time("18:00"), parse_time("02:00"), 120)
        upcoming, done = hub.split_by_now(times, dt.datetime(2024, 3, 15, 21, 0))
        assert [t.hour for t in done] == [18, 20]
        assert [t.hour for t in upcoming] == [22, 0, 2]


class TestBuildHubText:
    def test_contains_sections(self, profile, now):
        summary = progress_summary_uc.execute(profile, now)
        times = generate(parse_time("07:00"), parse_time("22:00"), 90)
        text = hub.build_hub_text(summary, 90, times, now)

        assert "Week 1 of 6" in text
        assert "Interval: 90 min" in text
        assert f"Today's reminders ({len(times)})" in text
        assert "Upcoming: 13:00" in text
        assert "620.00" in text
        assert "Carbon monoxide levels are dropping" in text


class TestProgressBar:
    def test_clamped(self):
        assert hub.progress_bar(250) == "🟩" * 10
        assert hub.progress_bar(-5) == "⬜" * 10


class TestDescribeError:
    @pytest.mark.parametrize(
        "exc,fragment",
        [
            (InvalidTimeFormat("x"), "HH:MM"),
            (WindowTooShort("x"), "too short"),
            (MissingProfile("x"), "/start"),
            (ExcessiveSlotCount("x"), "configuration"),
        ],
    )
    def test_categories(self, exc, fragment):
        assert fragment in hub.describe_error(exc)


class TestSplitByNowOvernightWindow:
    def test_before_wake_still_in_yesterdays_window(self):
        times = generate(parse_time("06:00"), parse_time("02:00"), 90)
        upcoming, done = hub.split_by_now(times, dt.datetime(2024, 3, 15, 1, 0))

        assert done[-1] == dt.time(0, 0)
        assert upcoming == [dt.time(1, 30)]

    def test_after_window_closed_everything_is_upcoming(self):
        times = generate(parse_time("06:00"), parse_time("02:00"), 90)
        upcoming, done = hub.split_by_now(times, dt.datetime(2024, 3, 15, 3, 0))

        assert done == []
        assert upcoming == times

    def test_empty(self):
        assert hub.split_by_now([], dt.datetime(2024, 3, 15, 3, 0)) == ([], [])


class TestBuildConfirmationText:
    def test_lists_onboarding_answers(self, profile):
        profile.gender = "Female"
        profile.age = 34
        profile.years_of_smoking = 12

        text = hub.build_confirmation_text(profile)

        assert "Gender: Female" in text
        assert "Age: 34" in text
        assert "Daily cigarettes: 20" in text
        assert "Price per cigarette: 15.50" in text
        assert "Years of smoking: 12" in text
        assert "Wake up time: 07:00" in text
        assert "Sleep time: 22:00" in text
        assert "Daily spending: 310.00" in text
        assert "Yearly spending: 113150.00" in text


class TestGenderKeyboard:
    def test_callbacks_carry_prefix(self):
        keyboard = hub.build_gender_keyboard()
        data = [b.callback_data for row in keyboard.inline_keyboard for b in row]
        assert data == ["GENDER:Male", "GENDER:Female"]
