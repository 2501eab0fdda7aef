"""Utilities to build the status hub and reminder messages."""

from __future__ import annotations

import datetime as dt

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from gum_taper_bot.core.entities.errors import (
    ConfigurationError,
    InvalidTimeFormat,
    MissingProfile,
    SchedulingError,
    WindowTooShort,
)
from gum_taper_bot.core.entities.profile import UserProfile
from gum_taper_bot.core.usecases.generate_reminder_times import TIME_FORMAT
from gum_taper_bot.core.usecases.progress_summary import ProgressSummary


def progress_bar(percent: float, length: int = 10) -> str:
    filled = int(percent / 100 * length)
    filled = min(max(filled, 0), length)
    return "🟩" * filled + "⬜" * (length - filled)


def _as_datetimes(reminder_times: list[dt.time], day: dt.date) -> list[dt.datetime]:
    """Lay waking-order times on a calendar starting at ``day``."""
    result: list[dt.datetime] = []
    for t in reminder_times:
        at = dt.datetime.combine(day, t)
        if result and at < result[-1]:
            day += dt.timedelta(days=1)
            at = dt.datetime.combine(day, t)
        result.append(at)
    return result


def split_by_now(reminder_times: list[dt.time], now: dt.datetime) -> tuple[list[dt.time], list[dt.time]]:
    """Split the current waking window's times into (upcoming, completed).

    Times are in waking order, so a time earlier than its predecessor
    belongs to the next calendar day. Before today's wake time the window
    that started yesterday is still current while its last slot has not
    passed.
    """
    if not reminder_times:
        return [], []
    today = now.date()
    anchor = today
    if dt.datetime.combine(today, reminder_times[0]) > now:
        yesterday = _as_datetimes(reminder_times, today - dt.timedelta(days=1))
        if now <= yesterday[-1]:
            anchor = today - dt.timedelta(days=1)

    upcoming: list[dt.time] = []
    done: list[dt.time] = []
    for t, at in zip(reminder_times, _as_datetimes(reminder_times, anchor)):
        if at > now:
            upcoming.append(t)
        else:
            done.append(t)
    return upcoming, done


def build_hub_text(
    summary: ProgressSummary,
    spacing_minutes: int,
    reminder_times: list[dt.time],
    now: dt.datetime,
) -> str:
    lines: list[str] = ["🚭 <b>Nicotine gum taper</b>"]

    lines.append(f"Week {summary.week} of {summary.program_weeks}  {progress_bar(summary.total_progress)}")
    lines.append(f"Day {summary.day_of_week} of week {summary.week}  {progress_bar(summary.week_progress)}")
    lines.append(f"⏱️ Interval: {spacing_minutes} min")

    upcoming, done = split_by_now(reminder_times, now)
    lines.append("")
    lines.append(f"<b>Today's reminders ({len(reminder_times)})</b>")
    if upcoming:
        lines.append("Upcoming: " + ", ".join(t.strftime(TIME_FORMAT) for t in upcoming))
    if done:
        lines.append("Completed: " + ", ".join(t.strftime(TIME_FORMAT) for t in reversed(done)))

    # Savings
    lines.append("")
    lines.append(f"💰 Saved so far: {summary.total_savings:.2f}")
    lines.append(f"Daily savings: {summary.daily_savings:.2f}")

    lines.append("")
    lines.append("<b>Health milestones</b>")
    lines.extend(f"• {m}" for m in summary.milestones)

    return "\n".join(lines)


def build_hub_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="ℹ️ FAQ", callback_data="FAQ"),
                InlineKeyboardButton(text="🔄 Refresh", callback_data="REFRESH"),
            ]
        ]
    )


def build_reminder_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [
                InlineKeyboardButton(text="✅ Take", callback_data="TAKE"),
                InlineKeyboardButton(text="😴 Snooze (5m)", callback_data="SNOOZE"),
            ]
        ]
    )


def describe_error(exc: SchedulingError) -> str:
    """Short user-facing text for a scheduling failure."""
    if isinstance(exc, InvalidTimeFormat):
        return "⚠️ A saved time is not valid. Use HH:MM, e.g. /settings 07:00 23:00"
    if isinstance(exc, WindowTooShort):
        return "⚠️ Your waking window is too short to schedule reminders."
    if isinstance(exc, MissingProfile):
        return "⚠️ Finish setup first with /start."
    if isinstance(exc, ConfigurationError):
        return "⚠️ Reminders could not be planned because of a configuration problem."
    return "⚠️ Some reminders could not be scheduled."


GENDER_PREFIX = "GENDER:"
GENDERS = ("Male", "Female")


def build_gender_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text=g, callback_data=f"{GENDER_PREFIX}{g}") for g in GENDERS]
        ]
    )


def build_confirmation_text(profile: UserProfile) -> str:
    """Summary shown once onboarding is finished."""
    daily = profile.cigarettes_per_day * profile.cigarette_price
    lines = [
        "📋 <b>Your details</b>",
        f"Gender: {profile.gender}",
        f"Age: {profile.age}",
        f"Daily cigarettes: {profile.cigarettes_per_day}",
        f"Price per cigarette: {profile.cigarette_price:.2f}",
        f"Years of smoking: {profile.years_of_smoking}",
        f"Wake up time: {profile.wake_up_time}",
        f"Sleep time: {profile.sleep_time}",
        "",
        f"💸 Daily spending: {daily:.2f}",
        f"Yearly spending: {daily * 365:.2f}",
    ]
    return "\n".join(lines)
