"""Program week derived from the quit-start timestamp."""

from __future__ import annotations

import datetime as dt

from gum_taper_bot.core.entities.errors import InvalidTimeFormat

DAYS_PER_WEEK = 7


def parse_quit_start(raw: str) -> dt.datetime:
    """Parse the stored timestamp as a naive local wall-clock datetime."""
    try:
        parsed = dt.datetime.fromisoformat(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidTimeFormat(f"Invalid quit start timestamp: {raw!r}") from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def days_since_start(quit_start: dt.datetime, now: dt.datetime) -> int:
    elapsed = now - quit_start
    if elapsed < dt.timedelta(0):
        return 0
    return elapsed.days


def current_week(quit_start: dt.datetime, now: dt.datetime, max_week: int | None = None) -> int:
    """Return the 1-based program week; the start day itself is week 1."""
    week = days_since_start(quit_start, now) // DAYS_PER_WEEK + 1
    if max_week is not None:
        week = min(week, max_week)
    return week
