"""Week → reminder spacing table for the six-week taper."""

from __future__ import annotations

PROGRAM_WEEKS = 6

# week number → minutes between reminders; weeks past the table use the last tier
SPACING_BY_WEEK: dict[int, int] = {
    1: 90,
    2: 120,
    3: 150,
    4: 180,
    5: 210,
    6: 240,
}


def spacing_minutes(week: int) -> int:
    week = min(max(week, 1), PROGRAM_WEEKS)
    return SPACING_BY_WEEK[week]
