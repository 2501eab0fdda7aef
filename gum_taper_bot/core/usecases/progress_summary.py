"""Progress, savings and health milestones shown on the status hub."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field

from gum_taper_bot.core.entities.profile import UserProfile
from gum_taper_bot.core.usecases import program_clock
from gum_taper_bot.core.usecases.interval_policy import PROGRAM_WEEKS

# (upper bound in days, exclusive) → milestones; None is the final band
HEALTH_MILESTONES: list[tuple[int | None, list[str]]] = [
    (1, ["Your journey begins today!"]),
    (3, ["Blood oxygen levels are returning to normal", "Carbon monoxide levels are dropping"]),
    (7, ["Sense of taste and smell improving", "Breathing is becoming easier"]),
    (14, ["Circulation is improving", "Lung function is increasing"]),
    (30, ["Heart attack risk has started to drop", "Energy levels are increasing"]),
    (None, ["Significant health improvements achieved", "Keep going strong!"]),
]


@dataclass(slots=True)
class ProgressSummary:
    days_since_start: int
    week: int
    day_of_week: int  # 1..7
    daily_savings: float
    total_savings: float
    milestones: list[str] = field(default_factory=list)
    program_weeks: int = PROGRAM_WEEKS

    @property
    def total_progress(self) -> float:
        return self.week / self.program_weeks * 100

    @property
    def week_progress(self) -> float:
        return (self.day_of_week - 1) / program_clock.DAYS_PER_WEEK * 100


def health_milestones(days: int) -> list[str]:
    for upper, milestones in HEALTH_MILESTONES:
        if upper is None or days < upper:
            return list(milestones)
    return []


def execute(profile: UserProfile, now: dt.datetime | None = None) -> ProgressSummary:
    """Summarize the program so far. Raises InvalidTimeFormat on a corrupt start date."""
    now = now or dt.datetime.now()
    quit_start = program_clock.parse_quit_start(profile.quit_start)
    days = program_clock.days_since_start(quit_start, now)

    daily_savings = profile.cigarettes_per_day * profile.cigarette_price
    return ProgressSummary(
        days_since_start=days,
        week=program_clock.current_week(quit_start, now, max_week=PROGRAM_WEEKS),
        day_of_week=days % program_clock.DAYS_PER_WEEK + 1,
        daily_savings=daily_savings,
        total_savings=daily_savings * days,
        milestones=health_milestones(days),
    )
