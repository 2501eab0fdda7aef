"""Projection of the user's onboarding answers used by the scheduler."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class UserProfile:
    wake_up_time: str  # "HH:MM", 24h
    sleep_time: str  # "HH:MM", may be earlier than wake_up_time
    quit_start: str | None = None  # ISO-8601, day 0 of the program
    cigarettes_per_day: int = 0
    cigarette_price: float = 0.0  # price of a single cigarette
    years_of_smoking: int = 0
    age: int = 0
    gender: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.wake_up_time and self.sleep_time and self.quit_start)
