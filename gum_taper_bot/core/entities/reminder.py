"""Reminder slots and the outcome of a reschedule run."""

from __future__ import annotations

import datetime as dt
import enum
from dataclasses import dataclass, field

from gum_taper_bot.core.entities.errors import RegistrationFailure


class RescheduleTrigger(str, enum.Enum):
    APP_START = "app_start"  # also covers boot on a server host
    SETTINGS_SAVED = "settings_saved"
    DAILY_ROLLOVER = "daily_rollover"


@dataclass(slots=True)
class ReminderSlot:
    index: int  # doubles as the alarm registration id
    time: dt.time
    fires_at: dt.datetime | None = None


@dataclass(slots=True)
class RescheduleResult:
    trigger: RescheduleTrigger
    week: int
    spacing_minutes: int
    slots: list[ReminderSlot] = field(default_factory=list)
    failures: list[RegistrationFailure] = field(default_factory=list)

    @property
    def installed(self) -> int:
        return len(self.slots) - len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures
